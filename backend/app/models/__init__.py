"""
Alerta Models Package
Business rule catalog records and shared enums
"""

from .enums import Criticality, DependencyType, Domain, ImpactLevel, MappingImpactType, OwnershipRole, TeamType
from .rule_models import BusinessRule, DependencyEdge, FileRuleMapping, Ownership, Project

__all__ = [
    # Enums
    "Criticality",
    "DependencyType",
    "Domain",
    "ImpactLevel",
    "MappingImpactType",
    "OwnershipRole",
    "TeamType",
    # Catalog records
    "BusinessRule",
    "DependencyEdge",
    "FileRuleMapping",
    "Ownership",
    "Project",
]
