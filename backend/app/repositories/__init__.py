"""
Repository Pattern for Rule Catalog Access
Read-only ports consumed by the business impact engine
"""

from .rule_catalog import (
    BusinessRuleRepository,
    FileRuleMappingRepository,
    IncidentRepository,
    InMemoryRuleCatalog,
    OwnershipRepository,
    ProjectRepository,
    RuleDependencyRepository,
)

__all__ = [
    "BusinessRuleRepository",
    "FileRuleMappingRepository",
    "IncidentRepository",
    "InMemoryRuleCatalog",
    "OwnershipRepository",
    "ProjectRepository",
    "RuleDependencyRepository",
]
