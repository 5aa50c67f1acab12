"""
Business Rule Catalog Records

Immutable records read from the rule catalog at call time. The impact engine
never mutates them; they are frozen dataclasses so a catalog snapshot can be
shared between concurrent requests without locking.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .enums import Criticality, DependencyType, Domain, MappingImpactType, OwnershipRole, TeamType


@dataclass(frozen=True)
class BusinessRule:
    """
    A named, owned unit of business logic.

    Attributes:
        id: Opaque rule identifier (e.g. "BR-PAYMENT-001" or a UUID string)
        name: Human readable rule name
        domain: Business domain the rule belongs to
        criticality: Ordered criticality rating
        description: Business-language summary of the rule
    """

    id: str
    name: str
    domain: Domain = Domain.GENERIC
    criticality: Criticality = Criticality.MEDIUM
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BusinessRule":
        return cls(
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            domain=Domain(data.get("domain", Domain.GENERIC.value)),
            criticality=Criticality(data.get("criticality", Criticality.MEDIUM.value)),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class DependencyEdge:
    """
    Directed relation: if ``source_rule_id`` changes, ``target_rule_id`` may be affected.

    Several edges between the same pair with different types are allowed.
    """

    source_rule_id: str
    target_rule_id: str
    dependency_type: DependencyType = DependencyType.DEPENDS_ON
    description: str = ""

    @property
    def is_self_loop(self) -> bool:
        return self.source_rule_id == self.target_rule_id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DependencyEdge":
        return cls(
            source_rule_id=str(data["source_rule_id"]),
            target_rule_id=str(data["target_rule_id"]),
            dependency_type=DependencyType(data.get("dependency_type", DependencyType.DEPENDS_ON.value)),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class Ownership:
    """Team accountable for a rule."""

    rule_id: str
    team_name: str
    team_type: TeamType = TeamType.ENGINEERING
    role: OwnershipRole = OwnershipRole.PRIMARY_OWNER
    contact_email: Optional[str] = None
    approval_required: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ownership":
        return cls(
            rule_id=str(data["rule_id"]),
            team_name=data["team_name"],
            team_type=TeamType(data.get("team_type", TeamType.ENGINEERING.value)),
            role=OwnershipRole(data.get("role", OwnershipRole.PRIMARY_OWNER.value)),
            contact_email=data.get("contact_email"),
            approval_required=bool(data.get("approval_required", False)),
        )


@dataclass(frozen=True)
class FileRuleMapping:
    """A source file that implements (or influences) a business rule."""

    file_path: str
    rule_id: str
    impact_type: MappingImpactType = MappingImpactType.DIRECT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileRuleMapping":
        return cls(
            file_path=data["file_path"],
            rule_id=str(data["rule_id"]),
            impact_type=MappingImpactType(data.get("impact_type", MappingImpactType.DIRECT.value)),
        )


@dataclass(frozen=True)
class Project:
    """Optional scope for an analysis request."""

    id: str
    name: str
