"""
Business Impact Data Models

Type-safe Pydantic models for the impact chain and impact graph projections.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from ...models.enums import Criticality, DependencyType, Domain, ImpactLevel, OwnershipRole, TeamType


class OwnershipResponse(BaseModel):
    """Full ownership record attached to a chain entry."""

    team_name: str
    team_type: TeamType
    role: OwnershipRole
    contact_email: Optional[str] = None
    approval_required: bool = False


class OwnershipInfo(BaseModel):
    """Compact owner summary attached to a graph node."""

    team_name: str
    role: OwnershipRole


class ImpactedRule(BaseModel):
    """
    One rule in the impact chain.

    ``dependency_path`` runs from the seed rule to this rule inclusive, so it
    has length 1 for DIRECT impacts. It is one valid shortest path, not the
    only one.
    """

    rule_id: str = Field(..., description="Business rule ID")
    rule_name: str = Field(..., description="Business rule name")
    criticality: Criticality
    impact_level: ImpactLevel
    dependency_path: List[str] = Field(default_factory=list)
    ownerships: List[OwnershipResponse] = Field(default_factory=list)
    changed_files: List[str] = Field(
        default_factory=list, description="Changed files implementing the rule (DIRECT only)"
    )


class ImpactSummary(BaseModel):
    """Executive summary shared by the chain and graph views."""

    total_rules_affected: int = Field(0, ge=0)
    direct: int = Field(0, ge=0)
    indirect: int = Field(0, ge=0)
    cascade: int = Field(0, ge=0)
    critical_rules: int = Field(0, ge=0, description="Rules rated CRITICAL")
    highest_criticality: Optional[Criticality] = Field(None, description="None when nothing is impacted")
    requires_executive_attention: bool = False


class ProjectContext(BaseModel):
    """Scope an analysis ran under."""

    scope: str = Field("global", description="global or scoped")
    project_id: Optional[str] = None
    project_name: Optional[str] = None

    @classmethod
    def global_scope(cls) -> "ProjectContext":
        return cls(scope="global")

    @classmethod
    def scoped(cls, project_id: str, project_name: str) -> "ProjectContext":
        return cls(scope="scoped", project_id=project_id, project_name=project_name)


class ImpactChainReport(BaseModel):
    """Impact chain grouped by level."""

    pull_request_id: Optional[str] = None
    direct_impacts: List[ImpactedRule] = Field(default_factory=list)
    indirect_impacts: List[ImpactedRule] = Field(default_factory=list)
    cascade_impacts: List[ImpactedRule] = Field(default_factory=list)
    summary: ImpactSummary = Field(default_factory=ImpactSummary)
    project_context: ProjectContext = Field(default_factory=ProjectContext.global_scope)


class ImpactGraphNode(BaseModel):
    rule_id: str
    rule_name: str
    domain: Domain
    criticality: Criticality
    impact_level: ImpactLevel
    ownerships: List[OwnershipInfo] = Field(default_factory=list)
    has_incidents: bool = False


class ImpactGraphEdge(BaseModel):
    source_rule_id: str
    target_rule_id: str
    dependency_type: DependencyType
    label: str = ""


class ImpactGraphReport(BaseModel):
    """Renderable graph: nodes and edges restricted to impacted rules."""

    pull_request_id: Optional[str] = None
    nodes: List[ImpactGraphNode] = Field(default_factory=list)
    edges: List[ImpactGraphEdge] = Field(default_factory=list)
    summary: ImpactSummary = Field(default_factory=ImpactSummary)
    project_context: ProjectContext = Field(default_factory=ProjectContext.global_scope)


class BusinessImpactRequest(BaseModel):
    """Pull Request analysis request."""

    pull_request_id: str = Field(..., min_length=1, description="Pull Request identifier")
    changed_files: Optional[List[str]] = Field(None, description="Paths changed by the Pull Request")
    project_id: Optional[str] = Field(None, description="Optional project scope")
