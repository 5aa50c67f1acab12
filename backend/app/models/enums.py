"""
Shared Enums

Common enumeration types used across the business rule catalog, the impact
propagation engine and the API layer. These are kept separate to avoid
circular imports between routes, services, and models.

Usage:
    from app.models.enums import Criticality, ImpactLevel
"""

from enum import Enum
from typing import Iterable, Optional


class Criticality(str, Enum):
    """
    Business criticality of a rule.

    Ordered LOW < MEDIUM < HIGH < CRITICAL. Comparison uses the declared rank,
    never the string value ("critical" < "high" alphabetically).
    """

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _CRITICALITY_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, Criticality):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Criticality):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Criticality):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Criticality):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def highest(cls, values: Iterable["Criticality"]) -> Optional["Criticality"]:
        """Return the highest criticality in ``values``, or None when empty."""
        return max(values, key=lambda c: c.rank, default=None)


_CRITICALITY_RANK = {
    Criticality.LOW: 0,
    Criticality.MEDIUM: 1,
    Criticality.HIGH: 2,
    Criticality.CRITICAL: 3,
}


class Domain(str, Enum):
    """Business domain a rule belongs to."""

    PAYMENT = "PAYMENT"
    BILLING = "BILLING"
    ORDER = "ORDER"
    USER = "USER"
    GENERIC = "GENERIC"


class DependencyType(str, Enum):
    """
    Nature of a directed relation between two business rules.

    The propagation engine only needs the existence of an edge; the type is
    carried through to the graph view for display.
    """

    DEPENDS_ON = "DEPENDS_ON"
    FEEDS = "FEEDS"
    VALIDATES = "VALIDATES"
    AGGREGATES = "AGGREGATES"
    DERIVES_FROM = "DERIVES_FROM"

    @property
    def label(self) -> str:
        return _DEPENDENCY_LABELS[self]


_DEPENDENCY_LABELS = {
    DependencyType.DEPENDS_ON: "Depends on",
    DependencyType.FEEDS: "Feeds",
    DependencyType.VALIDATES: "Validates",
    DependencyType.AGGREGATES: "Aggregates",
    DependencyType.DERIVES_FROM: "Derives from",
}


class ImpactLevel(str, Enum):
    """
    How far downstream of a changed file a rule sits.

    DIRECT: implemented by a changed file (depth 0)
    INDIRECT: one dependency hop away (depth 1)
    CASCADE: two or more hops away, up to the depth cap
    """

    DIRECT = "DIRECT"
    INDIRECT = "INDIRECT"
    CASCADE = "CASCADE"


class OwnershipRole(str, Enum):
    """Role a team plays for a rule. At most one PRIMARY_OWNER per rule."""

    PRIMARY_OWNER = "PRIMARY_OWNER"
    SECONDARY_OWNER = "SECONDARY_OWNER"
    BACKUP = "BACKUP"


class TeamType(str, Enum):
    ENGINEERING = "ENGINEERING"
    PRODUCT = "PRODUCT"
    OPERATIONS = "OPERATIONS"
    BUSINESS = "BUSINESS"


class MappingImpactType(str, Enum):
    """Tag on a file-to-rule mapping record."""

    DIRECT = "DIRECT"
    INDIRECT = "INDIRECT"
