"""
Business Rule Impact Propagation Engine

Discovers every business rule a Pull Request affects, directly or through the
rule dependency graph, and projects the result as a chain report and a
renderable graph.

Architecture:
    changed files -> file/rule mappings -> seed rules
        -> RuleGraph (neighbors expanded on demand)
        -> propagate_impact (BFS, depth <= 3, visited marked at enqueue)
        -> chain view + graph view + summary (one traversal, two projections)

Layers:
    graph_builder: Request-scoped adjacency over the catalog repositories
    traversal: Cycle-safe bounded breadth-first propagation
    aggregator: Chain view, graph view and executive summary
    service: Request entry point wiring the layers together

Usage:
    >>> from app.services.business_impact import get_business_impact_service
    >>> service = get_business_impact_service()
    >>> chain, graph = service.compute_impact(["src/billing/invoice.py"], pull_request_id="PR-42")
    >>> chain.summary.requires_executive_attention
    False
"""

import logging
from functools import lru_cache

from ...config import get_settings
from ...repositories.rule_catalog import InMemoryRuleCatalog
from .aggregator import build_chain_view, build_graph_view, build_summary
from .exceptions import (
    ImpactAnalysisError,
    InvalidImpactRequestError,
    ProjectNotFoundError,
    RuleCatalogUnavailableError,
)
from .graph_builder import RuleGraph
from .models import (
    BusinessImpactRequest,
    ImpactChainReport,
    ImpactedRule,
    ImpactGraphEdge,
    ImpactGraphNode,
    ImpactGraphReport,
    ImpactSummary,
    OwnershipInfo,
    OwnershipResponse,
    ProjectContext,
)
from .service import BusinessImpactService, ImpactAnalysis, validate_changed_files
from .traversal import DEFAULT_MAX_DEPTH, ImpactTrace, ImpactTraversal, impact_level_for_depth, propagate_impact

logger = logging.getLogger(__name__)

__all__ = [
    # Main service
    "BusinessImpactService",
    "ImpactAnalysis",
    "get_business_impact_service",
    "load_rule_catalog",
    "validate_changed_files",
    # Engine layers
    "RuleGraph",
    "propagate_impact",
    "impact_level_for_depth",
    "ImpactTrace",
    "ImpactTraversal",
    "DEFAULT_MAX_DEPTH",
    "build_chain_view",
    "build_graph_view",
    "build_summary",
    # Models
    "BusinessImpactRequest",
    "ImpactChainReport",
    "ImpactedRule",
    "ImpactGraphEdge",
    "ImpactGraphNode",
    "ImpactGraphReport",
    "ImpactSummary",
    "OwnershipInfo",
    "OwnershipResponse",
    "ProjectContext",
    # Exceptions
    "ImpactAnalysisError",
    "InvalidImpactRequestError",
    "ProjectNotFoundError",
    "RuleCatalogUnavailableError",
]


@lru_cache()
def load_rule_catalog() -> InMemoryRuleCatalog:
    """Load the configured catalog snapshot, or an empty catalog when none is configured."""
    settings = get_settings()
    if settings.rule_catalog_file:
        return InMemoryRuleCatalog.from_json_file(settings.rule_catalog_file)

    logger.warning("No rule catalog configured (ALERTA_RULE_CATALOG_FILE) - using an empty catalog")
    return InMemoryRuleCatalog()


def get_business_impact_service() -> BusinessImpactService:
    """Build the impact service over the configured catalog (FastAPI dependency)."""
    return BusinessImpactService.from_catalog(load_rule_catalog(), settings=get_settings())
