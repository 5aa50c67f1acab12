"""
Impact Classifier & Aggregator

Pure transformations from one ImpactTraversal into the two public projections
(chain view and graph view) and their executive summary. Nothing here
re-traverses the graph.

A traced rule that no longer resolves is dropped from both projections, so
the set of rule ids in the chain equals the set of graph node ids.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ...models.enums import Criticality, ImpactLevel
from ...models.rule_models import BusinessRule, Ownership
from ...repositories.rule_catalog import IncidentRepository, OwnershipRepository
from .exceptions import RuleCatalogUnavailableError
from .graph_builder import RuleGraph
from .models import (
    ImpactedRule,
    ImpactGraphEdge,
    ImpactGraphNode,
    ImpactSummary,
    OwnershipInfo,
    OwnershipResponse,
)
from .traversal import ImpactTrace, ImpactTraversal

logger = logging.getLogger(__name__)

# Totals above this raise the executive attention flag
DEFAULT_EXECUTIVE_ATTENTION_THRESHOLD = 10

# Criticality at or above this raises the executive attention flag
EXECUTIVE_ATTENTION_CRITICALITY = Criticality.HIGH


def _resolved_traces(traversal: ImpactTraversal, graph: RuleGraph) -> List[Tuple[ImpactTrace, BusinessRule]]:
    resolved = []
    for trace in traversal:
        rule = graph.resolve(trace.rule_id)
        if rule is None:
            logger.warning(f"Impacted rule {trace.rule_id} no longer resolves - dropped from output")
            continue
        resolved.append((trace, rule))
    return resolved


def _load_ownerships(ownerships: OwnershipRepository, rule_id: str) -> List[Ownership]:
    try:
        return ownerships.get_ownerships(rule_id)
    except Exception as e:
        logger.error(f"Ownership lookup failed for {rule_id}: {e}")
        raise RuleCatalogUnavailableError(f"Unable to load ownerships of {rule_id}") from e


def _has_incidents(incidents: IncidentRepository, rule_id: str) -> bool:
    try:
        return incidents.has_incidents(rule_id)
    except Exception as e:
        logger.error(f"Incident lookup failed for {rule_id}: {e}")
        raise RuleCatalogUnavailableError(f"Unable to load incidents of {rule_id}") from e


def build_chain_view(
    traversal: ImpactTraversal,
    graph: RuleGraph,
    ownerships: OwnershipRepository,
    changed_files_by_rule: Optional[Mapping[str, List[str]]] = None,
) -> Dict[ImpactLevel, List[ImpactedRule]]:
    """
    Partition the traversal into DIRECT, INDIRECT and CASCADE lists.

    Args:
        traversal: Canonical traversal result
        graph: Rule graph used to resolve names and criticality
        ownerships: Ownership repository
        changed_files_by_rule: Seed rule id -> changed files implementing it

    Returns:
        Dict keyed by every ImpactLevel, each list in discovery order
    """
    changed_files_by_rule = changed_files_by_rule or {}
    chain: Dict[ImpactLevel, List[ImpactedRule]] = {level: [] for level in ImpactLevel}

    for trace, rule in _resolved_traces(traversal, graph):
        owners = [
            OwnershipResponse(
                team_name=o.team_name,
                team_type=o.team_type,
                role=o.role,
                contact_email=o.contact_email,
                approval_required=o.approval_required,
            )
            for o in _load_ownerships(ownerships, rule.id)
        ]
        files = list(changed_files_by_rule.get(rule.id, [])) if trace.level == ImpactLevel.DIRECT else []

        chain[trace.level].append(
            ImpactedRule(
                rule_id=rule.id,
                rule_name=rule.name,
                criticality=rule.criticality,
                impact_level=trace.level,
                dependency_path=list(trace.path),
                ownerships=owners,
                changed_files=files,
            )
        )

    return chain


def build_graph_view(
    traversal: ImpactTraversal,
    graph: RuleGraph,
    ownerships: OwnershipRepository,
    incidents: IncidentRepository,
) -> Tuple[List[ImpactGraphNode], List[ImpactGraphEdge]]:
    """
    Build graph nodes and edges for visualization.

    Edges are limited to pairs whose both endpoints are nodes, so the
    rendered graph never references an unreached rule.
    """
    nodes = []
    for trace, rule in _resolved_traces(traversal, graph):
        nodes.append(
            ImpactGraphNode(
                rule_id=rule.id,
                rule_name=rule.name,
                domain=rule.domain,
                criticality=rule.criticality,
                impact_level=trace.level,
                ownerships=[
                    OwnershipInfo(team_name=o.team_name, role=o.role) for o in _load_ownerships(ownerships, rule.id)
                ],
                has_incidents=_has_incidents(incidents, rule.id),
            )
        )

    edges = [
        ImpactGraphEdge(
            source_rule_id=edge.source_rule_id,
            target_rule_id=edge.target_rule_id,
            dependency_type=edge.dependency_type,
            label=edge.dependency_type.label,
        )
        for edge in graph.edges_within(node.rule_id for node in nodes)
    ]

    return nodes, edges


def build_summary(
    impacts: Iterable[Tuple[ImpactLevel, Criticality]],
    threshold: int = DEFAULT_EXECUTIVE_ATTENTION_THRESHOLD,
) -> ImpactSummary:
    """
    Summarize impacted rules for executives.

    Executive attention is required when the highest criticality is HIGH or
    above, or when more than ``threshold`` rules are affected. The two
    conditions are OR'd.

    Args:
        impacts: (impact level, criticality) for every included rule
        threshold: Rule count above which attention is required

    Returns:
        ImpactSummary; all zeros and no attention for an empty input
    """
    counts = {level: 0 for level in ImpactLevel}
    criticalities = []
    for level, criticality in impacts:
        counts[level] += 1
        criticalities.append(criticality)

    total = len(criticalities)
    highest = Criticality.highest(criticalities)
    requires_attention = (highest is not None and highest >= EXECUTIVE_ATTENTION_CRITICALITY) or total > threshold

    return ImpactSummary(
        total_rules_affected=total,
        direct=counts[ImpactLevel.DIRECT],
        indirect=counts[ImpactLevel.INDIRECT],
        cascade=counts[ImpactLevel.CASCADE],
        critical_rules=sum(1 for c in criticalities if c == Criticality.CRITICAL),
        highest_criticality=highest,
        requires_executive_attention=requires_attention,
    )
