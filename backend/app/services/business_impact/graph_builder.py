"""
Rule Graph Builder

Request-scoped adjacency view over the rule catalog. Neighbors are expanded on
demand during traversal and memoised, so each rule and edge list is fetched
from the repositories at most once per request.

Stale references never fail the build:
- seed ids that resolve to no rule are dropped
- edges pointing to unknown rules are skipped
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from ...models.rule_models import BusinessRule, DependencyEdge
from ...repositories.rule_catalog import BusinessRuleRepository, RuleDependencyRepository
from .exceptions import RuleCatalogUnavailableError

logger = logging.getLogger(__name__)

_MISSING = object()


class RuleGraph:
    """
    Lazily built dependency graph of business rules.

    Tracks:
    - Rules resolved so far (rule_id -> BusinessRule or None)
    - Outgoing edges per rule, filtered to resolvable targets

    Example:
        >>> graph = RuleGraph(catalog, catalog)
        >>> graph.neighbors("BR-PAYMENT-001")
        ['BR-INVOICE-003']
    """

    def __init__(self, rules: BusinessRuleRepository, dependencies: RuleDependencyRepository):
        self._rule_repo = rules
        self._dependency_repo = dependencies

        self._rules: Dict[str, Optional[BusinessRule]] = {}
        self._edges: Dict[str, List[DependencyEdge]] = {}

    def resolve(self, rule_id: str) -> Optional[BusinessRule]:
        """
        Look up a rule by id.

        Args:
            rule_id: Rule ID

        Returns:
            BusinessRule, or None if the id no longer resolves
        """
        cached = self._rules.get(rule_id, _MISSING)
        if cached is not _MISSING:
            return cached

        try:
            rule = self._rule_repo.get_rule(rule_id)
        except Exception as e:
            logger.error(f"Rule catalog lookup failed for {rule_id}: {e}")
            raise RuleCatalogUnavailableError(f"Unable to load rule {rule_id}") from e

        self._rules[rule_id] = rule
        return rule

    def outgoing_edges(self, rule_id: str) -> List[DependencyEdge]:
        """
        Outgoing edges of a rule whose target resolves.

        Args:
            rule_id: Source rule ID

        Returns:
            Edges in repository order, stale targets removed
        """
        if rule_id in self._edges:
            return self._edges[rule_id]

        try:
            raw_edges = self._dependency_repo.get_outgoing_edges(rule_id)
        except Exception as e:
            logger.error(f"Dependency lookup failed for {rule_id}: {e}")
            raise RuleCatalogUnavailableError(f"Unable to load dependencies of {rule_id}") from e

        edges = []
        for edge in raw_edges:
            if self.resolve(edge.target_rule_id) is None:
                logger.debug(f"Skipping edge {rule_id} -> {edge.target_rule_id}: target rule not found")
                continue
            if edge.is_self_loop:
                logger.debug(f"Self-loop on rule {rule_id} ({edge.dependency_type.value})")
            edges.append(edge)

        self._edges[rule_id] = edges
        return edges

    def neighbors(self, rule_id: str) -> List[str]:
        """
        Distinct downstream rule ids of ``rule_id``.

        Parallel edges of different types collapse to one neighbor; order
        follows the first edge seen for each target.
        """
        seen: Set[str] = set()
        targets = []
        for edge in self.outgoing_edges(rule_id):
            if edge.target_rule_id not in seen:
                seen.add(edge.target_rule_id)
                targets.append(edge.target_rule_id)
        return targets

    def resolve_seeds(self, rule_ids: Iterable[str]) -> List[str]:
        """
        De-duplicate seed ids preserving first occurrence, dropping stale ones.

        Args:
            rule_ids: Rule ids mapped from the changed files

        Returns:
            Resolvable seed ids in discovery order
        """
        seeds: List[str] = []
        seen: Set[str] = set()
        for rule_id in rule_ids:
            if rule_id in seen:
                continue
            seen.add(rule_id)
            if self.resolve(rule_id) is None:
                logger.warning(f"Seed rule {rule_id} not found in catalog - skipped")
                continue
            seeds.append(rule_id)
        return seeds

    def edges_within(self, rule_ids: Iterable[str]) -> List[DependencyEdge]:
        """
        Every edge whose source and target are both in ``rule_ids``.

        Used for the graph projection so no edge references an unreached rule.
        """
        members = list(dict.fromkeys(rule_ids))
        member_set = set(members)
        return [
            edge
            for source_id in members
            for edge in self.outgoing_edges(source_id)
            if edge.target_rule_id in member_set
        ]

    def get_statistics(self) -> Dict[str, int]:
        return {
            "resolved_rules": sum(1 for rule in self._rules.values() if rule is not None),
            "stale_rule_ids": sum(1 for rule in self._rules.values() if rule is None),
            "expanded_rules": len(self._edges),
            "edges_loaded": sum(len(v) for v in self._edges.values()),
        }
