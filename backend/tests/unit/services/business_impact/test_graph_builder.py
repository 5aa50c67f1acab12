"""
Unit tests for the request-scoped rule graph.

Tests stale reference tolerance, neighbor de-duplication, edge filtering and
repository failure wrapping.
"""

import logging
from typing import List, Optional

import pytest

from app.models.enums import DependencyType
from app.models.rule_models import BusinessRule, DependencyEdge
from app.repositories.rule_catalog import InMemoryRuleCatalog
from app.services.business_impact import RuleCatalogUnavailableError
from app.services.business_impact.graph_builder import RuleGraph


class CountingCatalog(InMemoryRuleCatalog):
    """Catalog recording every repository call."""

    def __init__(self):
        super().__init__()
        self.rule_calls: List[str] = []
        self.edge_calls: List[str] = []

    def get_rule(self, rule_id: str) -> Optional[BusinessRule]:
        self.rule_calls.append(rule_id)
        return super().get_rule(rule_id)

    def get_outgoing_edges(self, rule_id: str) -> List[DependencyEdge]:
        self.edge_calls.append(rule_id)
        return super().get_outgoing_edges(rule_id)


class BrokenCatalog(InMemoryRuleCatalog):
    def get_outgoing_edges(self, rule_id: str) -> List[DependencyEdge]:
        raise ConnectionError("catalog unreachable")


@pytest.mark.unit
class TestResolve:
    def test_known_rule(self, catalog_factory) -> None:
        catalog = catalog_factory(["A"])
        assert RuleGraph(catalog, catalog).resolve("A").name == "Rule A"

    def test_unknown_rule_is_none(self, catalog_factory) -> None:
        catalog = catalog_factory(["A"])
        assert RuleGraph(catalog, catalog).resolve("missing") is None

    def test_lookups_are_memoised(self) -> None:
        catalog = CountingCatalog()
        catalog.add_rule(BusinessRule("A", "Rule A"))
        graph = RuleGraph(catalog, catalog)

        graph.resolve("A")
        graph.resolve("A")
        graph.resolve("missing")
        graph.resolve("missing")

        assert catalog.rule_calls == ["A", "missing"]


@pytest.mark.unit
class TestNeighbors:
    def test_edge_to_unknown_rule_skipped(self, catalog_factory) -> None:
        catalog = catalog_factory(["A", "B"], edges=[("A", "B"), ("A", "GHOST")])
        graph = RuleGraph(catalog, catalog)

        assert graph.neighbors("A") == ["B"]

    def test_parallel_edges_collapse(self, catalog_factory) -> None:
        catalog = catalog_factory(["A", "B"], edges=[("A", "B")])
        catalog.add_edge(DependencyEdge("A", "B", DependencyType.VALIDATES))
        graph = RuleGraph(catalog, catalog)

        assert graph.neighbors("A") == ["B"]
        assert len(graph.outgoing_edges("A")) == 2

    def test_self_loop_is_returned(self, catalog_factory) -> None:
        catalog = catalog_factory(["A"], edges=[("A", "A")])
        assert RuleGraph(catalog, catalog).neighbors("A") == ["A"]

    def test_self_loop_logged(self, catalog_factory, caplog) -> None:
        catalog = catalog_factory(["A"], edges=[("A", "A")])

        with caplog.at_level(logging.DEBUG, logger="app.services.business_impact.graph_builder"):
            RuleGraph(catalog, catalog).outgoing_edges("A")

        assert any(r.getMessage().startswith("Self-loop on rule A") for r in caplog.records)

    def test_rule_without_edges(self, catalog_factory) -> None:
        catalog = catalog_factory(["A"])
        assert RuleGraph(catalog, catalog).neighbors("A") == []

    def test_edges_fetched_once_per_rule(self) -> None:
        catalog = CountingCatalog()
        catalog.add_rule(BusinessRule("A", "Rule A"))
        catalog.add_rule(BusinessRule("B", "Rule B"))
        catalog.add_edge(DependencyEdge("A", "B"))
        graph = RuleGraph(catalog, catalog)

        graph.neighbors("A")
        graph.neighbors("A")
        graph.edges_within(["A", "B"])

        assert catalog.edge_calls == ["A", "B"]

    def test_repository_failure_is_wrapped(self) -> None:
        catalog = BrokenCatalog()
        catalog.add_rule(BusinessRule("A", "Rule A"))
        graph = RuleGraph(catalog, catalog)

        with pytest.raises(RuleCatalogUnavailableError) as exc_info:
            graph.neighbors("A")
        assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.unit
class TestResolveSeeds:
    def test_stale_and_duplicate_seeds_dropped(self, catalog_factory) -> None:
        catalog = catalog_factory(["A", "B"])
        graph = RuleGraph(catalog, catalog)

        assert graph.resolve_seeds(["B", "stale", "A", "B"]) == ["B", "A"]

    def test_stale_seed_logged_as_warning(self, catalog_factory, caplog) -> None:
        catalog = catalog_factory(["A"])

        with caplog.at_level(logging.WARNING, logger="app.services.business_impact.graph_builder"):
            RuleGraph(catalog, catalog).resolve_seeds(["A", "ghost"])

        assert any("ghost" in r.getMessage() and r.levelno == logging.WARNING for r in caplog.records)

    def test_empty(self, catalog_factory) -> None:
        catalog = catalog_factory(["A"])
        assert RuleGraph(catalog, catalog).resolve_seeds([]) == []


@pytest.mark.unit
class TestEdgesWithin:
    def test_only_edges_between_members(self, catalog_factory) -> None:
        catalog = catalog_factory(["A", "B", "C"], edges=[("A", "B"), ("B", "C"), ("C", "A")])
        graph = RuleGraph(catalog, catalog)

        edges = graph.edges_within(["A", "B"])

        assert [(e.source_rule_id, e.target_rule_id) for e in edges] == [("A", "B")]

    def test_parallel_edges_all_kept(self, catalog_factory) -> None:
        catalog = catalog_factory(["A", "B"], edges=[("A", "B")])
        catalog.add_edge(DependencyEdge("A", "B", DependencyType.DERIVES_FROM))
        graph = RuleGraph(catalog, catalog)

        types = [e.dependency_type for e in graph.edges_within(["A", "B"])]
        assert types == [DependencyType.FEEDS, DependencyType.DERIVES_FROM]

    def test_statistics(self, catalog_factory) -> None:
        catalog = catalog_factory(["A", "B"], edges=[("A", "B"), ("A", "GHOST")])
        graph = RuleGraph(catalog, catalog)
        graph.neighbors("A")

        stats = graph.get_statistics()
        assert stats["resolved_rules"] == 1
        assert stats["stale_rule_ids"] == 1
        assert stats["expanded_rules"] == 1
        assert stats["edges_loaded"] == 1
