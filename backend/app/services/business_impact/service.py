"""
Business Impact Service

Entry point of the impact propagation engine. Maps changed files to the rules
they implement, runs one bounded traversal over the rule dependency graph and
derives the chain view and the graph view from that single result.

READ-ONLY: does not score risk, decide approvals or persist anything.

Example:
    >>> service = BusinessImpactService.from_catalog(catalog)
    >>> chain = service.compute_impact_chain(["src/payment/validator.py"])
    >>> [r.rule_id for r in chain.indirect_impacts]
    ['BR-INVOICE-003']
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ...config import Settings, get_settings
from ...models.enums import ImpactLevel
from ...repositories.rule_catalog import (
    BusinessRuleRepository,
    FileRuleMappingRepository,
    IncidentRepository,
    InMemoryRuleCatalog,
    OwnershipRepository,
    ProjectRepository,
    RuleDependencyRepository,
)
from .aggregator import build_chain_view, build_graph_view, build_summary
from .exceptions import InvalidImpactRequestError, ProjectNotFoundError, RuleCatalogUnavailableError
from .graph_builder import RuleGraph
from .models import ImpactChainReport, ImpactGraphReport, ProjectContext
from .traversal import ImpactTraversal, propagate_impact

logger = logging.getLogger(__name__)


def validate_changed_files(changed_files: Optional[Sequence[str]]) -> List[str]:
    """
    Request-layer validation of the changed file list.

    Blank entries are removed; duplicates are kept once in original order.

    Raises:
        InvalidImpactRequestError: If the list is missing or has no usable path
    """
    if not changed_files:
        raise InvalidImpactRequestError("changed_files must not be empty")

    cleaned = list(dict.fromkeys(path.strip() for path in changed_files if path and path.strip()))
    if not cleaned:
        raise InvalidImpactRequestError("changed_files must contain at least one file path")
    return cleaned


@dataclass
class ImpactAnalysis:
    """
    One request's traversal plus the context needed to project it.

    Reuse one instance for both projections instead of traversing twice.
    """

    traversal: ImpactTraversal
    graph: RuleGraph
    changed_files_by_rule: Dict[str, List[str]] = field(default_factory=dict)
    pull_request_id: Optional[str] = None
    project_context: ProjectContext = field(default_factory=ProjectContext.global_scope)


class BusinessImpactService:
    """
    Computes which business rules a change touches, directly and transitively.

    Each call builds its own RuleGraph and traversal state; instances hold only
    the read-only repositories and settings, so one service can serve
    concurrent requests.
    """

    def __init__(
        self,
        mappings: FileRuleMappingRepository,
        rules: BusinessRuleRepository,
        dependencies: RuleDependencyRepository,
        ownerships: OwnershipRepository,
        incidents: IncidentRepository,
        projects: Optional[ProjectRepository] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()

        self.mappings = mappings
        self.rules = rules
        self.dependencies = dependencies
        self.ownerships = ownerships
        self.incidents = incidents
        self.projects = projects

        self.max_depth = settings.impact_max_depth
        self.executive_attention_threshold = settings.executive_attention_threshold

    @classmethod
    def from_catalog(cls, catalog: InMemoryRuleCatalog, settings: Optional[Settings] = None) -> "BusinessImpactService":
        """Wire every port to a single catalog implementation."""
        return cls(
            mappings=catalog,
            rules=catalog,
            dependencies=catalog,
            ownerships=catalog,
            incidents=catalog,
            projects=catalog,
            settings=settings,
        )

    def _resolve_project_context(self, project_id: Optional[str]) -> ProjectContext:
        if project_id is None:
            logger.info("Global analysis (no project scope)")
            return ProjectContext.global_scope()

        project = self.projects.get_project(project_id) if self.projects else None
        if project is None:
            raise ProjectNotFoundError(project_id)

        logger.info(f"Analysis scoped to project {project.name} ({project.id})")
        return ProjectContext.scoped(project.id, project.name)

    def _map_changed_files(self, changed_files: Sequence[str]) -> Dict[str, List[str]]:
        """Seed rule id -> changed files implementing it, in discovery order."""
        try:
            mappings = self.mappings.lookup_direct_rules(changed_files)
        except Exception as e:
            logger.error(f"File to rule mapping lookup failed: {e}")
            raise RuleCatalogUnavailableError("Unable to map changed files to business rules") from e

        files_by_rule: Dict[str, List[str]] = {}
        for mapping in mappings:
            files = files_by_rule.setdefault(mapping.rule_id, [])
            if mapping.file_path not in files:
                files.append(mapping.file_path)
        return files_by_rule

    def analyze(
        self,
        changed_files: Sequence[str],
        pull_request_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> ImpactAnalysis:
        """
        Run the impact traversal for a set of changed files.

        Args:
            changed_files: Paths changed by the Pull Request
            pull_request_id: Optional identifier echoed in reports
            project_id: Optional project scope

        Returns:
            ImpactAnalysis to feed chain_report() and graph_report()

        Raises:
            ProjectNotFoundError: If project_id is given and unknown
            RuleCatalogUnavailableError: If a repository fails
        """
        logger.info(f"Starting impact analysis for PR {pull_request_id or '<unnamed>'}: {len(changed_files)} files")

        project_context = self._resolve_project_context(project_id)
        graph = RuleGraph(self.rules, self.dependencies)

        files_by_rule = self._map_changed_files(changed_files)
        seeds = graph.resolve_seeds(files_by_rule)
        logger.info(f"{len(seeds)} rules directly impacted")

        traversal = propagate_impact(seeds, graph.neighbors, max_depth=self.max_depth)

        logger.info(
            f"Impact traversal finished: {len(traversal)} rules affected "
            f"({len(traversal.by_level(ImpactLevel.INDIRECT))} indirect, "
            f"{len(traversal.by_level(ImpactLevel.CASCADE))} cascade)"
        )
        logger.debug(f"Rule graph statistics: {graph.get_statistics()}")

        return ImpactAnalysis(
            traversal=traversal,
            graph=graph,
            changed_files_by_rule={rule_id: files_by_rule[rule_id] for rule_id in seeds},
            pull_request_id=pull_request_id,
            project_context=project_context,
        )

    def chain_report(self, analysis: ImpactAnalysis) -> ImpactChainReport:
        chain = build_chain_view(analysis.traversal, analysis.graph, self.ownerships, analysis.changed_files_by_rule)
        summary = build_summary(
            ((rule.impact_level, rule.criticality) for rules in chain.values() for rule in rules),
            threshold=self.executive_attention_threshold,
        )
        return ImpactChainReport(
            pull_request_id=analysis.pull_request_id,
            direct_impacts=chain[ImpactLevel.DIRECT],
            indirect_impacts=chain[ImpactLevel.INDIRECT],
            cascade_impacts=chain[ImpactLevel.CASCADE],
            summary=summary,
            project_context=analysis.project_context,
        )

    def graph_report(self, analysis: ImpactAnalysis) -> ImpactGraphReport:
        nodes, edges = build_graph_view(analysis.traversal, analysis.graph, self.ownerships, self.incidents)
        summary = build_summary(
            ((node.impact_level, node.criticality) for node in nodes),
            threshold=self.executive_attention_threshold,
        )
        logger.info(f"Impact graph built: {len(nodes)} nodes, {len(edges)} edges")
        return ImpactGraphReport(
            pull_request_id=analysis.pull_request_id,
            nodes=nodes,
            edges=edges,
            summary=summary,
            project_context=analysis.project_context,
        )

    def compute_impact_chain(
        self,
        changed_files: Sequence[str],
        pull_request_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> ImpactChainReport:
        """Impact chain grouped by DIRECT, INDIRECT and CASCADE."""
        return self.chain_report(self.analyze(changed_files, pull_request_id, project_id))

    def compute_impact_graph(
        self,
        changed_files: Sequence[str],
        pull_request_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> ImpactGraphReport:
        """Renderable impact graph (nodes and edges)."""
        return self.graph_report(self.analyze(changed_files, pull_request_id, project_id))

    def compute_impact(
        self,
        changed_files: Sequence[str],
        pull_request_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> Tuple[ImpactChainReport, ImpactGraphReport]:
        """Both projections from a single traversal."""
        analysis = self.analyze(changed_files, pull_request_id, project_id)
        return self.chain_report(analysis), self.graph_report(analysis)
