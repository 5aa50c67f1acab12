"""
Rule Catalog Repositories

Read-only ports to the business rule catalog. The impact engine depends only
on these interfaces; storage (database, JSON snapshot, remote service) is the
concern of the concrete implementation.

InMemoryRuleCatalog implements every port over plain dictionaries. It backs
the unit tests, the default API wiring and catalog snapshots loaded from JSON.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..models.rule_models import BusinessRule, DependencyEdge, FileRuleMapping, Ownership, Project

logger = logging.getLogger(__name__)


class FileRuleMappingRepository(ABC):
    """Maps changed file paths to the rules they directly implement."""

    @abstractmethod
    def lookup_direct_rules(self, file_paths: Iterable[str]) -> List[FileRuleMapping]:
        """
        Return every mapping for the given paths.

        Mappings are returned in the order of ``file_paths``; a path with no
        mapping contributes nothing.
        """


class BusinessRuleRepository(ABC):
    @abstractmethod
    def get_rule(self, rule_id: str) -> Optional[BusinessRule]:
        """Return the rule or None when the id no longer resolves."""


class RuleDependencyRepository(ABC):
    @abstractmethod
    def get_outgoing_edges(self, rule_id: str) -> List[DependencyEdge]:
        """Return edges whose source is ``rule_id``."""


class OwnershipRepository(ABC):
    @abstractmethod
    def get_ownerships(self, rule_id: str) -> List[Ownership]:
        pass


class IncidentRepository(ABC):
    @abstractmethod
    def has_incidents(self, rule_id: str) -> bool:
        """True when production incidents are recorded against the rule."""


class ProjectRepository(ABC):
    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]:
        pass


class InMemoryRuleCatalog(
    FileRuleMappingRepository,
    BusinessRuleRepository,
    RuleDependencyRepository,
    OwnershipRepository,
    IncidentRepository,
    ProjectRepository,
):
    """
    Dictionary-backed catalog snapshot.

    Example:
        >>> catalog = InMemoryRuleCatalog()
        >>> catalog.add_rule(BusinessRule(id="BR-1", name="Payment validation"))
        >>> catalog.add_mapping(FileRuleMapping(file_path="src/pay.py", rule_id="BR-1"))
        >>> [m.rule_id for m in catalog.lookup_direct_rules(["src/pay.py"])]
        ['BR-1']
    """

    def __init__(self):
        self.rules: Dict[str, BusinessRule] = {}
        self.mappings: Dict[str, List[FileRuleMapping]] = defaultdict(list)
        self.edges: Dict[str, List[DependencyEdge]] = defaultdict(list)
        self.ownerships: Dict[str, List[Ownership]] = defaultdict(list)
        self.incident_rule_ids: set = set()
        self.projects: Dict[str, Project] = {}

    def add_rule(self, rule: BusinessRule) -> None:
        self.rules[rule.id] = rule

    def add_mapping(self, mapping: FileRuleMapping) -> None:
        self.mappings[mapping.file_path].append(mapping)

    def add_edge(self, edge: DependencyEdge) -> None:
        self.edges[edge.source_rule_id].append(edge)

    def add_ownership(self, ownership: Ownership) -> None:
        self.ownerships[ownership.rule_id].append(ownership)

    def add_incident(self, rule_id: str) -> None:
        self.incident_rule_ids.add(rule_id)

    def add_project(self, project: Project) -> None:
        self.projects[project.id] = project

    def lookup_direct_rules(self, file_paths: Iterable[str]) -> List[FileRuleMapping]:
        found: List[FileRuleMapping] = []
        for file_path in file_paths:
            found.extend(self.mappings.get(file_path, []))
        return found

    def get_rule(self, rule_id: str) -> Optional[BusinessRule]:
        return self.rules.get(rule_id)

    def get_outgoing_edges(self, rule_id: str) -> List[DependencyEdge]:
        return list(self.edges.get(rule_id, []))

    def get_ownerships(self, rule_id: str) -> List[Ownership]:
        return list(self.ownerships.get(rule_id, []))

    def has_incidents(self, rule_id: str) -> bool:
        return rule_id in self.incident_rule_ids

    def get_project(self, project_id: str) -> Optional[Project]:
        return self.projects.get(project_id)

    def get_statistics(self) -> Dict[str, int]:
        return {
            "total_rules": len(self.rules),
            "total_mapped_files": len(self.mappings),
            "total_dependencies": sum(len(v) for v in self.edges.values()),
            "total_ownerships": sum(len(v) for v in self.ownerships.values()),
            "rules_with_incidents": len(self.incident_rule_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InMemoryRuleCatalog":
        """
        Build a catalog from a snapshot dictionary.

        Expected keys (all optional): ``rules``, ``mappings``, ``dependencies``,
        ``ownerships``, ``incidents`` (list of rule ids) and ``projects``.
        """
        catalog = cls()
        for rule in data.get("rules", []):
            catalog.add_rule(BusinessRule.from_dict(rule))
        for mapping in data.get("mappings", []):
            catalog.add_mapping(FileRuleMapping.from_dict(mapping))
        for edge in data.get("dependencies", []):
            catalog.add_edge(DependencyEdge.from_dict(edge))
        for ownership in data.get("ownerships", []):
            catalog.add_ownership(Ownership.from_dict(ownership))
        for rule_id in data.get("incidents", []):
            catalog.add_incident(str(rule_id))
        for project in data.get("projects", []):
            catalog.add_project(Project(id=str(project["id"]), name=project["name"]))

        logger.info(f"Rule catalog loaded: {catalog.get_statistics()}")
        return catalog

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InMemoryRuleCatalog":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info(f"Loading rule catalog snapshot from {path}")
        return cls.from_dict(data)
