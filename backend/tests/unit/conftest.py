"""
Unit test fixtures and helpers.

Provides lightweight fixtures for unit testing that do NOT require
database connections or running services. Rule graphs are built in memory.
"""

from typing import Callable, Dict, Iterable, List, Optional, Tuple

import pytest

from app.config import Settings
from app.models.enums import Criticality, DependencyType, Domain, OwnershipRole, TeamType
from app.models.rule_models import BusinessRule, DependencyEdge, FileRuleMapping, Ownership
from app.repositories.rule_catalog import InMemoryRuleCatalog
from app.services.business_impact import BusinessImpactService

CatalogFactory = Callable[..., InMemoryRuleCatalog]


def build_catalog(
    rules: Iterable[str],
    edges: Iterable[Tuple[str, str]] = (),
    mappings: Optional[Dict[str, List[str]]] = None,
    criticality: Optional[Dict[str, Criticality]] = None,
) -> InMemoryRuleCatalog:
    """
    Build a catalog from rule ids and (source, target) pairs.

    Every rule gets a "file" named ``src/<rule_id>.py`` mapped to it unless
    ``mappings`` (file path -> rule ids) is given.
    """
    criticality = criticality or {}
    catalog = InMemoryRuleCatalog()
    for rule_id in rules:
        catalog.add_rule(
            BusinessRule(
                id=rule_id,
                name=f"Rule {rule_id}",
                domain=Domain.GENERIC,
                criticality=criticality.get(rule_id, Criticality.LOW),
            )
        )
    for source, target in edges:
        catalog.add_edge(DependencyEdge(source_rule_id=source, target_rule_id=target, dependency_type=DependencyType.FEEDS))

    if mappings is None:
        mappings = {f"src/{rule_id}.py": [rule_id] for rule_id in rules}
    for file_path, rule_ids in mappings.items():
        for rule_id in rule_ids:
            catalog.add_mapping(FileRuleMapping(file_path=file_path, rule_id=rule_id))
    return catalog


@pytest.fixture
def unit_settings() -> Settings:
    """Settings with explicit defaults, independent of the environment."""
    return Settings(impact_max_depth=3, executive_attention_threshold=10, log_level="DEBUG")


@pytest.fixture
def catalog_factory() -> CatalogFactory:
    return build_catalog


@pytest.fixture
def payment_catalog() -> InMemoryRuleCatalog:
    """
    Small realistic catalog.

    BR-PAYMENT-001 -FEEDS-> BR-INVOICE-003 -AGGREGATES-> BR-BILLING-010 -VALIDATES-> BR-AUDIT-020
    BR-AUDIT-020 -DEPENDS_ON-> BR-REPORT-030 (depth 4 from payment)
    """
    catalog = InMemoryRuleCatalog()
    catalog.add_rule(BusinessRule("BR-PAYMENT-001", "Payment validation", Domain.PAYMENT, Criticality.CRITICAL))
    catalog.add_rule(BusinessRule("BR-INVOICE-003", "Invoice generation", Domain.BILLING, Criticality.MEDIUM))
    catalog.add_rule(BusinessRule("BR-BILLING-010", "Monthly billing totals", Domain.BILLING, Criticality.HIGH))
    catalog.add_rule(BusinessRule("BR-AUDIT-020", "Billing audit", Domain.GENERIC, Criticality.LOW))
    catalog.add_rule(BusinessRule("BR-REPORT-030", "Finance reporting", Domain.GENERIC, Criticality.LOW))

    catalog.add_edge(DependencyEdge("BR-PAYMENT-001", "BR-INVOICE-003", DependencyType.FEEDS))
    catalog.add_edge(DependencyEdge("BR-INVOICE-003", "BR-BILLING-010", DependencyType.AGGREGATES))
    catalog.add_edge(DependencyEdge("BR-BILLING-010", "BR-AUDIT-020", DependencyType.VALIDATES))
    catalog.add_edge(DependencyEdge("BR-AUDIT-020", "BR-REPORT-030", DependencyType.DEPENDS_ON))

    catalog.add_mapping(FileRuleMapping("src/payment/validator.py", "BR-PAYMENT-001"))
    catalog.add_mapping(FileRuleMapping("src/payment/gateway.py", "BR-PAYMENT-001"))

    catalog.add_ownership(
        Ownership("BR-PAYMENT-001", "Payment Team", TeamType.ENGINEERING, OwnershipRole.PRIMARY_OWNER)
    )
    catalog.add_ownership(Ownership("BR-PAYMENT-001", "Finance Ops", TeamType.OPERATIONS, OwnershipRole.BACKUP))
    catalog.add_ownership(
        Ownership("BR-INVOICE-003", "Billing Team", TeamType.ENGINEERING, OwnershipRole.PRIMARY_OWNER)
    )

    catalog.add_incident("BR-INVOICE-003")
    return catalog


@pytest.fixture
def make_service(unit_settings: Settings) -> Callable[[InMemoryRuleCatalog], BusinessImpactService]:
    def _make(catalog: InMemoryRuleCatalog) -> BusinessImpactService:
        return BusinessImpactService.from_catalog(catalog, settings=unit_settings)

    return _make
