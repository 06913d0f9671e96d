"""Fixture registry, reconciler, populate engine and default settings.

Modules
-------
registry     FixtureRegistry: validated, packaged fixture definitions
reconciler   reconcile_model_fixtures / reconcile_relation_fixtures
populate     FixturePopulator: first-run seeding and owner bootstrap
settings     ensure_default_settings

Tags:
    fixture-spine, fixtures

Doc-Types:
    package-overview
"""

from fixturespine.fixtures.populate import (
    FixturePopulator,
    PopulateResult,
    create_owner,
    populate_fixtures,
)
from fixturespine.fixtures.reconciler import (
    ReconciliationResult,
    reconcile_model_fixtures,
    reconcile_relation_fixtures,
)
from fixturespine.fixtures.registry import (
    FixtureGroup,
    FixtureRegistry,
    RelationFixture,
    RelationSpec,
    load_default_settings,
    load_fixtures,
)
from fixturespine.fixtures.settings import ensure_default_settings

__all__ = [
    "FixtureGroup",
    "FixturePopulator",
    "FixtureRegistry",
    "PopulateResult",
    "ReconciliationResult",
    "RelationFixture",
    "RelationSpec",
    "create_owner",
    "ensure_default_settings",
    "load_default_settings",
    "load_fixtures",
    "populate_fixtures",
    "reconcile_model_fixtures",
    "reconcile_relation_fixtures",
]
