"""
Populate Engine - seed an empty store with baseline fixtures.

Manifesto:
    First-run bootstrap uses the same check-then-insert pattern as the
    upgrade path, so populating twice is harmless. Models are seeded
    first, then the relations between them, then the owner account (which
    depends on the ``Owner`` role existing).

Architecture:
    ::

        FixturePopulator.populate()
          ├── for group in registry.model_groups():
          │       reconcile_model_fixtures(store, group)
          ├── for relation in registry.relation_fixtures():
          │       fetch from / to collections once
          │       find source, filter targets, attach the missing ones
          └── create_owner(store, settings)

Tags:
    fixture-spine, fixtures, populate, bootstrap, seed-data

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from typing import Any

from fixturespine.core.errors import StoreWriteError
from fixturespine.core.logging import get_logger
from fixturespine.core.protocols import Record, Store, TaskLogger
from fixturespine.core.settings import FixtureSettings, get_settings
from fixturespine.fixtures.reconciler import ReconciliationResult, reconcile_model_fixtures
from fixturespine.fixtures.registry import FixtureRegistry, RelationFixture, load_fixtures

OWNER_ROLE = "Owner"


@dataclass
class PopulateResult:
    """Outcome of one populate run."""

    models: dict[str, ReconciliationResult] = field(default_factory=dict)
    relations: dict[str, ReconciliationResult] = field(default_factory=dict)
    owner: Record | None = None

    @property
    def complete(self) -> bool:
        results = [*self.models.values(), *self.relations.values()]
        return all(result.complete for result in results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "models": {name: result.to_dict() for name, result in self.models.items()},
            "relations": {name: result.to_dict() for name, result in self.relations.items()},
            "owner_id": self.owner.id if self.owner is not None else None,
            "complete": self.complete,
        }


async def create_owner(
    store: Store,
    settings: FixtureSettings | None = None,
    logger: TaskLogger | None = None,
) -> Record | None:
    """Create the owner user if the ``Owner`` role exists.

    A missing role is an ordering gap, not a failure: nothing is created and
    nothing is raised. An existing user with the owner email is left alone.
    """
    settings = settings or get_settings()
    logger = logger or get_logger(__name__)

    role = await store.model("Role").find_one({"name": OWNER_ROLE})
    if role is None:
        return None

    users = store.model("User")
    if await users.find_one({"email": settings.owner_email}) is not None:
        logger.info("fixtures.populate.owner_exists", email=settings.owner_email)
        return None

    owner = await users.add(
        {
            "name": settings.owner_name,
            "email": settings.owner_email,
            "status": "inactive",
            "password": secrets.token_urlsafe(24),
        }
    )
    await users.attach(owner, "roles", [role.id])
    logger.info("fixtures.populate.owner_created", user_id=owner.id, email=settings.owner_email)
    return owner


class FixturePopulator:
    """Seeds models, relations and the owner account.

    Example::

        result = await FixturePopulator(store).populate()
        assert result.complete
    """

    def __init__(
        self,
        store: Store,
        registry: FixtureRegistry | None = None,
        settings: FixtureSettings | None = None,
        logger: TaskLogger | None = None,
    ) -> None:
        self._store = store
        self._registry = registry or load_fixtures()
        self._settings = settings
        self._logger = logger or get_logger(__name__)

    async def populate(self) -> PopulateResult:
        self._logger.info("fixtures.populate.started")
        result = PopulateResult()

        for group in self._registry.model_groups():
            outcome = await reconcile_model_fixtures(self._store, group, self._logger)
            result.models[group.name] = outcome
            self._report(group.name, outcome)

        for relation in self._registry.relation_fixtures():
            name = f"{relation.source.model}.{relation.relation}"
            outcome = await self._populate_relation(relation)
            result.relations[name] = outcome
            self._report(name, outcome)

        result.owner = await create_owner(self._store, self._settings, self._logger)
        return result

    async def _populate_relation(self, relation: RelationFixture) -> ReconciliationResult:
        source_model = self._store.model(relation.source.model)
        declared_targets = self._registry.find_model_fixtures(relation.target.model)
        sources = await source_model.find_all()
        targets = await self._store.model(relation.target.model).find_all()

        result = ReconciliationResult()
        for from_key in relation.entries:
            selectors = relation.selectors(from_key)
            expected = sum(
                len([e for e in declared_targets.entries if relation.target_predicate(p, s)(e)])
                for p, s in selectors
            )

            source = sources.find(relation.from_predicate(from_key))
            if source is None:
                result += ReconciliationResult(expected=expected)
                continue

            wanted: dict[Any, Record] = {}
            for primary, secondary in selectors:
                for target in targets.filter(relation.target_predicate(primary, secondary)):
                    wanted.setdefault(target.id, target)

            existing = {record.id for record in await source_model.load_related(source, relation.relation)}
            missing = [target_id for target_id in wanted if target_id not in existing]
            attached = 0
            if missing:
                try:
                    attached = await source_model.attach(source, relation.relation, missing)
                except StoreWriteError as exc:
                    self._logger.warning(
                        "fixtures.populate.attach_failed",
                        model=relation.source.model,
                        relation=relation.relation,
                        key=from_key,
                        error=str(exc),
                    )

            present = len(wanted) - len(missing) + attached
            result += ReconciliationResult(expected=expected, done=min(present, expected), created=attached)
        return result

    def _report(self, name: str, outcome: ReconciliationResult) -> None:
        if outcome.complete:
            self._logger.info("fixtures.populate.reconciled", fixture=name, **outcome.to_dict())
        else:
            self._logger.warning(
                "fixtures.populate.shortfall",
                fixture=name,
                expected=outcome.expected,
                done=outcome.done,
            )


async def populate_fixtures(
    store: Store,
    registry: FixtureRegistry | None = None,
    settings: FixtureSettings | None = None,
    logger: TaskLogger | None = None,
) -> PopulateResult:
    """Seed ``store`` with every packaged fixture and create the owner."""
    return await FixturePopulator(store, registry, settings, logger).populate()


__all__ = [
    "OWNER_ROLE",
    "PopulateResult",
    "FixturePopulator",
    "create_owner",
    "populate_fixtures",
]
