"""
Fixture Reconciler - bring the store in line with declared fixtures.

Manifesto:
    Upgrades must never fail because a fixture is already there, or because
    one row out of thirty refuses to insert. The reconciler checks each
    desired record by its natural key, inserts only what is missing, and
    reports ``(expected, done, created)`` so the caller decides whether a shortfall
    deserves a warning.

Architecture:
    ::

        reconcile_model_fixtures(store, group)
          for entry in group.entries:
              find_one(criteria_for(entry)) ── found ──► done += 1
                         │ absent
                         ▼
                    add(entry) ── ok ──► done += 1
                         │ StoreWriteError
                         ▼
                    warning, not done

        reconcile_relation_fixtures(store, specs)
          for spec in specs:
              resolve from / to ── unresolved ──► not done
              load_related ── already linked ──► done += 1
              attach ── ok ──► done += 1

    Read failures propagate; only writes are absorbed. Both functions are
    monotonic: running them again never lowers ``done``.

Tags:
    fixture-spine, fixtures, reconciliation, idempotent, upgrade

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from fixturespine.core.errors import StoreWriteError
from fixturespine.core.protocols import Store, TaskLogger
from fixturespine.fixtures.registry import FixtureGroup, RelationSpec


@dataclass(frozen=True)
class ReconciliationResult:
    """How many fixture items were expected and how many are now present."""

    expected: int = 0
    done: int = 0
    created: int = 0

    def __post_init__(self) -> None:
        if min(self.expected, self.done, self.created) < 0:
            raise ValueError(
                "Reconciliation counts must be non-negative, got "
                f"expected={self.expected} done={self.done} created={self.created}"
            )

    @property
    def complete(self) -> bool:
        return self.done >= self.expected

    @property
    def shortfall(self) -> int:
        return max(self.expected - self.done, 0)

    def __add__(self, other: ReconciliationResult) -> ReconciliationResult:
        if not isinstance(other, ReconciliationResult):
            return NotImplemented
        return ReconciliationResult(
            self.expected + other.expected,
            self.done + other.done,
            self.created + other.created,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "expected": self.expected,
            "done": self.done,
            "created": self.created,
            "complete": self.complete,
        }


async def reconcile_model_fixtures(
    store: Store,
    group: FixtureGroup,
    logger: TaskLogger | None = None,
) -> ReconciliationResult:
    """Insert every entry of ``group`` that is missing from the store."""
    model = store.model(group.name)
    done = 0
    created = 0
    for entry in group.entries:
        if await model.find_one(group.criteria_for(entry)) is not None:
            done += 1
            continue
        try:
            await model.add(entry)
        except StoreWriteError as exc:
            if logger is not None:
                logger.warning(
                    "fixtures.reconcile.insert_failed",
                    model=group.name,
                    key=group.criteria_for(entry),
                    error=str(exc),
                )
            continue
        done += 1
        created += 1
    return ReconciliationResult(expected=len(group.entries), done=done, created=created)


async def reconcile_relation_fixtures(
    store: Store,
    specs: Iterable[RelationSpec],
    logger: TaskLogger | None = None,
) -> ReconciliationResult:
    """Attach every declared link that does not exist yet."""
    expected = 0
    done = 0
    created = 0
    for spec in specs:
        expected += 1
        source_model = store.model(spec.from_model)
        source = await source_model.find_one(spec.from_filter)
        target = await store.model(spec.to_model).find_one(spec.to_filter)
        if source is None or target is None:
            continue

        related = await source_model.load_related(source, spec.relation)
        if related.find(lambda record: record.id == target.id) is not None:
            done += 1
            continue

        try:
            await source_model.attach(source, spec.relation, [target.id])
        except StoreWriteError as exc:
            if logger is not None:
                logger.warning(
                    "fixtures.reconcile.attach_failed",
                    model=spec.from_model,
                    relation=spec.relation,
                    target=spec.to_filter,
                    error=str(exc),
                )
            continue
        done += 1
        created += 1
    return ReconciliationResult(expected=expected, done=done, created=created)


__all__ = [
    "ReconciliationResult",
    "reconcile_model_fixtures",
    "reconcile_relation_fixtures",
]
