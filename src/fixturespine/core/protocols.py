"""
Canonical protocol definitions for fixture-spine.

This module defines the structural contracts the migration engine depends
on. Any store, logger or notification backend matching these shapes can be
substituted, including the in-memory store used by the test suite.

Manifesto:
    Migration tasks must not know which database they run against. They
    depend on a narrow, async Store Interface: look records up by criteria,
    scan a model, add, edit, and mutate relations. Everything else (query
    building, transactions, connection pooling) belongs to the store.

Architecture:
    ::

        protocols.py (YOU ARE HERE)
        ├── Record            ─ one persisted entity (id + get(attr))
        ├── RelatedRecord     ─ a Record reached through a relation (+ pivot)
        ├── RecordCollection  ─ iterable result of find_all / load_related
        ├── ModelStore        ─ async CRUD + relation ops for one model
        ├── Store             ─ model lookup + default settings primitive
        ├── TaskLogger        ─ info / warning only
        └── NotificationSink  ─ fire-and-forget user-facing messages

    Implementations:
        fixturespine.store.memory.MemoryStore

Guardrails:
    ❌ DON'T: Reach into a store implementation from a migration task
    ✅ DO: Go through Store.model(name)

    ❌ DON'T: Add blocking methods to ModelStore
    ✅ DO: Keep every store operation awaitable

Tags:
    protocol, store, async, logger, notifications, fixture-spine, contracts

Doc-Types:
    - API Reference
    - Architecture Decision Record
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

Criteria = Mapping[str, Any]


@runtime_checkable
class Record(Protocol):
    """A persisted entity."""

    @property
    def id(self) -> Any: ...

    def get(self, attr: str, default: Any = None) -> Any:
        """Return one attribute value."""
        ...


@runtime_checkable
class RelatedRecord(Record, Protocol):
    """A record loaded through a relation, carrying its pivot attributes."""

    @property
    def pivot(self) -> Mapping[str, Any]: ...


class RecordCollection(Protocol):
    """Result of a scan: iterable, sized, with in-memory lookup primitives."""

    def __iter__(self) -> Iterator[Any]: ...

    def __len__(self) -> int: ...

    def find(self, predicate: Callable[[Any], bool]) -> Any | None:
        """First record matching ``predicate`` or ``None``."""
        ...

    def filter(self, predicate: Callable[[Any], bool]) -> list[Any]:
        """All records matching ``predicate``."""
        ...

    def find_where(self, **attrs: Any) -> Any | None:
        """First record whose attributes equal ``attrs``."""
        ...


@runtime_checkable
class ModelStore(Protocol):
    """
    Async CRUD and relation operations for one model.

    Every method returns an awaitable that resolves with a result or raises
    a :class:`~fixturespine.core.errors.StoreError`.

    Architecture:
        ::

            ModelStore Protocol:
            ┌──────────────────────────────────────────────────────────────┐
            │ find_one(criteria)                    → Record | None        │
            │ find_all(criteria=None)               → RecordCollection     │
            │ add(attrs)                            → Record               │
            │ edit(attrs, criteria)                 → Record               │
            │ load_related(record, relation)        → RecordCollection     │
            │ update_pivot(record, relation, id, attrs)                    │
            │ attach(record, relation, ids, pivot)  → int                  │
            └──────────────────────────────────────────────────────────────┘
    """

    @property
    def name(self) -> str: ...

    async def find_one(self, criteria: Criteria) -> Record | None: ...

    async def find_all(self, criteria: Criteria | None = None) -> RecordCollection: ...

    async def add(self, attrs: Mapping[str, Any]) -> Record: ...

    async def edit(self, attrs: Mapping[str, Any], criteria: Criteria) -> Record: ...

    async def load_related(self, record: Record, relation: str) -> RecordCollection: ...

    async def update_pivot(
        self,
        record: Record,
        relation: str,
        target_id: Any,
        attrs: Mapping[str, Any],
    ) -> None: ...

    async def attach(
        self,
        record: Record,
        relation: str,
        target_ids: Iterable[Any],
        pivot: Mapping[str, Any] | None = None,
    ) -> int: ...


@runtime_checkable
class Store(Protocol):
    """Entry point to the persistent store."""

    def model(self, name: str) -> ModelStore:
        """Return the model store for ``name`` (e.g. ``"Setting"``)."""
        ...

    async def populate_default_settings(self) -> None:
        """Insert any missing default settings."""
        ...


class TaskLogger(Protocol):
    """The two severities used by migration tasks."""

    def info(self, event: str, **kw: Any) -> Any: ...

    def warning(self, event: str, **kw: Any) -> Any: ...


@dataclass(frozen=True)
class Notification:
    """A one-time user-facing message."""

    message: str
    type: str = "info"
    location: str = "settings-top"
    dismissible: bool = True


class NotificationSink(Protocol):
    """Fire-and-forget delivery of user-facing notifications."""

    async def add(self, notification: Notification) -> None: ...


__all__ = [
    "Criteria",
    "Record",
    "RelatedRecord",
    "RecordCollection",
    "ModelStore",
    "Store",
    "TaskLogger",
    "Notification",
    "NotificationSink",
]
