"""
In-memory store implementation.

Manifesto:
    Single-process tools and test suites need a store that honours the full
    Store Interface without external infrastructure. Records live in plain
    dicts, relations in ordered link lists with pivot attributes.

Every read returns a fresh snapshot of the stored record, so a task that
holds on to a record never sees (or causes) changes that bypass ``edit``.

Tags:
    fixture-spine, store, in-memory, asyncio, testing, single-node

Doc-Types:
    api-reference
"""

from __future__ import annotations

import copy
import secrets
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from fixturespine.core.errors import (
    RecordNotFoundError,
    StoreWriteError,
    UnknownModelError,
    UnknownRelationError,
)
from fixturespine.core.protocols import Criteria, Notification

__all__ = [
    "MODELS",
    "RELATIONS",
    "MemoryRecord",
    "MemoryRelatedRecord",
    "MemoryCollection",
    "MemoryModelStore",
    "MemoryStore",
    "MemoryNotificationSink",
]

MODELS = ("Setting", "Client", "Tag", "Post", "Role", "Permission", "User")

# (model, relation) -> target model
RELATIONS: dict[tuple[str, str], str] = {
    ("Post", "tags"): "Tag",
    ("Role", "permissions"): "Permission",
    ("User", "roles"): "Role",
}

# Attribute factories applied on insert when the caller leaves them out
MODEL_DEFAULTS: dict[str, dict[str, Callable[[], Any]]] = {
    "Client": {"secret": lambda: secrets.token_hex(6), "status": lambda: "enabled"},
    "Post": {"status": lambda: "draft"},
    "User": {"status": lambda: "active"},
}


@dataclass
class MemoryRecord:
    """Snapshot of a stored record."""

    model: str
    id: int
    attributes: dict[str, Any] = field(default_factory=dict)

    def get(self, attr: str, default: Any = None) -> Any:
        if attr == "id":
            return self.id
        return self.attributes.get(attr, default)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, **self.attributes}


@dataclass
class MemoryRelatedRecord(MemoryRecord):
    """Snapshot of a record reached through a relation."""

    pivot: dict[str, Any] = field(default_factory=dict)


class MemoryCollection:
    """Ordered, read-only collection of record snapshots."""

    def __init__(self, records: Iterable[MemoryRecord] = ()):
        self._records = list(records)

    def __iter__(self) -> Iterator[MemoryRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> MemoryRecord:
        return self._records[index]

    def find(self, predicate: Callable[[Any], bool]) -> MemoryRecord | None:
        return next((r for r in self._records if predicate(r)), None)

    def filter(self, predicate: Callable[[Any], bool]) -> list[MemoryRecord]:
        return [r for r in self._records if predicate(r)]

    def find_where(self, **attrs: Any) -> MemoryRecord | None:
        return self.find(lambda r: _matches(r, attrs))


@dataclass
class _Link:
    from_id: int
    to_id: int
    pivot: dict[str, Any] = field(default_factory=dict)


def _matches(record: MemoryRecord, criteria: Criteria) -> bool:
    return all(record.get(key) == value for key, value in criteria.items())


class MemoryModelStore:
    """Model store backed by a :class:`MemoryStore`."""

    def __init__(self, store: MemoryStore, name: str) -> None:
        self._store = store
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def _rows(self) -> dict[int, dict[str, Any]]:
        return self._store._tables[self._name]

    def _snapshot(self, record_id: int) -> MemoryRecord:
        return MemoryRecord(self._name, record_id, copy.deepcopy(self._rows[record_id]))

    def _scan(self, criteria: Criteria | None) -> list[MemoryRecord]:
        records = [self._snapshot(record_id) for record_id in self._rows]
        if criteria:
            records = [r for r in records if _matches(r, criteria)]
        return records

    def _target_model(self, relation: str) -> str:
        try:
            return RELATIONS[(self._name, relation)]
        except KeyError:
            raise UnknownRelationError(self._name, relation) from None

    def _links(self, relation: str) -> list[_Link]:
        self._target_model(relation)
        return self._store._links.setdefault((self._name, relation), [])

    # ── Reads ────────────────────────────────────────────────────────

    async def find_one(self, criteria: Criteria) -> MemoryRecord | None:
        matches = self._scan(criteria)
        return matches[0] if matches else None

    async def find_all(self, criteria: Criteria | None = None) -> MemoryCollection:
        return MemoryCollection(self._scan(criteria))

    async def load_related(self, record: MemoryRecord, relation: str) -> MemoryCollection:
        target = self._store.model(self._target_model(relation))
        related = []
        for link in self._links(relation):
            if link.from_id != record.id or link.to_id not in target._rows:
                continue
            snapshot = target._snapshot(link.to_id)
            related.append(
                MemoryRelatedRecord(
                    snapshot.model,
                    snapshot.id,
                    snapshot.attributes,
                    pivot=dict(link.pivot),
                )
            )
        return MemoryCollection(related)

    # ── Writes ───────────────────────────────────────────────────────

    async def add(self, attrs: Mapping[str, Any]) -> MemoryRecord:
        record_id = self._store._next_id(self._name)
        data = copy.deepcopy(dict(attrs))
        data.pop("id", None)
        for attr, factory in MODEL_DEFAULTS.get(self._name, {}).items():
            data.setdefault(attr, factory())
        self._rows[record_id] = data
        return self._snapshot(record_id)

    async def edit(self, attrs: Mapping[str, Any], criteria: Criteria) -> MemoryRecord:
        matches = self._scan(criteria)
        if not matches:
            raise RecordNotFoundError(self._name, dict(criteria))
        record_id = matches[0].id
        self._rows[record_id].update(copy.deepcopy(dict(attrs)))
        return self._snapshot(record_id)

    async def update_pivot(
        self,
        record: MemoryRecord,
        relation: str,
        target_id: Any,
        attrs: Mapping[str, Any],
    ) -> None:
        for link in self._links(relation):
            if link.from_id == record.id and link.to_id == target_id:
                link.pivot.update(attrs)
                return
        raise StoreWriteError(
            f"{self._name} {record.id} has no {relation} link to {target_id}"
        ).with_context(model=self._name, relation=relation)

    async def attach(
        self,
        record: MemoryRecord,
        relation: str,
        target_ids: Iterable[Any],
        pivot: Mapping[str, Any] | None = None,
    ) -> int:
        links = self._links(relation)
        target = self._store.model(self._target_model(relation))
        target_ids = list(target_ids)
        existing = {link.to_id for link in links if link.from_id == record.id}
        missing = [target_id for target_id in target_ids if target_id not in target._rows]
        if missing:
            raise StoreWriteError(
                f"Cannot attach missing {target.name} {missing}"
            ).with_context(model=self._name, relation=relation)
        attached = 0
        for target_id in target_ids:
            if target_id in existing:
                continue
            links.append(_Link(record.id, target_id, dict(pivot or {})))
            existing.add(target_id)
            attached += 1
        return attached


class MemoryStore:
    """Dict-backed implementation of the Store Interface.

    Example::

        store = MemoryStore()
        tags = store.model("Tag")
        await tags.add({"name": "news", "slug": "news"})
        assert len(await tags.find_all()) == 1
    """

    def __init__(self, default_settings: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._tables: dict[str, dict[int, dict[str, Any]]] = {name: {} for name in MODELS}
        self._links: dict[tuple[str, str], list[_Link]] = {}
        self._sequences: dict[str, int] = {name: 0 for name in MODELS}
        self._models: dict[str, MemoryModelStore] = {}
        self._default_settings = default_settings

    def model(self, name: str) -> MemoryModelStore:
        if name not in self._tables:
            raise UnknownModelError(name)
        if name not in self._models:
            self._models[name] = MemoryModelStore(self, name)
        return self._models[name]

    def _next_id(self, name: str) -> int:
        self._sequences[name] += 1
        return self._sequences[name]

    def count(self, name: str) -> int:
        """Number of stored records for ``name``."""
        return len(self.model(name)._rows)

    async def populate_default_settings(self) -> None:
        """Insert every default setting whose key is not stored yet."""
        defaults = self._default_settings
        if defaults is None:
            from fixturespine.fixtures.registry import load_default_settings

            defaults = load_default_settings()

        settings = self.model("Setting")
        for key, attrs in defaults.items():
            if await settings.find_one({"key": key}) is None:
                await settings.add({"key": key, **attrs})


class MemoryNotificationSink:
    """Collects notifications in a list."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    async def add(self, notification: Notification) -> None:
        self.notifications.append(notification)
