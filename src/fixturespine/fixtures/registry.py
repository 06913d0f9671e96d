"""
Fixture Registry - declarative description of baseline records and relations.

Manifesto:
    What a fresh install must contain is data, not code. The registry loads
    a JSON document listing model fixtures (records keyed by a natural key)
    and relation fixtures (which roles hold which permissions, which posts
    carry which tags), validates it with pydantic, and hands out deep copies
    so no caller can change the process-wide definition.

Architecture:
    ::

        fixtures.json
          ├── models[]     → FixtureGroup(name, key, entries)
          └── relations[]  → RelationFixture(from, to, entries)
                                   │
                                   └── expand() → RelationSpec (one per link)

        FixtureRegistry
          ├── find_model_fixtures("Permission", {"object_type": "client"})
          ├── find_model_fixture_entry("Client", {"slug": "app-frontend"})
          ├── find_relation_fixture("Role", "Permission")
          └── find_permission_relations_for_object("client")

Relation entries:
    A relation fixture maps each *from* key to its targets. With a
    single-attribute ``to.match`` the targets are a list of keys::

        "welcome": ["getting-started"]

    With a two-attribute ``to.match`` the targets map the primary attribute
    to ``"all"`` or a list of secondary values::

        "Editor": {"post": "all", "setting": ["browse", "read"]}

Tags:
    fixture-spine, fixtures, registry, pydantic, declarative, seed-data

Doc-Types:
    - API Reference
    - Data Format Reference
"""

from __future__ import annotations

import copy
import json
from collections.abc import Callable, Mapping
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fixturespine.core.errors import FixtureNotFoundError, InvalidFixtureError

FixtureRecord = dict[str, Any]
TargetSpec = Literal["all"] | list[str]


def _matches(entry: Mapping[str, Any], criteria: Mapping[str, Any] | None) -> bool:
    return all(entry.get(key) == value for key, value in (criteria or {}).items())


class FixtureGroup(BaseModel):
    """Desired records of one model, keyed by a natural-key attribute subset."""

    model_config = ConfigDict(frozen=True)

    name: str
    key: tuple[str, ...]
    entries: tuple[FixtureRecord, ...] = ()

    def criteria_for(self, entry: Mapping[str, Any]) -> dict[str, Any]:
        """Natural-key lookup criteria for ``entry``."""
        return {attr: entry.get(attr) for attr in self.key}

    def filter(self, criteria: Mapping[str, Any] | None = None) -> FixtureGroup:
        """Copy of this group keeping only entries matching ``criteria``."""
        entries = tuple(copy.deepcopy(e) for e in self.entries if _matches(e, criteria))
        return self.model_copy(update={"entries": entries})

    def find(self, criteria: Mapping[str, Any]) -> FixtureRecord | None:
        return next((copy.deepcopy(e) for e in self.entries if _matches(e, criteria)), None)


class RelationEndpoint(BaseModel):
    """One side of a relation fixture."""

    model_config = ConfigDict(frozen=True)

    model: str
    match: str | tuple[str, ...]
    relation: str | None = None

    @property
    def match_attrs(self) -> tuple[str, ...]:
        return (self.match,) if isinstance(self.match, str) else tuple(self.match)


class RelationSpec(BaseModel):
    """One concrete association between two records, each found by a filter."""

    model_config = ConfigDict(frozen=True)

    from_model: str
    from_filter: dict[str, Any]
    relation: str
    to_model: str
    to_filter: dict[str, Any]


class RelationFixture(BaseModel):
    """Grouped declarative relation (see module docstring for entry shapes)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: RelationEndpoint = Field(alias="from")
    target: RelationEndpoint = Field(alias="to")
    entries: dict[str, list[str] | dict[str, TargetSpec]]

    @property
    def relation(self) -> str:
        return self.source.relation or ""

    def selectors(self, from_key: str) -> list[tuple[str, TargetSpec | None]]:
        """``(primary, secondary)`` target selectors declared for ``from_key``."""
        targets = self.entries.get(from_key, [])
        if isinstance(targets, list):
            return [(key, None) for key in targets]
        return list(targets.items())

    def from_predicate(self, from_key: str) -> Callable[[Any], bool]:
        attr = self.source.match_attrs[0]
        return lambda record: record.get(attr) == from_key

    def target_predicate(self, primary: str, secondary: TargetSpec | None) -> Callable[[Any], bool]:
        """Predicate over anything with ``get(attr)`` (records or fixture dicts)."""
        attrs = self.target.match_attrs

        def predicate(record: Any) -> bool:
            if record.get(attrs[0]) != primary:
                return False
            if secondary is None or secondary == "all" or len(attrs) < 2:
                return True
            return record.get(attrs[1]) in secondary

        return predicate

    def restrict(self, primary: str) -> RelationFixture:
        """Copy keeping only targets whose primary match value is ``primary``."""
        entries: dict[str, Any] = {}
        for from_key, targets in self.entries.items():
            if isinstance(targets, list):
                entries[from_key] = [t for t in targets if t == primary]
            else:
                entries[from_key] = {k: copy.deepcopy(v) for k, v in targets.items() if k == primary}
        return self.model_copy(update={"entries": entries})

    def expand(self, target_group: FixtureGroup) -> list[RelationSpec]:
        """One RelationSpec per declared link, resolving ``"all"`` against fixtures."""
        attrs = self.target.match_attrs
        specs = []
        for from_key in self.entries:
            for primary, secondary in self.selectors(from_key):
                predicate = self.target_predicate(primary, secondary)
                for entry in target_group.entries:
                    if not predicate(entry):
                        continue
                    specs.append(
                        RelationSpec(
                            from_model=self.source.model,
                            from_filter={self.source.match_attrs[0]: from_key},
                            relation=self.relation,
                            to_model=self.target.model,
                            to_filter={attr: entry.get(attr) for attr in attrs},
                        )
                    )
        return specs


class _FixturesDocument(BaseModel):
    models: list[FixtureGroup]
    relations: list[RelationFixture] = Field(default_factory=list)


class _DefaultSetting(BaseModel):
    value: str | None = None
    type: str = "core"


class FixtureRegistry:
    """Read-only access to a fixtures document.

    Example::

        registry = load_fixtures()
        clients = registry.find_model_fixtures("Client")
        frontend = registry.find_model_fixture_entry("Client", {"slug": "app-frontend"})
    """

    def __init__(
        self,
        models: list[FixtureGroup],
        relations: list[RelationFixture] | None = None,
    ) -> None:
        self._models = list(models)
        self._relations = list(relations or [])

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FixtureRegistry:
        try:
            document = _FixturesDocument.model_validate(data)
        except ValidationError as exc:
            raise InvalidFixtureError("Fixture document failed validation", cause=exc) from exc
        return cls(document.models, document.relations)

    @classmethod
    def from_path(cls, path: Path | str) -> FixtureRegistry:
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise InvalidFixtureError(f"Fixture file is not valid JSON: {path}", cause=exc) from exc
        return cls.from_dict(data)

    # ── Models ───────────────────────────────────────────────────────

    def model_groups(self) -> list[FixtureGroup]:
        """Every model fixture group, in declaration order."""
        return [group.model_copy(deep=True) for group in self._models]

    def find_model_fixtures(
        self,
        model: str,
        criteria: Mapping[str, Any] | None = None,
    ) -> FixtureGroup:
        """Fixture group for ``model``, optionally narrowed by ``criteria``."""
        for group in self._models:
            if group.name == model:
                return group.filter(criteria)
        raise FixtureNotFoundError(f"No fixtures declared for model {model}").with_context(model=model)

    def find_model_fixture_entry(self, model: str, criteria: Mapping[str, Any]) -> FixtureRecord:
        entry = self.find_model_fixtures(model).find(criteria)
        if entry is None:
            raise FixtureNotFoundError(
                f"No {model} fixture matches {dict(criteria)!r}"
            ).with_context(model=model)
        return entry

    # ── Relations ────────────────────────────────────────────────────

    def relation_fixtures(self) -> list[RelationFixture]:
        return [relation.model_copy(deep=True) for relation in self._relations]

    def find_relation_fixture(self, from_model: str, to_model: str) -> RelationFixture:
        for relation in self._relations:
            if relation.source.model == from_model and relation.target.model == to_model:
                return relation.model_copy(deep=True)
        raise FixtureNotFoundError(f"No relation fixture from {from_model} to {to_model}")

    def relation_specs(self, from_model: str, to_model: str) -> list[RelationSpec]:
        relation = self.find_relation_fixture(from_model, to_model)
        return relation.expand(self.find_model_fixtures(to_model))

    def find_permission_relations_for_object(self, object_type: str) -> list[RelationSpec]:
        """Role → Permission links restricted to one permission object type."""
        relation = self.find_relation_fixture("Role", "Permission").restrict(object_type)
        return relation.expand(self.find_model_fixtures("Permission"))


def _data_file(name: str) -> str:
    return resources.files("fixturespine.fixtures").joinpath("data", name).read_text(encoding="utf-8")


@lru_cache(maxsize=1)
def _default_registry() -> FixtureRegistry:
    return FixtureRegistry.from_dict(json.loads(_data_file("fixtures.json")))


def load_fixtures() -> FixtureRegistry:
    """The packaged fixture registry (parsed once per process)."""
    return _default_registry()


def load_default_settings() -> dict[str, dict[str, Any]]:
    """The packaged default settings, keyed by setting key."""
    try:
        raw = json.loads(_data_file("default_settings.json"))
    except json.JSONDecodeError as exc:
        raise InvalidFixtureError("Default settings file is not valid JSON", cause=exc) from exc
    try:
        return {key: _DefaultSetting.model_validate(attrs).model_dump() for key, attrs in raw.items()}
    except ValidationError as exc:
        raise InvalidFixtureError("Default settings failed validation", cause=exc) from exc


__all__ = [
    "FixtureRecord",
    "FixtureGroup",
    "RelationEndpoint",
    "RelationSpec",
    "RelationFixture",
    "FixtureRegistry",
    "load_fixtures",
    "load_default_settings",
]
