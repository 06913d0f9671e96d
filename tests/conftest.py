"""
Shared pytest fixtures for fixture-spine tests.

This module provides:
- An empty in-memory store and a notification sink
- A MagicMock logger exposing ``info`` / ``warning`` call records
- Settings and a MigrationContext wired to the above
- JSON log capture for code paths that fall back to the default logger

Async setup happens inside the tests themselves; these fixtures are sync.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import structlog

from fixturespine.core.logging import clear_context, configure_logging
from fixturespine.core.settings import FixtureSettings, PrivacySettings, clear_settings_cache
from fixturespine.fixtures.registry import load_fixtures
from fixturespine.migration.context import MigrationContext
from fixturespine.store.memory import MemoryNotificationSink, MemoryStore


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests under tests/integration as integration, everything else as unit."""
    for item in items:
        test_path = item.path.relative_to(Path(__file__).parent)
        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def _clean_settings_cache():
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def notifications() -> MemoryNotificationSink:
    return MemoryNotificationSink()


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock(name="logger")


@pytest.fixture
def settings() -> FixtureSettings:
    return FixtureSettings(privacy=PrivacySettings())


@pytest.fixture
def context(store, notifications, settings) -> MigrationContext:
    return MigrationContext(
        store=store,
        notifications=notifications,
        settings=settings,
        fixtures=load_fixtures(),
    )


@pytest.fixture
def json_logs(capsys):
    """Configure JSON logging and return a reader for the captured events."""
    configure_logging(level="INFO", json_format=True)

    def read() -> list[dict]:
        return [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]

    yield read
    clear_context()
    structlog.reset_defaults()
