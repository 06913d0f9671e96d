"""Tests for fixturespine.core.logging."""

import json

import pytest
import structlog

from fixturespine.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)
from fixturespine.core.settings import FixtureSettings


@pytest.fixture(autouse=True)
def _reset_structlog():
    clear_context()
    yield
    clear_context()
    structlog.reset_defaults()


class TestLogContext:

    def test_sync_context_binds_and_unbinds(self):
        with LogContext(version="004"):
            assert structlog.contextvars.get_contextvars()["version"] == "004"
        assert "version" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_async_context_binds_and_unbinds(self):
        async with LogContext(version="005", task="move_jquery"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["version"] == "005"
            assert bound["task"] == "move_jquery"
        assert structlog.contextvars.get_contextvars() == {}

    def test_unbind_leaves_other_keys(self):
        bind_context(run="r1")
        with LogContext(version="004"):
            pass
        assert structlog.contextvars.get_contextvars() == {"run": "r1"}


class TestConfigureLogging:

    def test_json_output_includes_service_and_context(self, capsys):
        configure_logging(level="INFO", json_format=True, service="fixture-spine")
        log = get_logger("fixturespine.test")

        with LogContext(version="004"):
            log.info("fixtures.update.version_started", tasks=8)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "fixtures.update.version_started"
        assert event["version"] == "004"
        assert event["tasks"] == 8
        assert event["service.name"] == "fixture-spine"
        assert event["logger_name"] == "fixturespine.test"
        assert event["level"] == "info"

    def test_level_filters_lower_severities(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        log = get_logger("fixturespine.test")

        log.info("hidden")
        log.warning("shown")

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out

    def test_configure_from_settings(self, capsys):
        configure_logging_from_settings(FixtureSettings(log_level="ERROR", log_format="json"))
        log = get_logger("fixturespine.test")

        log.warning("dropped")
        log.error("kept")

        out = capsys.readouterr().out.strip()
        assert json.loads(out)["event"] == "kept"
