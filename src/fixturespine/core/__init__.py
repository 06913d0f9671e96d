"""Core primitives: errors, logging, settings and store protocols.

Modules
-------
errors      FixtureSpineError hierarchy with category, context and cause
logging     structlog configuration, get_logger, LogContext
settings    FixtureSettings (pydantic-settings), get_settings
protocols   Store Interface, TaskLogger, NotificationSink

Tags:
    fixture-spine, core

Doc-Types:
    package-overview
"""

from fixturespine.core.errors import (
    ConfigError,
    FixtureError,
    FixtureSpineError,
    MigrationError,
    StoreError,
)
from fixturespine.core.logging import (
    LogContext,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)
from fixturespine.core.settings import FixtureSettings, get_settings

__all__ = [
    "ConfigError",
    "FixtureError",
    "FixtureSettings",
    "FixtureSpineError",
    "LogContext",
    "MigrationError",
    "StoreError",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "get_settings",
]
