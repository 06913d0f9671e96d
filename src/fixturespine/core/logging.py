"""
Structured logging for fixture-spine.

Manifesto:
    Migration output is read twice: by an operator watching a deploy and by
    log aggregation afterwards. Both need the same facts (which version,
    which task, applied or skipped) so every log line is a structlog event
    with keyword fields rather than a formatted sentence.

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="fixture-spine")
            ↓
        structlog processor chain:
          1. TimeStamper (iso)
          2. merge_contextvars  (version / task bound by LogContext)
          3. add_log_level (logger name is bound by get_logger)
          4. service metadata
          5. JSONRenderer (or ConsoleRenderer on a tty)

        logger = get_logger(__name__)
        logger.info("fixtures.update.version_started", version="004")

Severity contract:
    Migration tasks, the update runner and the reconciler only ever call
    ``info`` (an action was taken) and ``warning`` (no-op or shortfall).
    Failures propagate as exceptions, never as log calls.

Tags:
    logging, structlog, observability, fixture-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from fixturespine.core.settings import FixtureSettings, get_settings

_SERVICE_NAME = "fixture-spine"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "fixture-spine",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging_from_settings(settings: FixtureSettings | None = None) -> None:
    """Configure logging from ``FIXTURES_LOG_LEVEL`` / ``FIXTURES_LOG_FORMAT``."""
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``).

    The name is bound as the ``logger_name`` field; PrintLogger has no name of
    its own, and ``logger`` is reserved by ``structlog.get_logger``.
    """
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(logger_name=name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    Example:
        async with LogContext(version="004"):
            logger.info("fixtures.task.applied", task="move_jquery")
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args) -> None:
        unbind_context(*self._context.keys())

    async def __aenter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    async def __aexit__(self, *args) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
