"""Default Settings Ensurer."""

from __future__ import annotations

from fixturespine.core.logging import get_logger
from fixturespine.core.protocols import Store, TaskLogger


async def ensure_default_settings(store: Store, logger: TaskLogger | None = None) -> None:
    """Insert any missing default settings and log once."""
    logger = logger or get_logger(__name__)
    await store.populate_default_settings()
    logger.info("fixtures.settings.defaults_ensured")


__all__ = ["ensure_default_settings"]
