"""Shared context threaded through one Sequencer run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fixturespine.core.protocols import Notification, NotificationSink, Store
from fixturespine.core.settings import FixtureSettings, get_settings
from fixturespine.fixtures.registry import FixtureRegistry, load_fixtures


@dataclass
class MigrationContext:
    """
    Everything a migration task may touch.

    ``state`` is scratch space for the lifetime of one run; nothing in it is
    carried over to the next run.

    Attributes:
        store: Persistent store (Store Interface)
        notifications: Sink for user-facing messages, ``None`` to drop them
        settings: Read-only configuration (privacy toggles, owner details)
        fixtures: Declared fixtures used by seeding tasks
        state: Per-run mutable scratch space
    """

    store: Store
    notifications: NotificationSink | None = None
    settings: FixtureSettings = field(default_factory=get_settings)
    fixtures: FixtureRegistry = field(default_factory=load_fixtures)
    state: dict[str, Any] = field(default_factory=dict)

    async def notify(self, notification: Notification) -> None:
        if self.notifications is not None:
            await self.notifications.add(notification)


__all__ = ["MigrationContext"]
