"""
Version Task Runner - apply every pending version's fixture tasks.

Manifesto:
    The caller knows which versions are pending; the runner only turns that
    list into ordered task execution. All versions' tasks are resolved with
    a single registry call, then the per-version loop is itself wrapped as
    one task so failures and logging look the same at both levels.

Architecture:
    ::

        update_fixtures(["004", "005"], context)
          │
          ├── versions empty ─► info "nothing to do", registry untouched
          │
          └── registry.resolve(versions)             (exactly once)
                │
                sequencer([run_version_tasks])       (outer call)
                  └── for task_set in task_sets:
                        LogContext(version=...)
                        info  version_started
                        sequencer(list(task_set))    (inner call)
                        info  version_finished

    Any task exception aborts the remaining tasks and propagates. Tasks
    already applied are not undone; re-running is safe because every task
    is idempotent.

Tags:
    fixture-spine, migration, runner, sequencer, upgrade

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fixturespine.core.logging import LogContext, get_logger
from fixturespine.core.protocols import TaskLogger
from fixturespine.migration.context import MigrationContext
from fixturespine.migration.sequencer import Sequencer, sequence
from fixturespine.migration.tasks import Task
from fixturespine.migration.versioning import VersionRegistry, default_version_registry

RUNNER_TASK_NAME = "run_version_tasks"


class FixtureUpdater:
    """Runs pending versions' TaskSets through a Sequencer.

    Both collaborators are constructor parameters so tests can substitute
    them without touching module state.

    Example::

        updater = FixtureUpdater()
        await updater.update(["004", "005"], MigrationContext(store=store))
    """

    def __init__(
        self,
        versions: VersionRegistry | None = None,
        sequencer: Sequencer | None = None,
        logger: TaskLogger | None = None,
    ) -> None:
        self._versions = versions
        self._sequence = sequencer or sequence
        self._logger = logger or get_logger(__name__)

    @property
    def versions(self) -> VersionRegistry:
        if self._versions is None:
            self._versions = default_version_registry()
        return self._versions

    async def update(
        self,
        versions: Sequence[str],
        context: MigrationContext,
        logger: TaskLogger | None = None,
    ) -> list[Any]:
        """Apply the fixture tasks of every version in ``versions``, in order.

        Returns:
            Whatever the outer Sequencer call returns (one entry, the list of
            per-version results), or an empty list when nothing is pending.
        """
        logger = logger or self._logger
        if not versions:
            logger.info("fixtures.update.nothing_to_do")
            return []

        task_sets = self.versions.resolve(versions)

        async def run_version_tasks(ctx: MigrationContext, log: TaskLogger) -> list[Any]:
            results = []
            for task_set in task_sets:
                async with LogContext(version=task_set.version):
                    log.info("fixtures.update.version_started", version=task_set.version, tasks=len(task_set))
                    results.append(await self._sequence(list(task_set), ctx, log))
                    log.info("fixtures.update.version_finished", version=task_set.version)
            return results

        wrapper = Task(
            name=RUNNER_TASK_NAME,
            fn=run_version_tasks,
            description="Run each pending version's fixture tasks",
        )
        return await self._sequence([wrapper], context, logger)


async def update_fixtures(
    versions: Sequence[str],
    context: MigrationContext,
    logger: TaskLogger | None = None,
    *,
    version_registry: VersionRegistry | None = None,
    sequencer: Sequencer | None = None,
) -> list[Any]:
    """Apply pending versions' fixture tasks with a fresh :class:`FixtureUpdater`."""
    updater = FixtureUpdater(version_registry, sequencer, logger)
    return await updater.update(versions, context)


__all__ = ["RUNNER_TASK_NAME", "FixtureUpdater", "update_fixtures"]
