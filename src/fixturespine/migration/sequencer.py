"""
Sequencer - run tasks strictly one after another.

Each task is awaited before the next one starts, all of them receive the
same context and logger, and the first exception propagates immediately so
later tasks never start. There is no state between invocations, so anything
matching :class:`Sequencer` (for instance a test double) can replace
:func:`sequence`.

Tags:
    fixture-spine, migration, sequencer, fail-fast

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

from fixturespine.core.protocols import TaskLogger

if TYPE_CHECKING:
    from fixturespine.migration.context import MigrationContext
    from fixturespine.migration.tasks import Task


class Sequencer(Protocol):
    """Callable shape of :func:`sequence`."""

    async def __call__(
        self,
        tasks: Sequence[Task],
        context: MigrationContext,
        logger: TaskLogger,
    ) -> list[Any]: ...


async def sequence(
    tasks: Sequence[Task],
    context: MigrationContext,
    logger: TaskLogger,
) -> list[Any]:
    """Await each task in order and collect the results."""
    results = []
    for task in tasks:
        results.append(await task(context, logger))
    return results


__all__ = ["Sequencer", "sequence"]
