"""
Task model - named, async, idempotent units of fixture migration work.

Manifesto:
    A task's identity is its stable name, not its Python function object.
    Names are what logs, audits and tests refer to, so tasks are registered
    explicitly in a :class:`TaskRegistry` and versions are assembled from
    names. Every task returns a :class:`TaskOutcome` so "changed" versus
    "already satisfied" is data rather than something inferred from the
    log level.

Architecture:
    ::

        TaskRegistry
          ├── .register(task)          ─ store by name (duplicates rejected)
          ├── .get(name)               ─ lookup, TaskNotFoundError if missing
          ├── .has(name)               ─ existence check
          └── .task_set(version, names)─ ordered TaskSet from names

        register_task(name)            ─ decorator using the default registry
        get_task_registry()            ─ module-level default registry

        applied(logger, event)           → info,    TaskOutcome.APPLIED
        already_satisfied(logger, event) → warning, TaskOutcome.ALREADY_SATISFIED

Tags:
    fixture-spine, migration, task, registry, idempotent

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from fixturespine.core.errors import DuplicateTaskError, TaskNotFoundError
from fixturespine.core.protocols import TaskLogger

if TYPE_CHECKING:
    from fixturespine.migration.context import MigrationContext

TaskFn = Callable[["MigrationContext", TaskLogger], Awaitable[Any]]


class TaskOutcome(str, Enum):
    """Result of running one task."""

    APPLIED = "applied"
    ALREADY_SATISFIED = "already_satisfied"


def applied(logger: TaskLogger, event: str, **kw: Any) -> TaskOutcome:
    """Log an action at info severity and report it as applied."""
    logger.info(event, **kw)
    return TaskOutcome.APPLIED


def already_satisfied(logger: TaskLogger, event: str, **kw: Any) -> TaskOutcome:
    """Log a no-op at warning severity and report it as already satisfied."""
    logger.warning(event, **kw)
    return TaskOutcome.ALREADY_SATISFIED


@dataclass(frozen=True)
class Task:
    """A named async callable ``(context, logger) -> TaskOutcome``."""

    name: str
    fn: TaskFn
    description: str = ""

    async def __call__(self, context: MigrationContext, logger: TaskLogger) -> Any:
        return await self.fn(context, logger)


@dataclass(frozen=True)
class TaskSet:
    """Ordered, immutable tasks for one version transition."""

    version: str
    tasks: tuple[Task, ...] = ()

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __len__(self) -> int:
        return len(self.tasks)

    @property
    def names(self) -> list[str]:
        return [task.name for task in self.tasks]


class TaskRegistry:
    """Injectable name → Task lookup.

    Example:
        >>> registry = TaskRegistry()
        >>>
        >>> @register_task("add_frontend_client", registry=registry)
        >>> async def add_frontend_client(context, logger):
        ...     ...
        >>>
        >>> registry.task_set("004", ["add_frontend_client"]).names
        ['add_frontend_client']
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def register(self, task: Task) -> Task:
        """Register a task under its name.

        Raises:
            DuplicateTaskError: If the name is already taken
        """
        if task.name in self._tasks:
            raise DuplicateTaskError(task.name)
        self._tasks[task.name] = task
        return task

    def get(self, name: str) -> Task:
        """Get a task by name.

        Raises:
            TaskNotFoundError: If no task is registered under ``name``
        """
        if name not in self._tasks:
            raise TaskNotFoundError(name, sorted(self._tasks))
        return self._tasks[name]

    def has(self, name: str) -> bool:
        return name in self._tasks

    def names(self) -> list[str]:
        return sorted(self._tasks)

    def task_set(self, version: str, names: Iterable[str]) -> TaskSet:
        """Build the ordered TaskSet for ``version`` from task names."""
        return TaskSet(version=version, tasks=tuple(self.get(name) for name in names))

    def __len__(self) -> int:
        return len(self._tasks)


# === GLOBAL DEFAULT REGISTRY ===

_default_registry: TaskRegistry | None = None


def get_task_registry() -> TaskRegistry:
    """Get the global default task registry, creating it on first access."""
    global _default_registry
    if _default_registry is None:
        _default_registry = TaskRegistry()
    return _default_registry


def register_task(
    name: str,
    *,
    description: str | None = None,
    registry: TaskRegistry | None = None,
) -> Callable[[TaskFn], TaskFn]:
    """Decorator registering an async function as a named task.

    The function itself is returned unchanged so it stays directly callable.
    """

    def decorator(fn: TaskFn) -> TaskFn:
        target = registry if registry is not None else get_task_registry()
        doc = (fn.__doc__ or "").strip().splitlines()
        target.register(Task(name=name, fn=fn, description=description or (doc[0] if doc else "")))
        return fn

    return decorator


__all__ = [
    "TaskFn",
    "TaskOutcome",
    "Task",
    "TaskSet",
    "TaskRegistry",
    "applied",
    "already_satisfied",
    "get_task_registry",
    "register_task",
]
