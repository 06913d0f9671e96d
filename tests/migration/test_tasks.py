"""Tests for the task model, task registry and version registry."""

from unittest.mock import MagicMock

import pytest

from fixturespine.core.errors import DuplicateTaskError, MigrationError, TaskNotFoundError
from fixturespine.migration.tasks import (
    Task,
    TaskOutcome,
    TaskRegistry,
    TaskSet,
    already_satisfied,
    applied,
    get_task_registry,
    register_task,
)
from fixturespine.migration.versioning import VersionRegistry, default_version_registry


async def _noop(context, logger):
    return TaskOutcome.APPLIED


class TestOutcomeHelpers:

    def test_applied_logs_info(self):
        logger = MagicMock()
        assert applied(logger, "did.something", count=2) is TaskOutcome.APPLIED
        logger.info.assert_called_once_with("did.something", count=2)
        logger.warning.assert_not_called()

    def test_already_satisfied_logs_warning(self):
        logger = MagicMock()
        assert already_satisfied(logger, "nothing.to.do") is TaskOutcome.ALREADY_SATISFIED
        logger.warning.assert_called_once_with("nothing.to.do")
        logger.info.assert_not_called()


class TestTask:

    @pytest.mark.asyncio
    async def test_calling_a_task_awaits_its_function(self):
        seen = []

        async def fn(context, logger):
            seen.append((context, logger))
            return TaskOutcome.ALREADY_SATISFIED

        task = Task("t", fn)

        assert await task("ctx", "log") is TaskOutcome.ALREADY_SATISFIED
        assert seen == [("ctx", "log")]

    def test_task_set_is_sized_and_iterable(self):
        tasks = (Task("a", _noop), Task("b", _noop))
        task_set = TaskSet("004", tasks)

        assert len(task_set) == 2
        assert list(task_set) == list(tasks)
        assert task_set.names == ["a", "b"]


class TestTaskRegistry:

    def test_register_and_get(self):
        registry = TaskRegistry()
        task = registry.register(Task("a", _noop))

        assert registry.get("a") is task
        assert registry.has("a")
        assert not registry.has("b")
        assert len(registry) == 1

    def test_duplicate_name_rejected(self):
        registry = TaskRegistry()
        registry.register(Task("a", _noop))

        with pytest.raises(DuplicateTaskError):
            registry.register(Task("a", _noop))

    def test_unknown_name_lists_available(self):
        registry = TaskRegistry()
        registry.register(Task("a", _noop))

        with pytest.raises(TaskNotFoundError, match="Available tasks") as exc_info:
            registry.get("missing")

        assert isinstance(exc_info.value, MigrationError)
        assert exc_info.value.context.task == "missing"

    def test_task_set_preserves_name_order(self):
        registry = TaskRegistry()
        for name in ("a", "b", "c"):
            registry.register(Task(name, _noop))

        assert registry.task_set("006", ["c", "a"]).names == ["c", "a"]

    def test_decorator_registers_and_returns_function(self):
        registry = TaskRegistry()

        @register_task("documented", registry=registry)
        async def documented(context, logger):
            """First line becomes the description.

            Not this one.
            """

        assert registry.get("documented").fn is documented
        assert registry.get("documented").description == "First line becomes the description."

    def test_packaged_tasks_in_default_registry(self):
        default_version_registry()
        names = get_task_registry().names()

        assert "move_jquery" in names
        assert "add_client_permissions" in names


class TestVersionRegistry:

    def test_unknown_version_is_empty_task_set(self):
        task_set = VersionRegistry().get("999")

        assert task_set.version == "999"
        assert len(task_set) == 0

    def test_resolve_keeps_order(self):
        registry = VersionRegistry([TaskSet("004"), TaskSet("005")])

        assert [ts.version for ts in registry.resolve(["005", "004"])] == ["005", "004"]

    def test_default_registry_has_packaged_versions(self):
        registry = default_version_registry()

        assert registry.versions() == ["004", "005"]
        assert len(registry.get("004")) == 8
        assert len(registry.get("005")) == 3
