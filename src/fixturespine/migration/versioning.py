"""Version registry - maps a version identifier to its ordered TaskSet."""

from __future__ import annotations

from collections.abc import Iterable

from fixturespine.migration.tasks import TaskSet


class VersionRegistry:
    """Injectable version → TaskSet lookup.

    Unknown versions resolve to an empty TaskSet, so callers can pass every
    pending version without checking which ones carry fixture changes.
    """

    def __init__(self, task_sets: Iterable[TaskSet] = ()) -> None:
        self._task_sets: dict[str, TaskSet] = {}
        for task_set in task_sets:
            self.register(task_set)

    def register(self, task_set: TaskSet) -> None:
        self._task_sets[task_set.version] = task_set

    def get(self, version: str) -> TaskSet:
        return self._task_sets.get(version, TaskSet(version=version))

    def resolve(self, versions: Iterable[str]) -> list[TaskSet]:
        """TaskSets for ``versions``, in the order given."""
        return [self.get(version) for version in versions]

    def versions(self) -> list[str]:
        return sorted(self._task_sets)


def default_version_registry() -> VersionRegistry:
    """Registry holding every packaged version's tasks."""
    from fixturespine.migration.versions import v004, v005

    return VersionRegistry([v004.task_set(), v005.task_set()])


__all__ = ["VersionRegistry", "default_version_registry"]
