"""Versioned fixture migration engine.

Modules
-------
tasks        Task, TaskSet, TaskOutcome, TaskRegistry, register_task
context      MigrationContext: store, notifications, settings, fixtures
sequencer    sequence(): fail-fast, strictly ordered task execution
versioning   VersionRegistry: version identifier → TaskSet
update       FixtureUpdater / update_fixtures: the version task runner
versions     v004, v005 task sets

Tags:
    fixture-spine, migration

Doc-Types:
    package-overview
"""

from fixturespine.migration.context import MigrationContext
from fixturespine.migration.sequencer import Sequencer, sequence
from fixturespine.migration.tasks import (
    Task,
    TaskOutcome,
    TaskRegistry,
    TaskSet,
    get_task_registry,
    register_task,
)
from fixturespine.migration.update import FixtureUpdater, update_fixtures
from fixturespine.migration.versioning import VersionRegistry, default_version_registry

__all__ = [
    "FixtureUpdater",
    "MigrationContext",
    "Sequencer",
    "Task",
    "TaskOutcome",
    "TaskRegistry",
    "TaskSet",
    "VersionRegistry",
    "default_version_registry",
    "get_task_registry",
    "register_task",
    "sequence",
    "update_fixtures",
]
