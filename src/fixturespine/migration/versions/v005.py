"""
Fixture upgrade to version 005.

Tasks, in order:

1. ``update_client_secrets``  replace placeholder secrets on every client
2. ``add_scheduler_client``   add the ``app-scheduler`` client
3. ``add_client_permissions`` seed ``client`` permissions and grant them to roles

Tags:
    fixture-spine, migration, version-005

Doc-Types:
    api-reference
"""

from __future__ import annotations

from fixturespine.core.protocols import TaskLogger
from fixturespine.fixtures.reconciler import (
    ReconciliationResult,
    reconcile_model_fixtures,
    reconcile_relation_fixtures,
)
from fixturespine.migration.context import MigrationContext
from fixturespine.migration.tasks import (
    TaskOutcome,
    TaskRegistry,
    TaskSet,
    already_satisfied,
    applied,
    get_task_registry,
    register_task,
)
from fixturespine.migration.versions.common import (
    add_client_if_missing,
    has_placeholder_secret,
    new_client_secret,
)

VERSION = "005"

TASK_NAMES = (
    "update_client_secrets",
    "add_scheduler_client",
    "add_client_permissions",
)

PERMISSION_OBJECT_TYPE = "client"


@register_task("update_client_secrets")
async def update_client_secrets(context: MigrationContext, logger: TaskLogger) -> TaskOutcome:
    """Generate a secret for every client still holding a placeholder."""
    clients = context.store.model("Client")
    updated = 0
    for client in await clients.find_all():
        if not has_placeholder_secret(client):
            continue
        await clients.edit({"secret": new_client_secret()}, {"id": client.id})
        updated += 1

    if not updated:
        return already_satisfied(logger, "fixtures.v005.client_secrets.up_to_date")
    return applied(logger, "fixtures.v005.client_secrets.updated", count=updated)


@register_task("add_scheduler_client")
async def add_scheduler_client(context: MigrationContext, logger: TaskLogger) -> TaskOutcome:
    """Add the ``app-scheduler`` client."""
    return await add_client_if_missing(context, logger, "app-scheduler")


def _report(logger: TaskLogger, what: str, result: ReconciliationResult) -> None:
    event = f"fixtures.v005.client_permissions.{what}"
    if not result.complete:
        logger.warning(f"{event}_shortfall", expected=result.expected, done=result.done)
    elif result.created:
        logger.info(f"{event}_added", **result.to_dict())
    else:
        logger.warning(f"{event}_present", expected=result.expected)


@register_task("add_client_permissions")
async def add_client_permissions(context: MigrationContext, logger: TaskLogger) -> TaskOutcome:
    """Reconcile ``client`` permissions and their role grants."""
    permissions = context.fixtures.find_model_fixtures(
        "Permission", {"object_type": PERMISSION_OBJECT_TYPE}
    )
    model_result = await reconcile_model_fixtures(context.store, permissions, logger)
    _report(logger, "permissions", model_result)

    specs = context.fixtures.find_permission_relations_for_object(PERMISSION_OBJECT_TYPE)
    relation_result = await reconcile_relation_fixtures(context.store, specs, logger)
    _report(logger, "relations", relation_result)

    if model_result.created or relation_result.created:
        return TaskOutcome.APPLIED
    return TaskOutcome.ALREADY_SATISFIED


def task_set(registry: TaskRegistry | None = None) -> TaskSet:
    """The ordered tasks for version 005."""
    return (registry or get_task_registry()).task_set(VERSION, TASK_NAMES)


__all__ = [
    "VERSION",
    "TASK_NAMES",
    "PERMISSION_OBJECT_TYPE",
    "task_set",
]
