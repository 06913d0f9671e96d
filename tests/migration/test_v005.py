"""Tests for the version 005 fixture tasks."""

import pytest

from fixturespine.migration.tasks import TaskOutcome
from fixturespine.migration.versions import v005
from fixturespine.migration.versions.v005 import (
    add_client_permissions,
    add_scheduler_client,
    update_client_secrets,
)

ROLES = ("Administrator", "Editor", "Author")


async def _seed_roles(store, names=ROLES):
    for name in names:
        await store.model("Role").add({"name": name})


async def _role_permissions(store, role_name):
    roles = store.model("Role")
    role = await roles.find_one({"name": role_name})
    related = await roles.load_related(role, "permissions")
    return sorted(p.get("action_type") for p in related if p.get("object_type") == "client")


class TestTaskSet:

    def test_three_tasks_in_order(self):
        assert v005.task_set().names == [
            "update_client_secrets",
            "add_scheduler_client",
            "add_client_permissions",
        ]


class TestUpdateClientSecrets:

    @pytest.mark.asyncio
    async def test_replaces_placeholder_secrets_only(self, store, context, logger):
        clients = store.model("Client")
        await clients.add({"slug": "a", "secret": "not_available"})
        await clients.add({"slug": "b", "secret": ""})
        await clients.add({"slug": "c", "secret": "0123456789ab"})

        outcome = await update_client_secrets(context, logger)

        assert outcome is TaskOutcome.APPLIED
        secrets = {c.get("slug"): c.get("secret") for c in await clients.find_all()}
        assert secrets["c"] == "0123456789ab"
        assert secrets["a"] not in ("", "not_available")
        assert secrets["b"] not in ("", "not_available")
        logger.info.assert_called_once()
        assert logger.info.call_args.kwargs["count"] == 2

    @pytest.mark.asyncio
    async def test_second_run_only_warns(self, store, context, logger):
        await store.model("Client").add({"slug": "a", "secret": "not_available"})
        await update_client_secrets(context, logger)
        logger.reset_mock()

        outcome = await update_client_secrets(context, logger)

        assert outcome is TaskOutcome.ALREADY_SATISFIED
        assert (logger.info.call_count, logger.warning.call_count) == (0, 1)


class TestAddSchedulerClient:

    @pytest.mark.asyncio
    async def test_adds_once(self, store, context, logger):
        assert await add_scheduler_client(context, logger) is TaskOutcome.APPLIED
        client = await store.model("Client").find_one({"slug": "app-scheduler"})
        assert client.get("type") == "web"

        logger.reset_mock()
        assert await add_scheduler_client(context, logger) is TaskOutcome.ALREADY_SATISFIED
        assert (logger.info.call_count, logger.warning.call_count) == (0, 1)
        assert store.count("Client") == 1


class TestAddClientPermissions:

    @pytest.mark.asyncio
    async def test_adds_permissions_and_grants(self, store, context, logger):
        await _seed_roles(store)

        outcome = await add_client_permissions(context, logger)

        assert outcome is TaskOutcome.APPLIED
        assert store.count("Permission") == 5
        assert await _role_permissions(store, "Administrator") == ["add", "browse", "destroy", "edit", "read"]
        assert await _role_permissions(store, "Editor") == ["add", "browse", "destroy", "edit", "read"]
        assert await _role_permissions(store, "Author") == ["browse", "read"]
        assert logger.info.call_count == 2
        assert logger.warning.call_count == 0

    @pytest.mark.asyncio
    async def test_second_run_only_warns(self, store, context, logger):
        await _seed_roles(store)
        await add_client_permissions(context, logger)
        logger.reset_mock()

        outcome = await add_client_permissions(context, logger)

        assert outcome is TaskOutcome.ALREADY_SATISFIED
        assert (logger.info.call_count, logger.warning.call_count) == (0, 2)
        assert store.count("Permission") == 5

    @pytest.mark.asyncio
    async def test_missing_roles_is_a_shortfall_not_a_failure(self, store, context, logger):
        outcome = await add_client_permissions(context, logger)

        assert outcome is TaskOutcome.APPLIED
        assert store.count("Permission") == 5
        events = [call.args[0] for call in logger.warning.call_args_list]
        assert events == ["fixtures.v005.client_permissions.relations_shortfall"]
        assert logger.warning.call_args.kwargs == {"expected": 12, "done": 0}

    @pytest.mark.asyncio
    async def test_partial_run_is_completed_by_rerun(self, store, context, logger):
        await _seed_roles(store, ["Administrator"])
        await add_client_permissions(context, logger)
        await _seed_roles(store, ["Editor", "Author"])
        logger.reset_mock()

        outcome = await add_client_permissions(context, logger)

        assert outcome is TaskOutcome.APPLIED
        assert await _role_permissions(store, "Author") == ["browse", "read"]
        info_events = [call.args[0] for call in logger.info.call_args_list]
        assert info_events == ["fixtures.v005.client_permissions.relations_added"]
