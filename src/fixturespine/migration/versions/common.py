"""Helpers shared by several versions' tasks."""

from __future__ import annotations

import secrets
from typing import Any

from fixturespine.core.protocols import TaskLogger
from fixturespine.migration.context import MigrationContext
from fixturespine.migration.tasks import TaskOutcome, already_satisfied, applied

# Secrets written by older installs before real ones were generated
PLACEHOLDER_SECRETS = frozenset({None, "", "not_available"})


def new_client_secret() -> str:
    return secrets.token_hex(6)


def has_placeholder_secret(client: Any) -> bool:
    return client.get("secret") in PLACEHOLDER_SECRETS


async def add_client_if_missing(
    context: MigrationContext,
    logger: TaskLogger,
    slug: str,
) -> TaskOutcome:
    """Insert the packaged ``Client`` fixture for ``slug`` unless it exists."""
    clients = context.store.model("Client")
    if await clients.find_one({"slug": slug}) is not None:
        return already_satisfied(logger, "fixtures.client.exists", slug=slug)

    fixture = context.fixtures.find_model_fixture_entry("Client", {"slug": slug})
    fixture.setdefault("secret", new_client_secret())
    await clients.add(fixture)
    return applied(logger, "fixtures.client.added", slug=slug)


__all__ = [
    "PLACEHOLDER_SECRETS",
    "new_client_secret",
    "has_placeholder_secret",
    "add_client_if_missing",
]
