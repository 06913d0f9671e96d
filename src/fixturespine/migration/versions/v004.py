"""
Fixture upgrade to version 004.

Tasks, in order:

1. ``move_jquery``             prepend the CDN jQuery tag to the footer injection
2. ``update_private_setting``  classify ``is_private`` as a private setting
3. ``update_password_setting`` classify ``password`` as a private setting
4. ``update_admin_client``     give ``app-admin`` a real secret and enable it
5. ``add_frontend_client``     add the ``app-frontend`` client
6. ``clean_broken_tags``       strip empty comma segments from tag names
7. ``add_post_tag_order``      backfill ``sort_order`` on post/tag links
8. ``add_welcome_post``        add the ``welcome`` post

Every task is safe to re-run: the second run mutates nothing and only
warns.

Tags:
    fixture-spine, migration, version-004

Doc-Types:
    api-reference
"""

from __future__ import annotations

from fixturespine.core.protocols import Notification, TaskLogger
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

VERSION = "004"

TASK_NAMES = (
    "move_jquery",
    "update_private_setting",
    "update_password_setting",
    "update_admin_client",
    "add_frontend_client",
    "clean_broken_tags",
    "add_post_tag_order",
    "add_welcome_post",
)

JQUERY_SNIPPET = (
    "<!-- You can safely delete this line if your theme does not require jQuery -->\n"
    '<script type="text/javascript" src="https://code.jquery.com/jquery-1.11.3.min.js"></script>\n\n'
)

PRIVACY_NOTICE = (
    "jQuery has been removed from core and is now being loaded from the jQuery "
    "Foundation's CDN. This can be changed or removed in your Code Injection settings area."
)

FALLBACK_TAG_NAME = "tag"


@register_task("move_jquery")
async def move_jquery(context: MigrationContext, logger: TaskLogger) -> TaskOutcome:
    """Prepend the jQuery CDN script to the footer code injection."""
    settings = context.store.model("Setting")
    setting = await settings.find_one({"key": "code_injection_foot"})
    if setting is None:
        return already_satisfied(logger, "fixtures.v004.jquery.setting_missing")

    value = setting.get("value") or ""
    if JQUERY_SNIPPET.rstrip("\n") in value:
        return already_satisfied(logger, "fixtures.v004.jquery.already_present")

    await settings.edit({"value": JQUERY_SNIPPET + value}, {"key": "code_injection_foot"})
    outcome = applied(logger, "fixtures.v004.jquery.added")

    if context.settings.privacy.any_enabled:
        logger.info("fixtures.v004.jquery.privacy_notice")
        await context.notify(Notification(message=PRIVACY_NOTICE))
    return outcome


async def _make_setting_private(
    context: MigrationContext,
    logger: TaskLogger,
    key: str,
) -> TaskOutcome:
    settings = context.store.model("Setting")
    setting = await settings.find_one({"key": key})
    if setting is None:
        return already_satisfied(logger, "fixtures.v004.setting.missing", key=key)
    if setting.get("type") == "private":
        return already_satisfied(logger, "fixtures.v004.setting.already_private", key=key)

    await settings.edit({"type": "private"}, {"key": key})
    return applied(logger, "fixtures.v004.setting.made_private", key=key)


@register_task("update_private_setting")
async def update_private_setting(context: MigrationContext, logger: TaskLogger) -> TaskOutcome:
    """Classify the ``is_private`` setting as private."""
    return await _make_setting_private(context, logger, "is_private")


@register_task("update_password_setting")
async def update_password_setting(context: MigrationContext, logger: TaskLogger) -> TaskOutcome:
    """Classify the ``password`` setting as private."""
    return await _make_setting_private(context, logger, "password")


@register_task("update_admin_client")
async def update_admin_client(context: MigrationContext, logger: TaskLogger) -> TaskOutcome:
    """Replace a placeholder ``app-admin`` secret and enable the client."""
    clients = context.store.model("Client")
    client = await clients.find_one({"slug": "app-admin"})
    if client is None:
        return already_satisfied(logger, "fixtures.v004.admin_client.missing")

    changes = {}
    if has_placeholder_secret(client):
        changes["secret"] = new_client_secret()
    if client.get("status") != "enabled":
        changes["status"] = "enabled"
    if not changes:
        return already_satisfied(logger, "fixtures.v004.admin_client.up_to_date")

    await clients.edit(changes, {"slug": "app-admin"})
    return applied(logger, "fixtures.v004.admin_client.updated", fields=sorted(changes))


@register_task("add_frontend_client")
async def add_frontend_client(context: MigrationContext, logger: TaskLogger) -> TaskOutcome:
    """Add the ``app-frontend`` client."""
    return await add_client_if_missing(context, logger, "app-frontend")


def clean_tag_name(name: str) -> str:
    """Drop empty comma-separated segments; ``"tag"`` if nothing is left.

    >>> clean_tag_name(",hello")
    'hello'
    >>> clean_tag_name(",")
    'tag'
    """
    cleaned = ",".join(segment for segment in name.split(",") if segment.strip()).strip()
    return cleaned or FALLBACK_TAG_NAME


@register_task("clean_broken_tags")
async def clean_broken_tags(context: MigrationContext, logger: TaskLogger) -> TaskOutcome:
    """Repair tag names containing empty comma segments."""
    tags = context.store.model("Tag")
    collection = await tags.find_all()
    if not len(collection):
        return already_satisfied(logger, "fixtures.v004.tags.none")

    fixed = 0
    for tag in collection:
        name = tag.get("name") or ""
        cleaned = clean_tag_name(name)
        if cleaned == name:
            continue
        await tags.edit({"name": cleaned}, {"id": tag.id})
        fixed += 1

    if not fixed:
        return already_satisfied(logger, "fixtures.v004.tags.all_clean", checked=len(collection))
    return applied(logger, "fixtures.v004.tags.cleaned", count=fixed)


def _is_ordered(relations: list) -> bool:
    orders = [relation.pivot.get("sort_order") for relation in relations]
    if any(order not in (None, 0) for order in orders):
        return True
    return all(order == index for index, order in enumerate(orders))


@register_task("add_post_tag_order")
async def add_post_tag_order(context: MigrationContext, logger: TaskLogger) -> TaskOutcome:
    """Backfill a zero-based ``sort_order`` on every post's tag links.

    A post whose links already carry an order is skipped as a whole.
    """
    posts = context.store.model("Post")
    collection = await posts.find_all()
    if not len(collection):
        return already_satisfied(logger, "fixtures.v004.tag_order.no_posts")

    updated_posts = 0
    updated_links = 0
    for post in collection:
        relations = list(await posts.load_related(post, "tags"))
        if not relations:
            continue
        if _is_ordered(relations):
            logger.warning("fixtures.v004.tag_order.post_already_ordered", post_id=post.id)
            continue
        for index, tag in enumerate(relations):
            await posts.update_pivot(post, "tags", tag.id, {"sort_order": index})
            updated_links += 1
        updated_posts += 1

    if not updated_posts:
        return already_satisfied(logger, "fixtures.v004.tag_order.nothing_to_update")
    return applied(logger, "fixtures.v004.tag_order.updated", posts=updated_posts, relations=updated_links)


@register_task("add_welcome_post")
async def add_welcome_post(context: MigrationContext, logger: TaskLogger) -> TaskOutcome:
    """Add the ``welcome`` post."""
    posts = context.store.model("Post")
    if await posts.find_one({"slug": "welcome"}) is not None:
        return already_satisfied(logger, "fixtures.v004.welcome_post.exists")

    await posts.add(context.fixtures.find_model_fixture_entry("Post", {"slug": "welcome"}))
    return applied(logger, "fixtures.v004.welcome_post.added")


def task_set(registry: TaskRegistry | None = None) -> TaskSet:
    """The ordered tasks for version 004."""
    return (registry or get_task_registry()).task_set(VERSION, TASK_NAMES)


__all__ = [
    "VERSION",
    "TASK_NAMES",
    "JQUERY_SNIPPET",
    "PRIVACY_NOTICE",
    "clean_tag_name",
    "task_set",
]
