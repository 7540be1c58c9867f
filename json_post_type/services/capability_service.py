"""
CapabilityService

Role seeding, the JSON capability grant, and per-post capability checks.

Grant semantics:
  - Grants are additive; nothing here ever removes a capability.
  - A role is updated only when it lacks one of the JSON capabilities,
    and then all of them are set together.
  - Role names that do not resolve to a stored role are skipped.

Per-post checks route through the post type's capability names, so grants
for one type never open up another.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from json_post_type.config import settings
from json_post_type.constants import DEFAULT_ROLE_CAPABILITIES, JSON_CAPABILITIES, PUBLISHING_STATUSES, PostStatus
from json_post_type.models.user import Role, User
from json_post_type.plugins.hooks import FILTER_POST_TYPE_ROLES
from json_post_type.plugins.registry import PluginRegistry, plugin_registry

if TYPE_CHECKING:
    from json_post_type.models import Post
    from json_post_type.post_types import PostTypeObject

logger = logging.getLogger(__name__)


# ── Roles ─────────────────────────────────────────────────────────────────────


async def get_role(db: AsyncSession, name: str) -> Optional[Role]:
    result = await db.execute(select(Role).where(Role.name == name))
    return result.scalars().first()


async def seed_default_roles(db: AsyncSession) -> list[str]:
    """Create any missing default role; existing roles are left untouched. Returns created names."""
    created: list[str] = []
    for name, capabilities in DEFAULT_ROLE_CAPABILITIES.items():
        if await get_role(db, name) is None:
            db.add(Role(name=name, display_name=name.title(), capabilities=dict(capabilities)))
            created.append(name)
    if created:
        await db.commit()
        logger.info("Seeded roles: %s", ", ".join(created))
    return created


def missing_capabilities(role: Role, capabilities: Iterable[str] = JSON_CAPABILITIES) -> list[str]:
    return [cap for cap in capabilities if not role.has_cap(cap)]


async def ensure_capabilities(
    db: AsyncSession,
    roles: Optional[list[str]] = None,
    registry: PluginRegistry = plugin_registry,
) -> list[str]:
    """
    Grant the JSON capabilities to each configured role that lacks any of them.

    Args:
        db:       Database session.
        roles:    Role names to consider; defaults to settings.capability_roles.
                  The list passes through the json_post_type_roles filter.
        registry: Plugin registry used for the filter.

    Returns:
        Names of the roles that were changed, in input order. Empty when
        every role already held all capabilities.
    """
    role_names = list(roles if roles is not None else settings.capability_roles)
    role_names = await registry.apply_filters(FILTER_POST_TYPE_ROLES, role_names)

    updated: list[str] = []
    for name in role_names:
        role = await get_role(db, name)
        if role is None:
            continue
        if not missing_capabilities(role):
            continue
        # Reassign so the JSON column is flagged dirty
        role.capabilities = {**(role.capabilities or {}), **{cap: True for cap in JSON_CAPABILITIES}}
        updated.append(name)

    if updated:
        await db.commit()
        logger.info("Granted JSON capabilities to roles: %s", ", ".join(updated))
    return updated


# ── Per-post checks ───────────────────────────────────────────────────────────


def user_can(user: Optional[User], capability: str) -> bool:
    return user is not None and user.has_cap(capability)


def is_own(user: Optional[User], post: Post) -> bool:
    return user is not None and post.author_id == user.id


def can_create(user: Optional[User], post_type: PostTypeObject) -> bool:
    return user_can(user, post_type.cap.create_posts)


def can_read_post(user: Optional[User], post: Post, post_type: PostTypeObject) -> bool:
    """Published posts are readable by anyone; other statuses need an editing or private-read grant."""
    if post.status == PostStatus.PUBLISH:
        return True
    if is_own(user, post):
        return user_can(user, post_type.cap.edit_posts)
    if post.status == PostStatus.PRIVATE:
        return user_can(user, post_type.cap.read_private_posts)
    return user_can(user, post_type.cap.edit_others_posts)


def can_edit_post(user: Optional[User], post: Post, post_type: PostTypeObject) -> bool:
    if is_own(user, post):
        return user_can(user, post_type.cap.edit_posts)
    return user_can(user, post_type.cap.edit_others_posts)


def can_set_status(user: Optional[User], post_type: PostTypeObject, status: PostStatus) -> bool:
    if status in PUBLISHING_STATUSES:
        return user_can(user, post_type.cap.publish_posts)
    return user_can(user, post_type.cap.edit_posts)


VISIBLE_ALL = "all"
VISIBLE_OWN = "own"


def status_visibility(user: Optional[User], post_type: PostTypeObject, status: PostStatus) -> Optional[str]:
    """
    Which posts of `status` a listing may show to `user`.

    Mirrors can_read_post for collections: "all", "own" (the user's own
    posts only) or None.
    """
    if status == PostStatus.PUBLISH:
        return VISIBLE_ALL
    others_cap = post_type.cap.read_private_posts if status == PostStatus.PRIVATE else post_type.cap.edit_others_posts
    if user_can(user, others_cap):
        return VISIBLE_ALL
    if user_can(user, post_type.cap.edit_posts):
        return VISIBLE_OWN
    return None
