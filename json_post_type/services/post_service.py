"""
PostService

Storage operations for posts of a registered type. Content is stored as
given; JSON validation on write only happens when
settings.validate_json_on_write is enabled.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from json_post_type.config import settings
from json_post_type.constants import PostStatus
from json_post_type.exceptions import InvalidJSONDocumentError, PostNotFoundError
from json_post_type.models.post import Post
from json_post_type.models.user import User
from json_post_type.post_types import PostTypeObject
from json_post_type.rest.shaping import parse_json
from json_post_type.services import revision_service
from json_post_type.services.capability_service import VISIBLE_ALL, VISIBLE_OWN, status_visibility
from json_post_type.utils.sanitize import sanitize_plain_text

logger = logging.getLogger(__name__)


def validate_content(content: str) -> None:
    """Raise InvalidJSONDocumentError when strict mode is on and `content` is not JSON."""
    if not settings.validate_json_on_write:
        return
    try:
        parse_json(content)
    except ValueError as exc:
        raise InvalidJSONDocumentError(str(exc))


async def get_post(db: AsyncSession, post_id: int, post_type: PostTypeObject) -> Post:
    result = await db.execute(select(Post).where(Post.id == post_id, Post.post_type == post_type.name))
    post = result.scalars().first()
    if not post:
        raise PostNotFoundError(post_id)
    return post


async def create_post(
    db: AsyncSession,
    post_type: PostTypeObject,
    author: Optional[User],
    title: Optional[str] = None,
    content: Optional[str] = None,
    status: PostStatus = PostStatus.DRAFT,
) -> Post:
    content = content or ""
    if status != PostStatus.AUTO_DRAFT:
        validate_content(content)

    post = Post(
        post_type=post_type.name,
        title=sanitize_plain_text(title),
        content=content,
        status=status,
        author_id=author.id if author else None,
    )
    db.add(post)
    await db.flush()

    if status != PostStatus.AUTO_DRAFT and post_type.supports("revisions"):
        revision_service.create_revision_from_post(post, db, author)

    await db.commit()
    await db.refresh(post)
    logger.info("Created %s post %s (status=%s)", post_type.name, post.id, post.status.value)
    return post


async def update_post(
    db: AsyncSession,
    post: Post,
    post_type: PostTypeObject,
    editor: Optional[User],
    title: Optional[str] = None,
    content: Optional[str] = None,
    status: Optional[PostStatus] = None,
) -> Post:
    """
    Apply the given fields to `post`.

    Fields left as None are unchanged. A revision is recorded whenever the
    title or content changes and the type supports revisions.
    """
    if content is not None:
        validate_content(content)

    changed = False
    if title is not None:
        title = sanitize_plain_text(title)
        changed |= title != post.title
        post.title = title
    if content is not None:
        changed |= content != post.content
        post.content = content
    if status is not None:
        post.status = status
    post.updated_at = datetime.utcnow()

    if changed and post_type.supports("revisions"):
        revision_service.create_revision_from_post(post, db, editor)

    await db.commit()
    await db.refresh(post)
    logger.info("Updated %s post %s (status=%s)", post_type.name, post.id, post.status.value)
    return post


async def list_posts(
    db: AsyncSession,
    post_type: PostTypeObject,
    user: Optional[User],
    statuses: list[PostStatus],
    page: int = 1,
    per_page: int = 10,
) -> tuple[list[Post], int, int]:
    """
    Page through the posts of `post_type` that `user` may see.

    Returns:
        (posts, total, total_pages)
    """
    conditions = []
    for status in statuses:
        visibility = status_visibility(user, post_type, status)
        if visibility == VISIBLE_ALL:
            conditions.append(Post.status == status)
        elif visibility == VISIBLE_OWN and user is not None:
            conditions.append(and_(Post.status == status, Post.author_id == user.id))

    if not conditions:
        return [], 0, 0

    where = and_(Post.post_type == post_type.name, or_(*conditions))
    total = (await db.execute(select(func.count()).select_from(Post).where(where))).scalar_one()

    result = await db.execute(
        select(Post).where(where).order_by(Post.created_at.desc(), Post.id.desc()).offset((page - 1) * per_page).limit(per_page)
    )
    return list(result.scalars().all()), total, math.ceil(total / per_page)
