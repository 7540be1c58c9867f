from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from json_post_type.exceptions import RevisionNotFoundError
from json_post_type.models.post import Post
from json_post_type.models.revision import PostRevision
from json_post_type.models.user import User


def create_revision_from_post(post: Post, db: AsyncSession, editor: User | None) -> PostRevision:
    """Snapshot the current title and content of `post`; committed by the caller."""
    revision = PostRevision(
        post_id=post.id,
        title=post.title,
        content=post.content,
        editor_id=editor.id if editor else None,
    )
    db.add(revision)
    return revision


async def get_revisions(post_id: int, db: AsyncSession) -> list[PostRevision]:
    result = await db.execute(
        select(PostRevision).where(PostRevision.post_id == post_id).order_by(PostRevision.id.desc())
    )
    return list(result.scalars().all())


async def get_revision(post_id: int, revision_id: int, db: AsyncSession) -> PostRevision:
    result = await db.execute(
        select(PostRevision).where(PostRevision.id == revision_id, PostRevision.post_id == post_id)
    )
    revision = result.scalars().first()
    if not revision:
        raise RevisionNotFoundError(revision_id)
    return revision


async def restore_revision(post: Post, revision_id: int, db: AsyncSession, current_user: User) -> Post:
    """Copy a revision's title and content back onto `post`, recording the restore as a new revision."""
    revision = await get_revision(post.id, revision_id, db)

    post.title = revision.title
    post.content = revision.content
    create_revision_from_post(post, db, current_user)

    await db.commit()
    await db.refresh(post)
    return post
