"""
Comment store.  Comments are scoped to the post id stored on them; there
is no re-parenting.  Per-post listings read oldest first (threaded order),
the admin listing newest first.
"""
from collections.abc import Sequence

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from blogstore.models import Comment
from blogstore.schemas import CommentRead


def _select_comments() -> Select:
    return (
        select(Comment)
        .options(joinedload(Comment.author))
        .execution_options(populate_existing=True)
    )


async def create_comment(db: AsyncSession, comment: Comment) -> CommentRead:
    db.add(comment)
    await db.flush()
    # Re-read so the server-generated created_at and the author are loaded.
    return await find_by_id(db, comment.id)


async def find_all(db: AsyncSession) -> list[CommentRead]:
    q = _select_comments().order_by(Comment.created_at.desc(), Comment.id.desc())
    result = await db.execute(q)
    return [CommentRead.model_validate(c) for c in result.unique().scalars().all()]


async def find_by_id(db: AsyncSession, comment_id: int) -> CommentRead | None:
    result = await db.execute(_select_comments().where(Comment.id == comment_id))
    comment = result.unique().scalar_one_or_none()
    return CommentRead.model_validate(comment) if comment is not None else None


async def find_by_post_id(db: AsyncSession, post_id: int) -> list[CommentRead]:
    q = (
        _select_comments()
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    result = await db.execute(q)
    return [CommentRead.model_validate(c) for c in result.unique().scalars().all()]


async def delete_by_id(db: AsyncSession, comment_id: int) -> None:
    await db.execute(
        delete(Comment)
        .where(Comment.id == comment_id)
        .execution_options(synchronize_session=False)
    )


async def delete_comments_by_ids(db: AsyncSession, ids: Sequence[int] | None) -> None:
    """Bulk delete by comment id.  Empty or ``None`` input is a no-op."""
    if not ids:
        return
    await db.execute(
        delete(Comment)
        .where(Comment.id.in_(ids))
        .execution_options(synchronize_session=False)
    )


async def delete_comments_by_post_ids(db: AsyncSession, post_ids: Sequence[int] | None) -> None:
    """Remove every comment attached to the given posts.  No-op on empty input."""
    if not post_ids:
        return
    await db.execute(
        delete(Comment)
        .where(Comment.post_id.in_(post_ids))
        .execution_options(synchronize_session=False)
    )
