"""
Post store: CRUD plus the three paginated listing modes.

Every listing follows the same pattern:

1. COUNT the rows matching the filter.
2. If the count is zero, return ``PagedResult.empty()`` without issuing the
   data query.
3. Otherwise fetch one page (``LIMIT page_size OFFSET (page - 1) *
   page_size``) newest first, with category and creator joined eagerly.

Tags are not loaded here; ``services.tag_aggregator`` attaches them to a
whole page in one extra query.
"""
import logging
from collections.abc import Iterable, Sequence

from sqlalchemy import Select, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from blogstore.models import Category, Post, PostStatus, Tag, post_tags
from blogstore.schemas import PagedResult, PostRead, TagRead

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Query helpers
# ---------------------------------------------------------------------------

def _select_posts() -> Select:
    """SELECT posts with category and creator resolved in the same round trip."""
    return (
        select(Post)
        .options(joinedload(Post.category), joinedload(Post.author))
        .execution_options(populate_existing=True)
    )


def _criteria(status: PostStatus | None) -> list:
    return [Post.status == status] if status is not None else []


def _tag_slug_filter(tag_slug: str):
    # Semi-join: a post matches once however many association rows it has.
    return Post.id.in_(
        select(post_tags.c.post_id)
        .join(Tag, Tag.id == post_tags.c.tag_id)
        .where(Tag.slug == tag_slug)
    )


def _category_slug_filter(category_slug: str):
    return Post.category_id.in_(
        select(Category.id).where(Category.slug == category_slug)
    )


async def _paginate(
    db: AsyncSession,
    criteria: list,
    page: int,
    page_size: int,
) -> PagedResult[PostRead]:
    """Run the count-then-fetch sequence for posts matching *criteria*."""
    count_q = select(func.count()).select_from(Post).where(*criteria)
    total: int = (await db.execute(count_q)).scalar_one()
    if total == 0:
        return PagedResult[PostRead].empty()

    page = max(page, 1)
    offset = (page - 1) * page_size
    if offset >= total:
        # Past the last page: nothing to fetch.
        return PagedResult[PostRead].of([], page, page_size, total)

    rows_q = (
        _select_posts()
        .where(*criteria)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset(offset)
        .limit(page_size)
    )
    result = await db.execute(rows_q)
    posts = [PostRead.model_validate(p) for p in result.unique().scalars().all()]
    logger.debug("Fetched page %d (size %d) of %d post(s)", page, page_size, total)
    return PagedResult[PostRead].of(posts, page, page_size, total)


# ---------------------------------------------------------------------------
# Paginated retrieval
# ---------------------------------------------------------------------------

async def find_all_posts(
    db: AsyncSession, page: int, page_size: int, status: PostStatus | None = None
) -> PagedResult[PostRead]:
    return await _paginate(db, _criteria(status), page, page_size)


async def find_posts_by_category_slug(
    db: AsyncSession,
    category_slug: str,
    page: int,
    page_size: int,
    status: PostStatus | None = None,
) -> PagedResult[PostRead]:
    criteria = [_category_slug_filter(category_slug), *_criteria(status)]
    return await _paginate(db, criteria, page, page_size)


async def find_posts_by_tag_slug(
    db: AsyncSession,
    tag_slug: str,
    page: int,
    page_size: int,
    status: PostStatus | None = None,
) -> PagedResult[PostRead]:
    criteria = [_tag_slug_filter(tag_slug), *_criteria(status)]
    return await _paginate(db, criteria, page, page_size)


# ---------------------------------------------------------------------------
# Single-row lookups
# ---------------------------------------------------------------------------

async def find_by_id(db: AsyncSession, post_id: int) -> PostRead | None:
    result = await db.execute(_select_posts().where(Post.id == post_id))
    post = result.unique().scalar_one_or_none()
    return PostRead.model_validate(post) if post is not None else None


async def find_by_slug(db: AsyncSession, slug: str) -> PostRead | None:
    result = await db.execute(_select_posts().where(Post.slug == slug))
    post = result.unique().scalar_one_or_none()
    return PostRead.model_validate(post) if post is not None else None


async def find_posts_count(db: AsyncSession, status: PostStatus | None = None) -> int:
    q = select(func.count()).select_from(Post).where(*_criteria(status))
    return (await db.execute(q)).scalar_one()


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def create_post(db: AsyncSession, post: Post) -> int:
    """Insert *post* and return the identity assigned by the database."""
    db.add(post)
    await db.flush()
    return post.id


async def update_post(
    db: AsyncSession,
    post_id: int,
    *,
    title: str,
    slug: str,
    short_description: str | None,
    content_markdown: str,
    content_html: str,
    status: PostStatus,
    category_id: int,
) -> None:
    """Full replace of the mutable columns.  Creator and created_at never change."""
    await db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(
            title=title,
            slug=slug,
            short_description=short_description,
            content_markdown=content_markdown,
            content_html=content_html,
            status=status,
            category_id=category_id,
        )
    )


async def add_post_tags(db: AsyncSession, post_id: int, tags: Iterable[TagRead]) -> None:
    """
    Insert one association row per tag.

    Not idempotent: adding a tag the post already has violates the
    association's primary key.  Callers de-duplicate beforehand.
    """
    rows = [{"post_id": post_id, "tag_id": tag.id} for tag in tags]
    if not rows:
        return
    await db.execute(insert(post_tags), rows)


async def delete_posts_by_ids(db: AsyncSession, ids: Sequence[int] | None) -> None:
    """
    Delete the posts in *ids* together with their tag associations.
    Empty or ``None`` input is a no-op.  Comments are not touched here.
    """
    if not ids:
        return
    await db.execute(delete(post_tags).where(post_tags.c.post_id.in_(ids)))
    await db.execute(
        delete(Post).where(Post.id.in_(ids)).execution_options(synchronize_session=False)
    )
    logger.info("Deleted %d post id(s): %s", len(ids), list(ids))
