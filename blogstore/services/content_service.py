"""
Content service: the contract boundary consumed by the web layer and the
seeding tool.

Design notes
------------
- Listings delegate to the post store and then pass the page's post ids
  through the tag aggregator, so a page of N posts costs COUNT + SELECT +
  one tag query (or just COUNT when nothing matches).
- Single-post reads reuse the same aggregator with a one-element list.
- Input is validated here, before any store is touched.
- The acting user is an explicit ``created_by`` argument; nothing is read
  from ambient request state.
- Functions flush but never commit.  Every multi-step write (post + tag
  associations, comment cascade + post delete) therefore lands in the
  caller's single transaction.
"""
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.config import settings
from blogstore.exceptions import InvalidInputError, ResourceNotFoundError
from blogstore.models import Comment, Post, PostStatus
from blogstore.rendering import render_markdown
from blogstore.repositories import (
    category_repository,
    comment_repository,
    post_repository,
    tag_repository,
)
from blogstore.schemas import (
    CategoryRead,
    CommentCreate,
    CommentRead,
    PagedResult,
    PostCreate,
    PostRead,
    PostUpdate,
    TagRead,
)
from blogstore.services.tag_aggregator import attach_tags
from blogstore.slugs import to_slug

logger = logging.getLogger(__name__)

Renderer = Callable[[str], str]


@dataclass(frozen=True)
class PostFilter:
    """Which posts a listing covers.  At most one of the slugs may be set."""

    category_slug: str | None = None
    tag_slug: str | None = None
    status: PostStatus | None = None


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise InvalidInputError(f"{field} must not be blank", field=field)
    return value.strip()


def _check_paging(page_size: int) -> None:
    if page_size < 1:
        raise InvalidInputError("page_size must be at least 1", field="page_size")


# ---------------------------------------------------------------------------
# Post listings
# ---------------------------------------------------------------------------

async def list_posts(
    db: AsyncSession,
    post_filter: PostFilter | None = None,
    page: int = 1,
    page_size: int | None = None,
) -> PagedResult[PostRead]:
    """Return one page of posts matching *post_filter*, tags attached."""
    post_filter = post_filter or PostFilter()
    page_size = page_size if page_size is not None else settings.DEFAULT_PAGE_SIZE
    _check_paging(page_size)
    if post_filter.category_slug is not None and post_filter.tag_slug is not None:
        raise InvalidInputError("Filter by category or by tag, not both")

    if post_filter.category_slug is not None:
        result = await post_repository.find_posts_by_category_slug(
            db, post_filter.category_slug, page, page_size, post_filter.status
        )
    elif post_filter.tag_slug is not None:
        result = await post_repository.find_posts_by_tag_slug(
            db, post_filter.tag_slug, page, page_size, post_filter.status
        )
    else:
        result = await post_repository.find_all_posts(db, page, page_size, post_filter.status)

    await attach_tags(db, result.data)
    return result


async def get_posts(
    db: AsyncSession, page: int = 1, page_size: int | None = None
) -> PagedResult[PostRead]:
    return await list_posts(db, None, page, page_size)


async def get_posts_by_category_slug(
    db: AsyncSession, category_slug: str, page: int = 1, page_size: int | None = None
) -> PagedResult[PostRead]:
    return await list_posts(db, PostFilter(category_slug=category_slug), page, page_size)


async def get_posts_by_tag_slug(
    db: AsyncSession, tag_slug: str, page: int = 1, page_size: int | None = None
) -> PagedResult[PostRead]:
    return await list_posts(db, PostFilter(tag_slug=tag_slug), page, page_size)


async def get_posts_count(db: AsyncSession, status: PostStatus | None = None) -> int:
    return await post_repository.find_posts_count(db, status)


# ---------------------------------------------------------------------------
# Single post
# ---------------------------------------------------------------------------

async def get_post_by_id(db: AsyncSession, post_id: int) -> PostRead:
    post = await post_repository.find_by_id(db, post_id)
    if post is None:
        raise ResourceNotFoundError("Post", post_id)
    await attach_tags(db, [post])
    return post


async def get_post_by_slug(db: AsyncSession, slug: str) -> PostRead:
    post = await post_repository.find_by_slug(db, slug)
    if post is None:
        raise ResourceNotFoundError("Post", slug)
    await attach_tags(db, [post])
    return post


# ---------------------------------------------------------------------------
# Post writes
# ---------------------------------------------------------------------------

async def _resolve_tags(db: AsyncSession, tag_names: Sequence[str]) -> list[TagRead]:
    """
    Get-or-create every named tag, collapsing names that share a slug so
    each tag is associated once.
    """
    tags: dict[int, TagRead] = {}
    for name in tag_names:
        tag = await tag_repository.get_or_create_by_name(db, name)
        tags.setdefault(tag.id, tag)
    return list(tags.values())


async def create_post(
    db: AsyncSession,
    data: PostCreate,
    created_by: int,
    renderer: Renderer = render_markdown,
) -> int:
    """
    Create a post with its category and tags and return the new id.

    Title and slug are checked before any store call; the slug defaults
    to ``to_slug(title)``.  A duplicate slug surfaces as the storage
    layer's IntegrityError.
    """
    title = _require_text(data.title, "title")
    slug = _require_text(to_slug(data.slug or title), "slug")

    category = await category_repository.get_or_create_by_name(db, data.category)
    tags = await _resolve_tags(db, data.tags)

    post_id = await post_repository.create_post(
        db,
        Post(
            title=title,
            slug=slug,
            short_description=data.short_description,
            content_markdown=data.content_markdown,
            content_html=renderer(data.content_markdown),
            status=data.status,
            category_id=category.id,
            created_by=created_by,
        ),
    )
    await post_repository.add_post_tags(db, post_id, tags)
    logger.info("Created post id=%s slug=%r with %d tag(s)", post_id, slug, len(tags))
    return post_id


async def update_post(
    db: AsyncSession,
    post_id: int,
    data: PostUpdate,
    renderer: Renderer = render_markdown,
) -> None:
    """
    Replace the mutable fields of an existing post.  The slug assigned at
    creation is kept; the HTML body is re-rendered from the markdown.
    """
    title = _require_text(data.title, "title")
    existing = await post_repository.find_by_id(db, post_id)
    if existing is None:
        raise ResourceNotFoundError("Post", post_id)

    category = await category_repository.get_or_create_by_name(db, data.category)
    await post_repository.update_post(
        db,
        post_id,
        title=title,
        slug=existing.slug,
        short_description=data.short_description,
        content_markdown=data.content_markdown,
        content_html=renderer(data.content_markdown),
        status=data.status,
        category_id=category.id,
    )
    logger.info("Updated post id=%s", post_id)


async def delete_posts(db: AsyncSession, post_ids: Sequence[int] | None) -> None:
    """
    Delete posts and their comments.  Comments go first so none is left
    pointing at a missing post.  Empty or ``None`` input is a no-op.
    """
    if not post_ids:
        return
    ids = list(dict.fromkeys(post_ids))
    await comment_repository.delete_comments_by_post_ids(db, ids)
    await post_repository.delete_posts_by_ids(db, ids)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

async def list_comments(db: AsyncSession, post_id: int) -> list[CommentRead]:
    """Comments on *post_id*, oldest first."""
    return await comment_repository.find_by_post_id(db, post_id)


async def list_all_comments(db: AsyncSession) -> list[CommentRead]:
    """Every comment, newest first."""
    return await comment_repository.find_all(db)


async def create_comment(db: AsyncSession, data: CommentCreate, created_by: int) -> CommentRead:
    content = _require_text(data.content, "content")
    if await post_repository.find_by_id(db, data.post_id) is None:
        raise ResourceNotFoundError("Post", data.post_id)
    comment = await comment_repository.create_comment(
        db, Comment(content=content, post_id=data.post_id, created_by=created_by)
    )
    logger.info("Created comment id=%s on post id=%s", comment.id, data.post_id)
    return comment


async def delete_comment(db: AsyncSession, comment_id: int) -> None:
    if await comment_repository.find_by_id(db, comment_id) is None:
        raise ResourceNotFoundError("Comment", comment_id)
    await comment_repository.delete_by_id(db, comment_id)


async def delete_comments(db: AsyncSession, comment_ids: Sequence[int] | None) -> None:
    await comment_repository.delete_comments_by_ids(db, comment_ids)


# ---------------------------------------------------------------------------
# Categories and tags
# ---------------------------------------------------------------------------

async def get_or_create_category(db: AsyncSession, name: str) -> CategoryRead:
    return await category_repository.get_or_create_by_name(db, name)


async def get_or_create_tag(db: AsyncSession, name: str) -> TagRead:
    return await tag_repository.get_or_create_by_name(db, name)


async def list_categories(db: AsyncSession) -> list[CategoryRead]:
    return await category_repository.find_all(db)


async def list_tags(db: AsyncSession) -> list[TagRead]:
    return await tag_repository.find_all(db)
