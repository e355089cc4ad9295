from fastapi import Depends, Header, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.config import settings
from blogstore.database import get_db
from blogstore.models import PostStatus
from blogstore.repositories import user_repository
from blogstore.schemas import UserRead

MAX_PAGE_NUMBER = 1_000_000


class PaginationParams:
    """
    Reusable FastAPI dependency that parses paging query parameters.

    Usage in a router::

        @router.get("/posts")
        async def list_posts(pagination: PaginationParams = Depends()):
            ...

    Attributes
    ----------
    page:
        1-based page number (minimum 1).
    page_size:
        Number of items per page.  Defaults to ``settings.DEFAULT_PAGE_SIZE``
        and is clamped to ``settings.MAX_PAGE_SIZE`` regardless of the value
        supplied by the caller.
    """

    def __init__(
        self,
        page: int = Query(
            1,
            ge=1,
            le=MAX_PAGE_NUMBER,
            description="Page number (1-based).",
        ),
        page_size: int | None = Query(
            None,
            ge=1,
            description="Number of items returned per page.",
        ),
    ) -> None:
        self.page = page
        if page_size is None:
            page_size = settings.DEFAULT_PAGE_SIZE
        self.page_size = min(page_size, settings.MAX_PAGE_SIZE)


class PostFilterParams:
    """Optional listing filters: one of category/tag slug, plus status."""

    def __init__(
        self,
        category: str | None = Query(None, description="Category slug."),
        tag: str | None = Query(None, description="Tag slug."),
        status: PostStatus | None = Query(None, description="DRAFT or PUBLISHED."),
    ) -> None:
        self.category = category
        self.tag = tag
        self.status = status


async def get_current_user(
    x_user_id: int | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> UserRead:
    """
    Resolve the acting user from the ``X-User-Id`` header.

    Authentication itself happens upstream; this only turns the id into a
    known user record.
    """
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="X-User-Id header required")
    user = await user_repository.find_by_id(db, x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user
