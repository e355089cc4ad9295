from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.database import get_db
from blogstore.dependencies import PaginationParams, PostFilterParams, get_current_user
from blogstore.schemas import IdList, PagedResult, PostCreate, PostCreated, PostRead, PostUpdate, UserRead
from blogstore.services import content_service
from blogstore.services.content_service import PostFilter

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


@router.get("", response_model=PagedResult[PostRead])
async def list_posts(
    pagination: PaginationParams = Depends(),
    filters: PostFilterParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    post_filter = PostFilter(category_slug=filters.category, tag_slug=filters.tag, status=filters.status)
    return await content_service.list_posts(db, post_filter, pagination.page, pagination.page_size)


@router.get("/by-id/{post_id}", response_model=PostRead)
async def get_post_by_id(post_id: int, db: AsyncSession = Depends(get_db)):
    return await content_service.get_post_by_id(db, post_id)


@router.get("/{slug}", response_model=PostRead)
async def get_post(slug: str, db: AsyncSession = Depends(get_db)):
    return await content_service.get_post_by_slug(db, slug)


@router.post("", status_code=201, response_model=PostCreated)
async def create_post(
    data: PostCreate,
    user: UserRead = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post_id = await content_service.create_post(db, data, created_by=user.id)
    return PostCreated(id=post_id)


@router.post("/bulk-delete", status_code=204)
async def delete_posts(
    data: IdList,
    user: UserRead = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await content_service.delete_posts(db, data.ids)


@router.put("/{post_id}", status_code=204)
async def update_post(
    post_id: int,
    data: PostUpdate,
    user: UserRead = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await content_service.update_post(db, post_id, data)


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: int,
    user: UserRead = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await content_service.get_post_by_id(db, post_id)
    await content_service.delete_posts(db, [post_id])
