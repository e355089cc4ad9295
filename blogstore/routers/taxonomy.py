from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.database import get_db
from blogstore.dependencies import get_current_user
from blogstore.schemas import CategoryRead, LabelCreate, TagRead, UserRead
from blogstore.services import content_service

router = APIRouter(prefix="/api/v1", tags=["taxonomy"])


@router.get("/categories", response_model=list[CategoryRead])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await content_service.list_categories(db)


# POST is get-or-create: an existing slug returns the stored category unchanged.
@router.post("/categories", response_model=CategoryRead)
async def get_or_create_category(
    data: LabelCreate,
    user: UserRead = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await content_service.get_or_create_category(db, data.name)


@router.get("/tags", response_model=list[TagRead])
async def list_tags(db: AsyncSession = Depends(get_db)):
    return await content_service.list_tags(db)


@router.post("/tags", response_model=TagRead)
async def get_or_create_tag(
    data: LabelCreate,
    user: UserRead = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await content_service.get_or_create_tag(db, data.name)
