from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.database import get_db
from blogstore.dependencies import get_current_user
from blogstore.schemas import CommentCreate, CommentRead, IdList, UserRead
from blogstore.services import content_service

router = APIRouter(prefix="/api/v1/comments", tags=["comments"])


@router.get("", response_model=list[CommentRead])
async def list_comments(post_id: int, db: AsyncSession = Depends(get_db)):
    return await content_service.list_comments(db, post_id)


@router.get("/all", response_model=list[CommentRead])
async def list_all_comments(db: AsyncSession = Depends(get_db)):
    return await content_service.list_all_comments(db)


@router.post("", status_code=201, response_model=CommentRead)
async def create_comment(
    data: CommentCreate,
    user: UserRead = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await content_service.create_comment(db, data, created_by=user.id)


@router.post("/bulk-delete", status_code=204)
async def delete_comments(
    data: IdList,
    user: UserRead = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await content_service.delete_comments(db, data.ids)


@router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: int,
    user: UserRead = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await content_service.delete_comment(db, comment_id)
