from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.database import get_db
from blogstore.schemas import UserCreate, UserRead
from blogstore.services import user_service

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await user_service.get_user(db, user_id)


# A duplicate email surfaces as IntegrityError and is answered with 409.
@router.post("", status_code=201, response_model=UserRead)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    return await user_service.create_user(db, data)
