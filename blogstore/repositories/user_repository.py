from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.models import User
from blogstore.schemas import UserCreate, UserRead


async def create_user(db: AsyncSession, data: UserCreate) -> UserRead:
    """
    Insert a user.  Email uniqueness is enforced by the database; the
    IntegrityError propagates to the caller.
    """
    user = User(name=data.name, email=data.email, role=data.role)
    db.add(user)
    await db.flush()
    return UserRead.model_validate(user)


async def find_by_id(db: AsyncSession, user_id: int) -> UserRead | None:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    return UserRead.model_validate(user) if user is not None else None


async def find_by_email(db: AsyncSession, email: str) -> UserRead | None:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    return UserRead.model_validate(user) if user is not None else None
