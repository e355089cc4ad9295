"""
User service: the creator records posts and comments point at.

There are no passwords or sessions here; authentication happens outside
this package and hands us a user id.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.exceptions import ResourceNotFoundError
from blogstore.repositories import user_repository
from blogstore.schemas import UserCreate, UserRead


async def create_user(db: AsyncSession, data: UserCreate) -> UserRead:
    """
    Create a new user.

    Email uniqueness is enforced at the database level; the resulting
    IntegrityError is translated into a 409 by the web layer.
    """
    return await user_repository.create_user(db, data)


async def get_user(db: AsyncSession, user_id: int) -> UserRead:
    user = await user_repository.find_by_id(db, user_id)
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return user


async def find_user_by_email(db: AsyncSession, email: str) -> UserRead | None:
    return await user_repository.find_by_email(db, email)
