from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.models import Category
from blogstore.repositories import _registry
from blogstore.schemas import CategoryRead


def _to_read(category: Category | None) -> CategoryRead | None:
    return CategoryRead.model_validate(category) if category is not None else None


async def find_all(db: AsyncSession) -> list[CategoryRead]:
    """Return every category ordered by name."""
    return [CategoryRead.model_validate(c) for c in await _registry.find_all(db, Category)]


async def find_by_id(db: AsyncSession, category_id: int) -> CategoryRead | None:
    return _to_read(await _registry.find_by_id(db, Category, category_id))


async def find_by_slug(db: AsyncSession, slug: str) -> CategoryRead | None:
    return _to_read(await _registry.find_by_slug(db, Category, slug))


async def create(db: AsyncSession, name: str) -> CategoryRead:
    return CategoryRead.model_validate(await _registry.create(db, Category, name))


async def get_or_create_by_name(db: AsyncSession, name: str) -> CategoryRead:
    return CategoryRead.model_validate(await _registry.get_or_create_by_name(db, Category, name))


async def update(db: AsyncSession, category_id: int, name: str) -> None:
    await _registry.update_name(db, Category, category_id, name)


async def delete_by_id(db: AsyncSession, category_id: int) -> None:
    await _registry.delete_by_id(db, Category, category_id)
