"""
Shared registry logic for uniquely-slugged label entities (Category, Tag).

The slug is always ``to_slug(name)``; at most one row exists per slug.
``get_or_create_by_name`` is a read-then-write sequence: when two callers
race on the same new slug, the loser's insert hits the unique constraint,
its SAVEPOINT is rolled back and the lookup is retried once.
"""
import logging
from typing import TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.exceptions import ConflictOnCreateError, InvalidInputError
from blogstore.models import Category, Tag
from blogstore.slugs import to_slug

logger = logging.getLogger(__name__)

Label = TypeVar("Label", Category, Tag)


def _slug_for(model: type[Label], name: str) -> str:
    slug = to_slug(name)
    if not slug:
        raise InvalidInputError(
            f"{model.__name__} name {name!r} does not produce a usable slug", field="name"
        )
    return slug


async def find_all(db: AsyncSession, model: type[Label]) -> list[Label]:
    result = await db.execute(select(model).order_by(model.name, model.id))
    return list(result.scalars().all())


async def find_by_id(db: AsyncSession, model: type[Label], entity_id: int) -> Label | None:
    result = await db.execute(select(model).where(model.id == entity_id))
    return result.scalar_one_or_none()


async def find_by_slug(db: AsyncSession, model: type[Label], slug: str) -> Label | None:
    result = await db.execute(select(model).where(model.slug == slug))
    return result.scalar_one_or_none()


async def create(db: AsyncSession, model: type[Label], name: str) -> Label:
    """Insert a new row for *name*.  A duplicate slug raises IntegrityError."""
    entity = model(name=name, slug=_slug_for(model, name))
    db.add(entity)
    await db.flush()
    return entity


async def get_or_create_by_name(db: AsyncSession, model: type[Label], name: str) -> Label:
    """
    Return the entity whose slug matches ``to_slug(name)``, creating it if
    absent.  An existing entity is returned unchanged; the newly supplied
    display name is ignored (first writer wins).
    """
    slug = _slug_for(model, name)
    existing = await find_by_slug(db, model, slug)
    if existing is not None:
        return existing

    entity = model(name=name, slug=slug)
    try:
        async with db.begin_nested():
            db.add(entity)
            await db.flush()
    except IntegrityError as exc:
        logger.warning(
            "Concurrent insert on %s slug=%r; retrying lookup", model.__tablename__, slug
        )
        existing = await find_by_slug(db, model, slug)
        if existing is None:
            raise ConflictOnCreateError(model.__tablename__, slug) from exc
        return existing

    logger.info("Created %s id=%s slug=%r", model.__tablename__, entity.id, slug)
    return entity


async def update_name(db: AsyncSession, model: type[Label], entity_id: int, name: str) -> None:
    """Rename an entity; the slug is recomputed so it stays a function of the name."""
    await db.execute(
        update(model)
        .where(model.id == entity_id)
        .values(name=name, slug=_slug_for(model, name))
    )


async def delete_by_id(db: AsyncSession, model: type[Label], entity_id: int) -> None:
    await db.execute(delete(model).where(model.id == entity_id))
