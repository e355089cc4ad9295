from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.models import Tag, post_tags
from blogstore.repositories import _registry
from blogstore.schemas import TagRead


def _to_read(tag: Tag | None) -> TagRead | None:
    return TagRead.model_validate(tag) if tag is not None else None


async def find_all(db: AsyncSession) -> list[TagRead]:
    """Return every tag ordered by name."""
    return [TagRead.model_validate(t) for t in await _registry.find_all(db, Tag)]


async def find_by_id(db: AsyncSession, tag_id: int) -> TagRead | None:
    return _to_read(await _registry.find_by_id(db, Tag, tag_id))


async def find_by_slug(db: AsyncSession, slug: str) -> TagRead | None:
    return _to_read(await _registry.find_by_slug(db, Tag, slug))


async def create(db: AsyncSession, name: str) -> TagRead:
    return TagRead.model_validate(await _registry.create(db, Tag, name))


async def get_or_create_by_name(db: AsyncSession, name: str) -> TagRead:
    return TagRead.model_validate(await _registry.get_or_create_by_name(db, Tag, name))


async def update(db: AsyncSession, tag_id: int, name: str) -> None:
    await _registry.update_name(db, Tag, tag_id, name)


async def delete_by_id(db: AsyncSession, tag_id: int) -> None:
    await _registry.delete_by_id(db, Tag, tag_id)


async def find_tags_by_post_ids(
    db: AsyncSession, post_ids: Sequence[int] | None
) -> dict[int, set[TagRead]]:
    """
    Return ``{post_id: {TagRead, ...}}`` for every post in *post_ids* that
    has at least one tag, using a single query.

    Posts without tags get no key; callers treat a missing key as an empty
    set.  Empty or ``None`` input returns ``{}`` without touching the
    database.
    """
    if not post_ids:
        return {}

    q = (
        select(Tag.id, Tag.name, Tag.slug, post_tags.c.post_id)
        .join(post_tags, post_tags.c.tag_id == Tag.id)
        .where(post_tags.c.post_id.in_(post_ids))
        .order_by(Tag.name)
    )
    rows = (await db.execute(q)).all()

    tags_by_post: dict[int, set[TagRead]] = {}
    for row in rows:
        tags_by_post.setdefault(row.post_id, set()).add(
            TagRead(id=row.id, name=row.name, slug=row.slug)
        )
    return tags_by_post
