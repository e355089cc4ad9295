"""
Initial content load.

Reads a JSON manifest of the form::

    {"posts": [{"title": ..., "slug": ..., "short_description": ...,
                "markdown_file": "intro.md", "category": ...,
                "tags": [...]}]}

Markdown files are resolved relative to the manifest's directory.  Every
post is created PUBLISHED through ``content_service.create_post`` under the
configured seed author, so seeding follows exactly the same get-or-create
and association path as the API.
"""
import json
import logging
from pathlib import Path

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.config import settings
from blogstore.models import PostStatus, Role
from blogstore.schemas import PostCreate, UserCreate, UserRead
from blogstore.services import content_service, user_service

logger = logging.getLogger(__name__)


class PostEntry(BaseModel):
    title: str
    slug: str | None = None
    short_description: str | None = None
    markdown_file: str
    category: str
    tags: list[str] = []


class PostManifest(BaseModel):
    posts: list[PostEntry] = []


def load_manifest(path: Path) -> PostManifest:
    with path.open(encoding="utf-8") as fh:
        return PostManifest.model_validate(json.load(fh))


async def ensure_seed_author(db: AsyncSession) -> UserRead:
    """Return the seed author, creating it on first use."""
    author = await user_service.find_user_by_email(db, settings.SEED_AUTHOR_EMAIL)
    if author is None:
        author = await user_service.create_user(
            db,
            UserCreate(
                name=settings.SEED_AUTHOR_NAME,
                email=settings.SEED_AUTHOR_EMAIL,
                role=Role.ROLE_ADMIN,
            ),
        )
        logger.info("Created seed author %s", author.email)
    return author


async def seed_posts(db: AsyncSession, manifest_path: Path) -> int:
    """
    Load every post in *manifest_path* unless posts already exist.

    Returns the number of posts created (0 when skipped).
    """
    if await content_service.get_posts_count(db) > 0:
        logger.info("Posts already loaded, skipping %s", manifest_path)
        return 0

    manifest = load_manifest(manifest_path)
    author = await ensure_seed_author(db)
    base_dir = manifest_path.parent

    for entry in manifest.posts:
        markdown_text = (base_dir / entry.markdown_file).read_text(encoding="utf-8")
        post_id = await content_service.create_post(
            db,
            PostCreate(
                title=entry.title,
                slug=entry.slug,
                short_description=entry.short_description,
                content_markdown=markdown_text,
                status=PostStatus.PUBLISHED,
                category=entry.category,
                tags=entry.tags,
            ),
            created_by=author.id,
        )
        logger.debug("Seeded post id=%s from %s", post_id, entry.markdown_file)

    logger.info("Seeded %d post(s) from %s", len(manifest.posts), manifest_path)
    return len(manifest.posts)
