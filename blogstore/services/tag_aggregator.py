"""
Tag aggregation for cohorts of posts.

Posts come back from the post store without tags.  Rather than one tag
query per post, the whole cohort's tags are fetched in a single batched
lookup and merged onto the posts' transient ``tags`` field.
"""
import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.repositories import tag_repository
from blogstore.schemas import PostRead, TagRead

logger = logging.getLogger(__name__)


async def aggregate_tags(
    db: AsyncSession, post_ids: Sequence[int] | None
) -> dict[int, set[TagRead]]:
    """
    Map each post id to its tag set using exactly one query.

    Duplicate ids are collapsed (first occurrence kept).  Empty or ``None``
    input yields ``{}`` without querying.  Posts without tags have no key.
    """
    if not post_ids:
        return {}
    unique_ids = list(dict.fromkeys(post_ids))
    tags_by_post = await tag_repository.find_tags_by_post_ids(db, unique_ids)
    logger.debug(
        "Aggregated tags for %d post(s), %d with tags", len(unique_ids), len(tags_by_post)
    )
    return tags_by_post


async def attach_tags(db: AsyncSession, posts: Sequence[PostRead]) -> None:
    """Populate ``post.tags`` on every post in *posts* from one batched lookup."""
    tags_by_post = await aggregate_tags(db, [post.id for post in posts])
    for post in posts:
        post.tags = tags_by_post.get(post.id, set())
