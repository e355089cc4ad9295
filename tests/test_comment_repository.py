"""Comment store: per-post and admin ordering, bulk deletes."""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.models import Comment
from blogstore.repositories import comment_repository
from blogstore.schemas import UserRead
from blogstore.services import content_service


async def _post(db: AsyncSession, author: UserRead, make_post, title: str) -> int:
    return await content_service.create_post(db, make_post(title), author.id)


async def _comment(db: AsyncSession, author: UserRead, post_id: int, content: str):
    return await comment_repository.create_comment(
        db, Comment(content=content, post_id=post_id, created_by=author.id)
    )


@pytest.mark.asyncio
async def test_create_comment_loads_author_and_timestamp(db_session: AsyncSession, author: UserRead, make_post):
    post_id = await _post(db_session, author, make_post, "Host")

    comment = await _comment(db_session, author, post_id, "First!")

    assert comment.id is not None
    assert comment.post_id == post_id
    assert comment.author.email == author.email
    assert comment.created_at is not None


@pytest.mark.asyncio
async def test_per_post_listing_is_oldest_first(db_session: AsyncSession, author: UserRead, make_post):
    post_id = await _post(db_session, author, make_post, "Thread")
    other_id = await _post(db_session, author, make_post, "Other")
    for text in ("one", "two", "three"):
        await _comment(db_session, author, post_id, text)
    await _comment(db_session, author, other_id, "elsewhere")

    comments = await comment_repository.find_by_post_id(db_session, post_id)

    assert [c.content for c in comments] == ["one", "two", "three"]


@pytest.mark.asyncio
async def test_admin_listing_is_newest_first(db_session: AsyncSession, author: UserRead, make_post):
    post_id = await _post(db_session, author, make_post, "Thread")
    for text in ("one", "two", "three"):
        await _comment(db_session, author, post_id, text)

    comments = await comment_repository.find_all(db_session)

    assert [c.content for c in comments] == ["three", "two", "one"]


@pytest.mark.asyncio
async def test_delete_by_ids_and_by_post_ids(db_session: AsyncSession, author: UserRead, make_post):
    a = await _post(db_session, author, make_post, "A")
    b = await _post(db_session, author, make_post, "B")
    c1 = await _comment(db_session, author, a, "a1")
    await _comment(db_session, author, a, "a2")
    await _comment(db_session, author, b, "b1")

    await comment_repository.delete_comments_by_ids(db_session, [c1.id])
    assert [c.content for c in await comment_repository.find_by_post_id(db_session, a)] == ["a2"]

    await comment_repository.delete_comments_by_post_ids(db_session, [a])
    assert await comment_repository.find_by_post_id(db_session, a) == []
    assert [c.content for c in await comment_repository.find_all(db_session)] == ["b1"]


@pytest.mark.asyncio
@pytest.mark.parametrize("ids", [[], None])
async def test_bulk_deletes_are_noops_on_empty_input(db_session: AsyncSession, sql_statements, ids):
    sql_statements.clear()
    await comment_repository.delete_comments_by_ids(db_session, ids)
    await comment_repository.delete_comments_by_post_ids(db_session, ids)
    assert sql_statements == []
