"""
Post store: the three listing modes, count-then-fetch, and CRUD.
"""
import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import InvalidRequestError
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.models import Post, PostStatus, post_tags
from blogstore.repositories import category_repository, post_repository, tag_repository
from blogstore.schemas import UserRead


async def _insert_post(
    db: AsyncSession,
    author: UserRead,
    title: str,
    category: str = "General",
    tags: tuple[str, ...] = (),
    status: PostStatus = PostStatus.PUBLISHED,
) -> int:
    cat = await category_repository.get_or_create_by_name(db, category)
    post_id = await post_repository.create_post(
        db,
        Post(
            title=title,
            slug=title.lower().replace(" ", "-"),
            content_markdown=title,
            content_html=f"<p>{title}</p>",
            status=status,
            category_id=cat.id,
            created_by=author.id,
        ),
    )
    tag_rows = [await tag_repository.get_or_create_by_name(db, t) for t in tags]
    await post_repository.add_post_tags(db, post_id, tag_rows)
    return post_id


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_empty_store_returns_canonical_empty_page_with_one_statement(
    db_session: AsyncSession, sql_statements
):
    sql_statements.clear()
    page = await post_repository.find_all_posts(db_session, 1, 10)

    assert page.data == []
    assert page.total_pages == 0
    assert page.is_first is False and page.is_last is False
    assert len(sql_statements) == 1
    assert "count" in sql_statements[0].lower()


@pytest.mark.asyncio
async def test_find_all_posts_pages_newest_first(db_session: AsyncSession, author: UserRead):
    ids = [await _insert_post(db_session, author, f"Post {i}") for i in range(5)]

    first = await post_repository.find_all_posts(db_session, 1, 2)
    last = await post_repository.find_all_posts(db_session, 3, 2)

    assert [p.id for p in first.data] == [ids[4], ids[3]]
    assert first.total_elements == 5
    assert first.total_pages == 3
    assert first.has_next is True
    assert [p.id for p in last.data] == [ids[0]]
    assert last.is_last is True


@pytest.mark.asyncio
async def test_listing_resolves_category_and_author(db_session: AsyncSession, author: UserRead):
    await _insert_post(db_session, author, "Joined Post", category="Spring Boot")

    page = await post_repository.find_all_posts(db_session, 1, 10)
    post = page.data[0]

    assert post.category.slug == "spring-boot"
    assert post.author.email == author.email
    assert post.tags == set()


@pytest.mark.asyncio
async def test_status_filter(db_session: AsyncSession, author: UserRead):
    await _insert_post(db_session, author, "Live", status=PostStatus.PUBLISHED)
    await _insert_post(db_session, author, "Hidden", status=PostStatus.DRAFT)

    drafts = await post_repository.find_all_posts(db_session, 1, 10, PostStatus.DRAFT)
    assert [p.title for p in drafts.data] == ["Hidden"]
    assert await post_repository.find_posts_count(db_session, PostStatus.PUBLISHED) == 1
    assert await post_repository.find_posts_count(db_session) == 2


@pytest.mark.asyncio
async def test_find_by_category_slug(db_session: AsyncSession, author: UserRead):
    await _insert_post(db_session, author, "Java One", category="Java")
    await _insert_post(db_session, author, "Go One", category="Go")

    page = await post_repository.find_posts_by_category_slug(db_session, "java", 1, 10)
    assert [p.title for p in page.data] == ["Java One"]

    missing = await post_repository.find_posts_by_category_slug(db_session, "nope", 1, 10)
    assert missing.total_elements == 0 and missing.data == []


@pytest.mark.asyncio
async def test_find_by_tag_slug_returns_each_post_once(db_session: AsyncSession, author: UserRead):
    await _insert_post(db_session, author, "Tagged", tags=("python", "web"))
    await _insert_post(db_session, author, "Also Tagged", tags=("python",))
    await _insert_post(db_session, author, "Untagged")

    page = await post_repository.find_posts_by_tag_slug(db_session, "python", 1, 10)

    assert page.total_elements == 2
    assert sorted(p.title for p in page.data) == ["Also Tagged", "Tagged"]


@pytest.mark.asyncio
async def test_nonexistent_tag_gives_empty_page(db_session: AsyncSession, author: UserRead):
    await _insert_post(db_session, author, "Something", tags=("python",))
    page = await post_repository.find_posts_by_tag_slug(db_session, "does-not-exist", 1, 10)
    assert page.data == []
    assert page.total_elements == 0


# ---------------------------------------------------------------------------
# Single-row lookups and writes
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_find_by_id_and_slug(db_session: AsyncSession, author: UserRead):
    post_id = await _insert_post(db_session, author, "Lookup Me")

    by_id = await post_repository.find_by_id(db_session, post_id)
    by_slug = await post_repository.find_by_slug(db_session, "lookup-me")

    assert by_id.id == by_slug.id == post_id
    assert await post_repository.find_by_id(db_session, 9999) is None
    assert await post_repository.find_by_slug(db_session, "missing") is None


@pytest.mark.asyncio
async def test_update_post_replaces_mutable_fields(db_session: AsyncSession, author: UserRead):
    post_id = await _insert_post(db_session, author, "Before", category="Old")
    new_cat = await category_repository.get_or_create_by_name(db_session, "New")

    await post_repository.update_post(
        db_session,
        post_id,
        title="After",
        slug="before",
        short_description="changed",
        content_markdown="after",
        content_html="<p>after</p>",
        status=PostStatus.DRAFT,
        category_id=new_cat.id,
    )
    post = await post_repository.find_by_id(db_session, post_id)

    assert post.title == "After"
    assert post.status == PostStatus.DRAFT
    assert post.category.slug == "new"
    assert post.created_by == author.id


@pytest.mark.asyncio
async def test_delete_posts_removes_rows_and_associations(db_session: AsyncSession, author: UserRead):
    keep = await _insert_post(db_session, author, "Keep", tags=("a",))
    drop = await _insert_post(db_session, author, "Drop", tags=("a", "b"))

    await post_repository.delete_posts_by_ids(db_session, [drop])

    assert await post_repository.find_by_id(db_session, drop) is None
    assert await post_repository.find_by_id(db_session, keep) is not None
    remaining = (
        await db_session.execute(select(func.count()).select_from(post_tags))
    ).scalar_one()
    assert remaining == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("ids", [[], None])
async def test_delete_posts_with_no_ids_issues_no_statement(db_session: AsyncSession, sql_statements, ids):
    sql_statements.clear()
    await post_repository.delete_posts_by_ids(db_session, ids)
    assert sql_statements == []


@pytest.mark.asyncio
@pytest.mark.parametrize("page", [4, 10**19])
async def test_page_past_the_end_skips_data_query(
    db_session: AsyncSession, author: UserRead, sql_statements, page
):
    for i in range(3):
        await _insert_post(db_session, author, f"Post {i}")
    sql_statements.clear()

    result = await post_repository.find_all_posts(db_session, page, 1)

    assert result.data == []
    assert result.total_elements == 3
    assert result.total_pages == 3
    assert result.page_number == page
    assert result.is_last is True and result.has_previous is True
    assert len(sql_statements) == 1


@pytest.mark.asyncio
async def test_relationships_are_never_loaded_implicitly(db_session: AsyncSession, author: UserRead):
    post_id = await _insert_post(db_session, author, "Explicit Only")
    post = (await db_session.execute(select(Post).where(Post.id == post_id))).scalar_one()

    with pytest.raises(InvalidRequestError):
        post.category
