"""
Test infrastructure for the blog content store.

Strategy
--------
- SQLite in-memory via aiosqlite eliminates the need for a running Postgres
  instance in CI, keeping the suite fast and self-contained.
- StaticPool forces all async tasks to share the same in-memory database
  connection, which is required because SQLite in-memory databases are
  connection-scoped; a new connection would see an empty database.
- The app's get_db dependency is overridden so every test-time request uses
  the test session factory rather than the production one.
- All tables are created fresh before each test and dropped after, giving
  each test a clean isolated state without needing transactions or truncation.
- ``sql_statements`` records every statement sent to the test engine so
  tests can assert on round trips (e.g. one tag query per page).
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from blogstore.database import Base, get_db
from blogstore.main import app
from blogstore.middleware import install_query_counter
from blogstore.models import Role
from blogstore.repositories import user_repository
from blogstore.schemas import PostCreate, UserCreate, UserRead

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Register the per-request SQL query counter on the test engine.
install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override: replace production get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """
    Yield a live AsyncSession for tests that call repositories and services
    directly (seeding data, asserting stored state).
    """
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sql_statements():
    """
    Collect the SQL text of every statement executed on the test engine
    while the test runs.  Call ``.clear()`` to start counting from a point.
    """
    statements: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine_test.sync_engine, "before_cursor_execute", _record)
    yield statements
    event.remove(engine_test.sync_engine, "before_cursor_execute", _record)


@pytest_asyncio.fixture
async def author(db_session: AsyncSession) -> UserRead:
    """A persisted user to act as ``created_by``."""
    return await user_repository.create_user(
        db_session, UserCreate(name="Ada Author", email="ada@example.com", role=Role.ROLE_ADMIN)
    )


@pytest_asyncio.fixture
async def api_headers(async_client: AsyncClient) -> dict:
    """Create a user over HTTP and return the ``X-User-Id`` header for it."""
    resp = await async_client.post(
        "/api/v1/users", json={"name": "API User", "email": "api@example.com"}
    )
    assert resp.status_code == 201
    return {"X-User-Id": str(resp.json()["id"])}


def _make_post(title: str, category: str = "General", tags: list[str] | None = None, **kwargs) -> PostCreate:
    kwargs.setdefault("content_markdown", f"# {title}\n\nBody of {title}.")
    return PostCreate(title=title, category=category, tags=tags or [], **kwargs)


@pytest.fixture
def make_post():
    """Factory for PostCreate payloads with sensible defaults."""
    return _make_post
