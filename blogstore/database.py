from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from blogstore.config import settings
from blogstore.middleware import install_query_counter

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)
install_query_counter(engine)

# expire_on_commit=False: read models are built from ORM rows after the
# request's commit, and lazy refreshes are not possible under asyncio.
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db():
    """
    FastAPI dependency: one session per request, committed when the
    endpoint returns and rolled back if it raises.  Repositories and
    services only flush.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def session_scope(session_factory: async_sessionmaker = async_session):
    """
    The same transaction boundary as ``get_db`` for callers outside the
    web layer (the seeding CLI).
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
