"""Alembic migration environment for the blogstore schema.

Runs against the same async driver the application uses.  The database
URL always comes from ``blogstore.config.settings`` so ``.env`` is the
single place credentials live.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from blogstore.config import settings
from blogstore.database import Base

# Registers every table (including the post_tags association) on Base.metadata.
import blogstore.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

target_metadata = Base.metadata

# Shared by offline and online mode.  The enum columns are non-native
# VARCHARs, so type comparison is what catches a widened status/role.
_CONFIGURE_OPTS = {
    "target_metadata": target_metadata,
    "compare_type": True,
}


# ---------------------------------------------------------------------------
# Offline: emit SQL to stdout
# ---------------------------------------------------------------------------
def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_CONFIGURE_OPTS,
    )
    with context.begin_transaction():
        context.run_migrations()


# ---------------------------------------------------------------------------
# Online: apply against a live database
# ---------------------------------------------------------------------------
def _apply(connection: Connection) -> None:
    context.configure(connection=connection, **_CONFIGURE_OPTS)
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    # NullPool: a migration run is one short-lived connection.
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(_apply)
    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
