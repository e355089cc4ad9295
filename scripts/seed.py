"""Load the initial posts from a JSON manifest into the blog database."""
import argparse
import asyncio
import logging
import time
from pathlib import Path

from blogstore.database import Base, engine, session_scope
from blogstore.main import configure_logging
from blogstore.services import seed_service

DEFAULT_MANIFEST = Path(__file__).parent / "data" / "posts.json"

logger = logging.getLogger("blogstore.seed")


async def seed(manifest: Path, reset: bool = False) -> int:
    start = time.perf_counter()

    if reset:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Schema dropped and recreated")

    async with session_scope() as session:
        created = await seed_service.seed_posts(session, manifest)

    await engine.dispose()
    logger.info("Seeding finished in %.1fs (%d post(s))", time.perf_counter() - start, created)
    return created


def main():
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument(
        "--data", type=Path, default=DEFAULT_MANIFEST, help="Path to the posts.json manifest"
    )
    parser.add_argument(
        "--reset", action="store_true", help="Drop and recreate all tables before seeding"
    )
    args = parser.parse_args()
    configure_logging()
    asyncio.run(seed(args.data, reset=args.reset))


if __name__ == "__main__":
    main()
