import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blogstore.config import settings
from blogstore.database import engine
from blogstore.error_handlers import register_error_handlers
from blogstore.middleware import TimingMiddleware
from blogstore.routers import comments, posts, taxonomy, users

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    configure_logging()
    logger.info("blogstore starting (env=%s)", settings.APP_ENV)
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="Blog Content Store",
    description="Posts, categories, tags and comments for a blogging platform",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routers
app.include_router(posts.router)
app.include_router(comments.router)
app.include_router(taxonomy.router)
app.include_router(users.router)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
