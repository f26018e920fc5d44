"""
PublishRSS API Server

FastAPI application providing endpoints for:
- Feed subscriptions (add, remove, refresh, import/export)
- Own posts (create, delete, JSON/Markdown/ZIP import and export)
- Published RSS feeds (public and token-protected private)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .config import config, state
from .database import Database
from .exceptions import PublishRSSError
from .feeds import FeedParser
from .routes import (
    feeds_router,
    misc_router,
    permalink_router,
    posts_router,
    rss_router,
)

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application resources."""
    # Startup - skip if already initialized (e.g., by tests)
    if state.db is None:
        state.db = Database(config.DB_PATH).init(
            seed_sample_posts=config.SEED_SAMPLE_POSTS
        )
        logger.info(f"Store opened at {config.DB_PATH}")

    if state.feed_parser is None:
        state.feed_parser = FeedParser(
            timeout=config.FETCH_TIMEOUT,
            user_agent=config.USER_AGENT or None,
        )

    yield


async def publishrss_error_handler(request: Request, exc: PublishRSSError) -> JSONResponse:
    """Render domain errors as ``{"error": message}``."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


app = FastAPI(
    title="PublishRSS API",
    version=__version__,
    lifespan=lifespan
)

app.add_exception_handler(PublishRSSError, publishrss_error_handler)

# Include routers
app.include_router(misc_router)
app.include_router(feeds_router)
app.include_router(posts_router)
app.include_router(permalink_router)
app.include_router(rss_router)
