"""
Configuration and application state management.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from fastapi import HTTPException

if TYPE_CHECKING:
    from .database import Database
    from .feeds import FeedParser

# Load environment variables
load_dotenv()


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


class Config:
    """Application configuration from environment."""
    DB_PATH: Path = Path(os.getenv("DB_PATH", "./data/publishrss.db"))
    PORT: int = int(os.getenv("PORT", "5005"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Public base URL used for channel links and item permalinks
    BASE_URL: str = os.getenv("BASE_URL", "https://your-site.com").rstrip("/")

    # Remote feed fetching
    FETCH_TIMEOUT: float = float(os.getenv("FETCH_TIMEOUT", "30"))
    USER_AGENT: str = os.getenv("USER_AGENT", "")

    # Seed the welcome posts into an empty store
    SEED_SAMPLE_POSTS: bool = _parse_bool(os.getenv("SEED_SAMPLE_POSTS"), default=True)

    # When false, the private feed only checks that a token is present
    PRIVATE_FEED_TOKEN_CHECK: bool = _parse_bool(
        os.getenv("PRIVATE_FEED_TOKEN_CHECK"), default=True
    )


config = Config()


class AppState:
    """Shared application state."""
    db: "Database | None" = None
    feed_parser: "FeedParser | None" = None
    refresh_in_progress: bool = False


state = AppState()


def get_db() -> "Database":
    """Dependency to get database instance."""
    if not state.db:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return state.db


def get_feed_parser() -> "FeedParser":
    """Dependency to get the feed parser."""
    if not state.feed_parser:
        raise HTTPException(status_code=500, detail="Feed parser not initialized")
    return state.feed_parser
