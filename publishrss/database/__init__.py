"""
Database module - SQLite-backed item store for feeds, items and settings.

Uses repository pattern for better separation of concerns.
"""

from .connection import DatabaseConnection
from .models import (
    DBFeed,
    DBFeedItem,
    OWN_FEED_ID,
    OWN_FEED_TITLE,
    OWN_FEED_URL,
    PRIVATE_FEED_TITLE,
    new_id,
)
from .feed_repository import FeedRepository
from .item_repository import ItemRepository
from .settings_repository import SettingsRepository
from .database import Database

__all__ = [
    "Database",
    "DatabaseConnection",
    "DBFeed",
    "DBFeedItem",
    "FeedRepository",
    "ItemRepository",
    "SettingsRepository",
    "OWN_FEED_ID",
    "OWN_FEED_TITLE",
    "OWN_FEED_URL",
    "PRIVATE_FEED_TITLE",
    "new_id",
]
