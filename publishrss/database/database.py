"""
Database facade - provides unified access to all repositories.

Lifecycle: ``Database(path)`` opens the schema, ``init()`` loads or seeds the
store, and ``transaction()`` groups writes so an operation is committed as one
unit or not at all.
"""

import logging
from contextlib import contextmanager
from datetime import timedelta
from pathlib import Path
from typing import Iterator

from ..dates import to_iso, utc_now
from .connection import DatabaseConnection
from .feed_repository import FeedRepository
from .item_repository import ItemRepository
from .settings_repository import SettingsRepository
from .models import (
    DBFeed,
    DBFeedItem,
    OWN_FEED_ID,
    OWN_FEED_TITLE,
    OWN_FEED_URL,
    new_id,
)

logger = logging.getLogger(__name__)

SAMPLE_POSTS = [
    (
        "Welcome to your RSS Reader",
        "<p>This is a sample post to get you started. Subscribe to RSS feeds "
        "or create your own posts!</p>",
        timedelta(0),
    ),
    (
        "How to Use This RSS Reader",
        "<p>Use the 'Subscribe' tab to add RSS feeds, and the 'Create Post' tab "
        "to publish your own content.</p>",
        timedelta(days=1),
    ),
]


class Database:
    """
    Unified database access facade.

    Services receive an instance by injection; nothing here is module-global.
    """

    def __init__(self, db_path: Path):
        self._connection = DatabaseConnection(db_path)

        self.feeds = FeedRepository(self._connection)
        self.items = ItemRepository(self._connection)
        self.settings = SettingsRepository(self._connection)

    def init(self, seed_sample_posts: bool = True) -> "Database":
        """Load-or-seed: ensure the own feed and private token exist."""
        with self.transaction():
            if self.feeds.get(OWN_FEED_ID) is None:
                self.feeds.add(OWN_FEED_URL, OWN_FEED_TITLE, feed_id=OWN_FEED_ID)
                if seed_sample_posts and self.items.count() == 0:
                    self._seed_sample_posts()
                logger.info("Initialized new store")
            self.settings.ensure_private_token()
        return self

    def _seed_sample_posts(self):
        now = utc_now()
        # Oldest first so the welcome post is the most recently created
        for title, content, age in reversed(SAMPLE_POSTS):
            self.items.add(DBFeedItem(
                id=new_id(),
                feed_id=OWN_FEED_ID,
                feed_title=OWN_FEED_TITLE,
                title=title,
                content=content,
                pub_date=to_iso(now - age),
                is_own=True,
                is_private=False,
            ))

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._connection.transaction():
            yield

    # ─────────────────────────────────────────────────────────────
    # Feed operations (delegated to FeedRepository)
    # ─────────────────────────────────────────────────────────────

    def add_feed(
        self,
        url: str,
        title: str,
        description: str | None = None,
        link: str | None = None,
    ) -> str:
        return self.feeds.add(url, title, description, link)

    def get_feed(self, feed_id: str) -> DBFeed | None:
        return self.feeds.get(feed_id)

    def get_feeds(self, include_own: bool = True) -> list[DBFeed]:
        return self.feeds.get_all(include_own)

    def feed_url_exists(self, url: str) -> bool:
        return self.feeds.url_exists(url)

    def update_feed_fetched(self, feed_id: str, error: str | None = None):
        return self.feeds.update_fetched(feed_id, error)

    def delete_feed(self, feed_id: str):
        return self.feeds.delete(feed_id)

    # ─────────────────────────────────────────────────────────────
    # Item operations (delegated to ItemRepository)
    # ─────────────────────────────────────────────────────────────

    def add_item(self, item: DBFeedItem) -> str:
        return self.items.add(item)

    def add_items(self, items: list[DBFeedItem]) -> int:
        return self.items.add_many(items)

    def get_item(self, item_id: str) -> DBFeedItem | None:
        return self.items.get(item_id)

    def get_items(self, feed_id: str | None = None) -> list[DBFeedItem]:
        return self.items.get_all(feed_id)

    def get_own_items(self, include_private: bool = True) -> list[DBFeedItem]:
        return self.items.get_own(include_private)

    def delete_item(self, item_id: str) -> bool:
        return self.items.delete(item_id)

    # ─────────────────────────────────────────────────────────────
    # Private token (delegated to SettingsRepository)
    # ─────────────────────────────────────────────────────────────

    def get_private_token(self) -> str:
        return self.settings.ensure_private_token()

    def regenerate_private_token(self) -> str:
        return self.settings.regenerate_private_token()

    def stats(self) -> dict:
        return {"feeds": self.feeds.count(), "items": self.items.count()}
