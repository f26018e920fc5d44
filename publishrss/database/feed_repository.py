"""
Feed repository - CRUD operations for subscriptions.
"""

import sqlite3
from datetime import datetime

from ..exceptions import DuplicateFeed
from .connection import DatabaseConnection
from .converters import row_to_feed
from .models import DBFeed, OWN_FEED_URL, new_id


class FeedRepository:
    """Repository for feed operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(
        self,
        url: str,
        title: str,
        description: str | None = None,
        link: str | None = None,
        feed_id: str | None = None,
    ) -> str:
        """Add a new feed. Returns feed ID. Raises DuplicateFeed if the URL exists."""
        feed_id = feed_id or new_id()
        with self._db.conn() as conn:
            try:
                conn.execute(
                    """INSERT INTO feeds (id, url, title, description, link)
                       VALUES (?, ?, ?, ?, ?)""",
                    (feed_id, url, title, description, link)
                )
            except sqlite3.IntegrityError:
                raise DuplicateFeed()
        return feed_id

    def get(self, feed_id: str) -> DBFeed | None:
        """Get single feed by ID."""
        with self._db.conn() as conn:
            row = conn.execute("SELECT * FROM feeds WHERE id = ?", (feed_id,)).fetchone()
            return row_to_feed(row) if row else None

    def get_all(self, include_own: bool = True) -> list[DBFeed]:
        """Get all feeds in subscription order."""
        with self._db.conn() as conn:
            if include_own:
                rows = conn.execute(
                    "SELECT * FROM feeds ORDER BY created_at, rowid"
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM feeds WHERE url != ? ORDER BY created_at, rowid",
                    (OWN_FEED_URL,)
                ).fetchall()
            return [row_to_feed(row) for row in rows]

    def url_exists(self, url: str) -> bool:
        with self._db.conn() as conn:
            row = conn.execute("SELECT 1 FROM feeds WHERE url = ?", (url,)).fetchone()
            return row is not None

    def update_fetched(self, feed_id: str, error: str | None = None):
        """Update feed's last fetched timestamp and error state."""
        with self._db.conn() as conn:
            conn.execute(
                "UPDATE feeds SET last_fetched = ?, fetch_error = ? WHERE id = ?",
                (datetime.now().isoformat(), error, feed_id)
            )

    def delete(self, feed_id: str):
        """Delete a feed and the subscribed items it owns (own posts are kept)."""
        with self._db.conn() as conn:
            conn.execute(
                "DELETE FROM items WHERE feed_id = ? AND is_own = FALSE",
                (feed_id,)
            )
            conn.execute("DELETE FROM feeds WHERE id = ?", (feed_id,))

    def count(self) -> int:
        with self._db.conn() as conn:
            return conn.execute("SELECT COUNT(*) FROM feeds").fetchone()[0]
