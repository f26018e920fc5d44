"""
Item repository - storage and duplicate-detection queries for feed items.
"""

from datetime import datetime

from ..dates import sort_key
from .connection import DatabaseConnection
from .converters import row_to_item
from .models import DBFeedItem


class ItemRepository:
    """Repository for subscribed articles and authored posts."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(self, item: DBFeedItem) -> str:
        """Insert an item. Returns its ID."""
        created_at = item.created_at or datetime.now()
        with self._db.conn() as conn:
            conn.execute(
                """INSERT INTO items
                   (id, feed_id, feed_title, title, content, link, pub_date,
                    is_own, is_private, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    item.id,
                    item.feed_id,
                    item.feed_title,
                    item.title,
                    item.content,
                    item.link,
                    item.pub_date,
                    item.is_own,
                    item.is_private and item.is_own,
                    created_at.isoformat(),
                )
            )
        item.created_at = created_at
        return item.id

    def add_many(self, items: list[DBFeedItem]) -> int:
        """Insert several items in one transaction. Returns the count."""
        with self._db.transaction():
            for item in items:
                self.add(item)
        return len(items)

    def get(self, item_id: str) -> DBFeedItem | None:
        with self._db.conn() as conn:
            row = conn.execute("SELECT * FROM items WHERE id = ?", (item_id,)).fetchone()
            return row_to_item(row) if row else None

    def get_all(self, feed_id: str | None = None) -> list[DBFeedItem]:
        """Items newest-first by publication date, latest insertion first on ties."""
        with self._db.conn() as conn:
            if feed_id is not None:
                rows = conn.execute(
                    "SELECT * FROM items WHERE feed_id = ? ORDER BY seq DESC",
                    (feed_id,)
                ).fetchall()
            else:
                rows = conn.execute("SELECT * FROM items ORDER BY seq DESC").fetchall()
        items = [row_to_item(row) for row in rows]
        # Stable sort keeps the insertion order for equal dates
        return sorted(items, key=lambda i: sort_key(i.pub_date), reverse=True)

    def get_own(self, include_private: bool = True) -> list[DBFeedItem]:
        items = [i for i in self.get_all() if i.is_own]
        if not include_private:
            items = [i for i in items if not i.is_private]
        return items

    def get_latest_created_own(self, include_private: bool = True) -> DBFeedItem | None:
        """Most recently created own post."""
        with self._db.conn() as conn:
            if include_private:
                row = conn.execute(
                    "SELECT * FROM items WHERE is_own = TRUE ORDER BY seq DESC LIMIT 1"
                ).fetchone()
            else:
                row = conn.execute(
                    """SELECT * FROM items WHERE is_own = TRUE AND is_private = FALSE
                       ORDER BY seq DESC LIMIT 1"""
                ).fetchone()
            return row_to_item(row) if row else None

    # ─────────────────────────────────────────────────────────────
    # Duplicate detection
    # ─────────────────────────────────────────────────────────────

    def exists_in_feed(self, feed_id: str, title: str, link: str | None) -> bool:
        """Live-refresh identity: same feed, title and link."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT 1 FROM items WHERE feed_id = ? AND title = ? AND link IS ? LIMIT 1",
                (feed_id, title, link)
            ).fetchone()
            return row is not None

    def exists_with_title_and_date(self, title: str, pub_date: str) -> bool:
        """JSON import identity: exact title and publication date."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT 1 FROM items WHERE title = ? AND pub_date = ? LIMIT 1",
                (title, pub_date)
            ).fetchone()
            return row is not None

    def get_own_by_title(self, title: str) -> list[DBFeedItem]:
        """Own posts whose title matches case-insensitively."""
        lowered = title.lower()
        return [i for i in self.get_own() if i.title.lower() == lowered]

    # ─────────────────────────────────────────────────────────────
    # Deletion
    # ─────────────────────────────────────────────────────────────

    def delete(self, item_id: str) -> bool:
        with self._db.conn() as conn:
            cursor = conn.execute("DELETE FROM items WHERE id = ?", (item_id,))
            return cursor.rowcount > 0

    def count(self) -> int:
        with self._db.conn() as conn:
            return conn.execute("SELECT COUNT(*) FROM items").fetchone()[0]
