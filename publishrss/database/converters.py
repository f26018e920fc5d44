"""
Database row converters - convert SQLite rows to dataclasses.
"""

import sqlite3
from datetime import datetime

from .models import DBFeed, DBFeedItem


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def row_to_feed(row: sqlite3.Row) -> DBFeed:
    """Convert a database row to a DBFeed."""
    return DBFeed(
        id=row["id"],
        url=row["url"],
        title=row["title"],
        description=row["description"],
        link=row["link"],
        last_fetched=_parse_timestamp(row["last_fetched"]),
        fetch_error=row["fetch_error"],
    )


def row_to_item(row: sqlite3.Row) -> DBFeedItem:
    """Convert a database row to a DBFeedItem."""
    return DBFeedItem(
        id=row["id"],
        feed_id=row["feed_id"],
        feed_title=row["feed_title"],
        title=row["title"],
        content=row["content"] or "",
        link=row["link"],
        pub_date=row["pub_date"],
        is_own=bool(row["is_own"]),
        is_private=bool(row["is_private"]),
        created_at=_parse_timestamp(row["created_at"]),
    )
