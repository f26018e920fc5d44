"""
Database models - dataclasses for database entities.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime

OWN_FEED_ID = "own"
OWN_FEED_URL = "local"
OWN_FEED_TITLE = "Your Feed"
PRIVATE_FEED_TITLE = "Your Private Feed"


def new_id() -> str:
    """Opaque 128-bit random identifier."""
    return uuid.uuid4().hex


@dataclass
class DBFeed:
    id: str
    url: str
    title: str
    description: str | None = None
    link: str | None = None
    last_fetched: datetime | None = None
    fetch_error: str | None = None

    @property
    def is_own(self) -> bool:
        return self.url == OWN_FEED_URL


@dataclass
class DBFeedItem:
    id: str
    feed_id: str
    feed_title: str
    title: str
    content: str
    pub_date: str  # ISO-8601
    is_own: bool = False
    is_private: bool = False
    link: str | None = None
    created_at: datetime | None = None

    def __post_init__(self):
        # Only authored posts can be private
        if not self.is_own:
            self.is_private = False
