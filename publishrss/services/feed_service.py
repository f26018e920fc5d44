"""
Feed service: subscriptions and live refresh.

Live refresh treats a fetched entry as already stored when an item with the
same feed id, title and link exists. Refresh and subscribe only ever add.
"""

import logging
from urllib.parse import urlencode

from fastapi import HTTPException

from ..config import state
from ..database import Database, DBFeed, DBFeedItem, new_id
from ..exceptions import DuplicateFeed, require_feed
from ..feeds import FeedEntry, FeedParser
from ..url_validator import validate_feed_url

logger = logging.getLogger(__name__)


class FeedService:
    """Service for feed-related business logic."""

    def __init__(
        self,
        db: Database,
        feed_parser: FeedParser | None = None,
        base_url: str = "",
    ):
        self.db = db
        self.feed_parser = feed_parser
        self.base_url = base_url.rstrip("/")

    # ─────────────────────────────────────────────────────────────
    # Feed Management
    # ─────────────────────────────────────────────────────────────

    def list_feeds(self) -> list[DBFeed]:
        """List all feeds, the implicit own feed first."""
        return self.db.get_feeds()

    def list_items(self, feed_id: str | None = None) -> list[DBFeedItem]:
        if feed_id is not None:
            require_feed(self.db.get_feed(feed_id))
        return self.db.get_items(feed_id)

    async def subscribe(self, url: str) -> DBFeed:
        """
        Subscribe to a new feed and store its current items.

        Raises:
            InvalidURL: If the URL is not an absolute http(s) URL
            DuplicateFeed: If the URL is already subscribed
            FetchFailed: If the feed cannot be fetched or parsed
        """
        self._require_parser()
        url = validate_feed_url(url)

        # Duplicates are rejected before any request is made
        if self.db.feed_url_exists(url):
            raise DuplicateFeed()

        parsed = await self.feed_parser.fetch(url)

        with self.db.transaction():
            feed_id = self.db.add_feed(
                url,
                parsed.title or url,
                description=parsed.description,
                link=parsed.link,
            )
            feed = self.db.get_feed(feed_id)
            added = self.merge_entries(feed, parsed.items)
            self.db.update_feed_fetched(feed_id)

        logger.info(f"Subscribed to {url} ({added} items)")
        return require_feed(self.db.get_feed(feed_id))

    def own_feed_url(self, private: bool = False) -> str:
        """URL of this installation's public or private feed."""
        if private:
            query = urlencode({"token": self.db.get_private_token()})
            return f"{self.base_url}/api/rss/private-feed?{query}"
        return f"{self.base_url}/api/rss/your-feed"

    async def subscribe_own_feed(self, private: bool = False) -> DBFeed:
        return await self.subscribe(self.own_feed_url(private))

    def unsubscribe(self, feed_id: str) -> None:
        """
        Unsubscribe from a feed, removing its subscribed items.

        Raises:
            HTTPException: If feed not found or is the own feed
        """
        feed = require_feed(self.db.get_feed(feed_id))
        if feed.is_own:
            raise HTTPException(status_code=400, detail="Your own feed cannot be removed")
        with self.db.transaction():
            self.db.delete_feed(feed_id)

    # ─────────────────────────────────────────────────────────────
    # Refresh
    # ─────────────────────────────────────────────────────────────

    async def refresh_all(self) -> int | None:
        """
        Refresh every subscription sequentially.

        Returns:
            Number of new items, or None if a refresh is already running
        """
        self._require_parser()
        if state.refresh_in_progress:
            return None

        state.refresh_in_progress = True
        try:
            added = 0
            for feed in self.db.get_feeds(include_own=False):
                added += await self._refresh(feed)
            logger.info(f"Refresh complete: {added} new items")
            return added
        finally:
            state.refresh_in_progress = False

    async def refresh_feed(self, feed_id: str) -> int:
        """Refresh a single subscription. Returns number of new items."""
        self._require_parser()
        feed = require_feed(self.db.get_feed(feed_id))
        if feed.is_own:
            raise HTTPException(status_code=400, detail="Your own feed is not fetched")
        return await self._refresh(feed)

    async def _refresh(self, feed: DBFeed) -> int:
        """Fetch one feed and merge it. Failures are logged and recorded, never raised."""
        try:
            parsed = await self.feed_parser.fetch(feed.url)
        except Exception as e:
            logger.warning(f"Error refreshing feed {feed.title}: {e}")
            self.db.update_feed_fetched(feed.id, error=str(e))
            return 0

        with self.db.transaction():
            added = self.merge_entries(feed, parsed.items)
            self.db.update_feed_fetched(feed.id)

        if added:
            logger.info(f"Feed {feed.title}: {added} new items")
        return added

    def merge_entries(self, feed: DBFeed, entries: list[FeedEntry]) -> int:
        """
        Add entries not already stored for this feed.

        Identity is (feed id, title, link), compared exactly.
        """
        added = 0
        for entry in entries:
            if self.db.items.exists_in_feed(feed.id, entry.title, entry.link):
                logger.debug(f"Skipping known item {entry.title!r} in {feed.title}")
                continue
            self.db.add_item(DBFeedItem(
                id=new_id(),
                feed_id=feed.id,
                feed_title=feed.title,
                title=entry.title,
                content=entry.content,
                link=entry.link,
                pub_date=entry.pub_date,
                is_own=False,
            ))
            added += 1
        return added

    def _require_parser(self):
        if not self.feed_parser:
            raise HTTPException(status_code=500, detail="Feed parser not initialized")
