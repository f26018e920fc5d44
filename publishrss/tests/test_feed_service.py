"""
Tests for FeedService: subscribing and refreshing.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException

from publishrss.config import state
from publishrss.database import OWN_FEED_ID
from publishrss.exceptions import DuplicateFeed, FetchFailed, InvalidURL
from publishrss.feeds import FeedEntry
from publishrss.services import FeedService

FEED_URL = "https://blog.example.com/feed.xml"


@pytest.fixture
def service(test_db, mock_parser):
    state.refresh_in_progress = False
    yield FeedService(test_db, feed_parser=mock_parser, base_url="https://rss.example.test/")
    state.refresh_in_progress = False


class TestSubscribe:
    """Tests for FeedService.subscribe."""

    @pytest.mark.asyncio
    async def test_subscribe_stores_feed_and_items(self, service, test_db):
        """Subscribing should store the feed and its current entries."""
        feed = await service.subscribe(FEED_URL)

        assert feed.title == "Example Blog"
        assert feed.url == FEED_URL
        items = test_db.get_items(feed.id)
        assert len(items) == 1
        hello = items[0]
        assert hello.title == "Hello"
        assert hello.content == "<p>Hello world</p>"
        assert hello.feed_title == "Example Blog"
        assert hello.is_own is False
        assert hello.is_private is False

    @pytest.mark.asyncio
    async def test_subscribe_duplicate_skips_fetch(self, service, mock_parser):
        """A known URL should be rejected before any request is made."""
        await service.subscribe(FEED_URL)
        mock_parser.fetch.reset_mock()

        with pytest.raises(DuplicateFeed):
            await service.subscribe(FEED_URL)
        mock_parser.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_subscribe_invalid_url(self, service, mock_parser):
        with pytest.raises(InvalidURL):
            await service.subscribe("not-a-valid-url")
        mock_parser.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_subscribe_fetch_failure_leaves_store_unchanged(self, service, mock_parser, test_db):
        mock_parser.fetch.side_effect = FetchFailed()
        with pytest.raises(FetchFailed):
            await service.subscribe(FEED_URL)
        assert test_db.get_feeds(include_own=False) == []
        assert test_db.get_items() == []

    @pytest.mark.asyncio
    async def test_subscribe_own_feed(self, service, mock_parser):
        """Subscribing to the own public feed uses the published URL."""
        feed = await service.subscribe_own_feed(private=False)
        assert feed.url == "https://rss.example.test/api/rss/your-feed"
        mock_parser.fetch.assert_awaited_once_with("https://rss.example.test/api/rss/your-feed")

    def test_private_feed_url_carries_token(self, service, test_db):
        url = service.own_feed_url(private=True)
        token = test_db.get_private_token()
        assert url == f"https://rss.example.test/api/rss/private-feed?token={token}"


class TestRefresh:
    """Tests for refresh_all and refresh_feed."""

    @pytest.mark.asyncio
    async def test_refresh_is_idempotent(self, service, test_db):
        """Refreshing unchanged feeds should add nothing."""
        await service.subscribe(FEED_URL)
        before = test_db.stats()["items"]

        assert await service.refresh_all() == 0
        assert await service.refresh_all() == 0
        assert test_db.stats()["items"] == before

    @pytest.mark.asyncio
    async def test_refresh_adds_new_entries(self, service, mock_parser, feed_factory, test_db):
        feed = await service.subscribe(FEED_URL)
        entries = list(mock_parser.fetch.return_value.items) + [
            FeedEntry(
                title="Fresh",
                content="<p>New</p>",
                link="https://blog.example.com/fresh",
                pub_date="2024-02-01T00:00:00.000Z",
            )
        ]
        mock_parser.fetch.return_value = feed_factory(FEED_URL, entries)

        assert await service.refresh_feed(feed.id) == 1
        assert [i.title for i in test_db.get_items(feed.id)] == ["Fresh", "Hello"]

    @pytest.mark.asyncio
    async def test_same_title_new_link_is_new_item(self, service, mock_parser, feed_factory, test_db):
        """Identity is (feed, title, link): a new link means a new item."""
        feed = await service.subscribe(FEED_URL)
        entries = [
            FeedEntry(
                title="Hello",
                content="<p>Hello again</p>",
                link="https://blog.example.com/hello-2",
                pub_date="2024-01-20T00:00:00.000Z",
            )
        ]
        mock_parser.fetch.return_value = feed_factory(FEED_URL, entries)

        assert await service.refresh_feed(feed.id) == 1
        assert len(test_db.get_items(feed.id)) == 2

    @pytest.mark.asyncio
    async def test_failing_feed_does_not_stop_refresh(self, service, mock_parser, feed_factory, test_db):
        """One failing feed should be skipped while others refresh."""
        good = await service.subscribe(FEED_URL)
        mock_parser.fetch.return_value = feed_factory("https://broken.example.com/feed", [])
        broken = await service.subscribe("https://broken.example.com/feed")

        fresh = FeedEntry(
            title="Fresh",
            content="<p>New</p>",
            link="https://blog.example.com/fresh",
            pub_date="2024-02-01T00:00:00.000Z",
        )

        async def fetch(url):
            if "broken" in url:
                raise FetchFailed("HTTP 500")
            return feed_factory(FEED_URL, [fresh])

        mock_parser.fetch = AsyncMock(side_effect=fetch)

        assert await service.refresh_all() == 1
        assert test_db.get_feed(broken.id).fetch_error == "HTTP 500"
        assert test_db.get_feed(good.id).fetch_error is None
        assert state.refresh_in_progress is False

    @pytest.mark.asyncio
    async def test_refresh_skips_own_feed(self, service, mock_parser):
        """The own feed is never fetched."""
        assert await service.refresh_all() == 0
        mock_parser.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_refresh_in_progress(self, service, mock_parser):
        state.refresh_in_progress = True
        assert await service.refresh_all() is None
        mock_parser.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_refresh_own_feed_rejected(self, service):
        with pytest.raises(HTTPException) as exc_info:
            await service.refresh_feed(OWN_FEED_ID)
        assert exc_info.value.status_code == 400


class TestUnsubscribe:
    """Tests for unsubscribe."""

    @pytest.mark.asyncio
    async def test_unsubscribe_removes_items(self, service, test_db):
        feed = await service.subscribe(FEED_URL)
        service.unsubscribe(feed.id)
        assert test_db.get_feed(feed.id) is None
        assert test_db.get_items() == []

    def test_unsubscribe_own_feed_rejected(self, service):
        with pytest.raises(HTTPException) as exc_info:
            service.unsubscribe(OWN_FEED_ID)
        assert exc_info.value.status_code == 400

    def test_unsubscribe_unknown_feed(self, service):
        with pytest.raises(HTTPException) as exc_info:
            service.unsubscribe("missing")
        assert exc_info.value.status_code == 404
