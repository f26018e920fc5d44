"""
Pytest fixtures for publishrss tests.
"""

import os
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from publishrss.config import config, state
from publishrss.database import Database, DBFeedItem, OWN_FEED_ID, OWN_FEED_TITLE, new_id
from publishrss.feeds import FeedEntry, FeedParser, ParsedFeed
from publishrss.server import app

BASE_URL = "https://rss.example.test"

SAMPLE_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Example Blog</title>
    <link>https://blog.example.com</link>
    <description>Posts from an example blog</description>
    <item>
      <title>Hello</title>
      <link>https://blog.example.com/hello</link>
      <description>A short greeting</description>
      <content:encoded><![CDATA[<p>Hello <b>world</b></p>]]></content:encoded>
      <pubDate>Mon, 15 Jan 2024 10:30:00 GMT</pubDate>
    </item>
    <item>
      <title>Second</title>
      <link>https://blog.example.com/second</link>
      <description>Only a description</description>
      <pubDate>Tue, 16 Jan 2024 08:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""


def make_parsed_feed(url: str = "https://blog.example.com/feed.xml", entries=None) -> ParsedFeed:
    """A ParsedFeed as FeedParser.fetch would return it."""
    if entries is None:
        entries = [
            FeedEntry(
                title="Hello",
                content="<p>Hello world</p>",
                link="https://blog.example.com/hello",
                pub_date="2024-01-15T10:30:00.000Z",
                content_snippet="Hello world",
            ),
        ]
    return ParsedFeed(
        url=url,
        title="Example Blog",
        description="Posts from an example blog",
        link="https://blog.example.com",
        items=entries,
    )


def make_post(title: str, pub_date: str, is_private: bool = False, content: str = "<p>Body</p>") -> DBFeedItem:
    return DBFeedItem(
        id=new_id(),
        feed_id=OWN_FEED_ID,
        feed_title=OWN_FEED_TITLE,
        title=title,
        content=content,
        pub_date=pub_date,
        is_own=True,
        is_private=is_private,
    )


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        yield Path(f.name)
    # Cleanup
    if os.path.exists(f.name):
        os.unlink(f.name)


@pytest.fixture
def test_db(temp_db_path):
    """Initialized store without the welcome posts."""
    db = Database(temp_db_path).init(seed_sample_posts=False)
    yield db


@pytest.fixture
def seeded_db(temp_db_path):
    """Initialized store with the welcome posts."""
    db = Database(temp_db_path).init(seed_sample_posts=True)
    yield db


@pytest.fixture
def mock_parser():
    """FeedParser stand-in whose fetch returns make_parsed_feed()."""
    parser = MagicMock(spec=FeedParser)
    parser.fetch = AsyncMock(return_value=make_parsed_feed())
    return parser


@pytest.fixture
def client(test_db, mock_parser, monkeypatch):
    """Create a test client with an isolated store and a mocked fetcher."""
    # Store original state
    original_db = state.db
    original_feed_parser = state.feed_parser

    monkeypatch.setattr(config, "BASE_URL", BASE_URL)
    monkeypatch.setattr(config, "PRIVATE_FEED_TOKEN_CHECK", True)

    state.db = test_db
    state.feed_parser = mock_parser
    state.refresh_in_progress = False

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    # Restore original state
    state.db = original_db
    state.feed_parser = original_feed_parser
    state.refresh_in_progress = False


@pytest.fixture
def client_with_data(client, test_db):
    """Test client with two public posts and one private post."""
    public_old = make_post("Older public", "2024-01-01T09:00:00.000Z")
    public_new = make_post("Newer public", "2024-02-01T09:00:00.000Z")
    private = make_post("Secret", "2024-01-15T09:00:00.000Z", is_private=True)
    test_db.add_items([public_old, public_new, private])

    yield client, {
        "public_ids": [public_new.id, public_old.id],
        "private_id": private.id,
        "db": test_db,
    }


@pytest.fixture
def post_factory():
    """Build own posts: post_factory(title, pub_date, is_private=False, content=...)."""
    return make_post


@pytest.fixture
def feed_factory():
    """Build fetched feeds: feed_factory(url, entries)."""
    return make_parsed_feed


@pytest.fixture
def sample_rss():
    return SAMPLE_RSS
