"""
Feed Parser - Fetch and normalize remote RSS/Atom feeds.

Handles:
- RSS 2.0 and Atom 1.0 formats
- Field fallbacks (title, content chain, publication date)
- Bounded fetch time so a hung server cannot stall a refresh
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

import aiohttp
import feedparser
from bs4 import BeautifulSoup

from .dates import now_iso, to_iso
from .exceptions import FetchFailed
from .url_validator import validate_feed_url

logger = logging.getLogger(__name__)


@dataclass
class FeedEntry:
    """A single normalized entry from a remote feed."""
    title: str
    content: str
    link: str
    pub_date: str  # ISO-8601
    content_snippet: str = ""


@dataclass
class ParsedFeed:
    """Represents a parsed feed."""
    url: str
    title: str
    description: str
    link: str
    items: list[FeedEntry] = field(default_factory=list)


def strip_html(html: str) -> str:
    """Plain text of an HTML fragment."""
    if not html:
        return ""
    return BeautifulSoup(html, "html.parser").get_text(separator=" ", strip=True)


class FeedParser:
    """Fetches RSS/Atom feeds and normalizes their entries."""

    def __init__(self, timeout: float = 30, user_agent: str | None = None):
        self.timeout = timeout
        self.user_agent = user_agent or "PublishRSS/1.0 (+https://github.com/publishrss)"

    async def fetch(self, url: str) -> ParsedFeed:
        """
        Fetch and parse a feed URL.

        Raises:
            InvalidURL: If the URL is not an absolute http(s) URL
            FetchFailed: On network error, timeout, non-2xx status or
                unparsable document
        """
        url = validate_feed_url(url)

        try:
            content = await asyncio.wait_for(self._download(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise FetchFailed(f"Timed out fetching {url}")
        except aiohttp.ClientResponseError as e:
            raise FetchFailed(f"Failed to fetch {url}: HTTP {e.status}")
        except aiohttp.ClientError as e:
            raise FetchFailed(f"Failed to fetch {url}: {e}")

        try:
            return self._parse(url, content)
        except (UnicodeError, ValueError) as e:
            raise FetchFailed(f"Failed to parse feed: {e}")

    async def _download(self, url: str) -> bytes:
        headers = {"User-Agent": self.user_agent}

        async with aiohttp.ClientSession() as session:
            async with session.get(
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as resp:
                resp.raise_for_status()
                return await resp.read()

    def _parse(self, url: str, content: str | bytes) -> ParsedFeed:
        """Parse feed content using feedparser."""
        parsed = feedparser.parse(content)

        if parsed.bozo and not parsed.entries:
            raise FetchFailed(f"Failed to parse feed: {parsed.get('bozo_exception')}")
        if not parsed.entries and not parsed.feed.get("title"):
            raise FetchFailed("Failed to parse feed: document is not RSS or Atom")

        items = [self._normalize_entry(entry) for entry in parsed.entries]

        return ParsedFeed(
            url=url,
            title=parsed.feed.get("title") or "Unnamed Feed",
            description=parsed.feed.get("description") or parsed.feed.get("subtitle") or "",
            link=parsed.feed.get("link") or url,
            items=items,
        )

    def _normalize_entry(self, entry) -> FeedEntry:
        # content:encoded (RSS) and <content> (Atom) both land in entry.content
        encoded = ""
        if entry.get("content"):
            encoded = entry.content[0].get("value", "") or ""
        description = entry.get("summary") or entry.get("description") or ""
        snippet = strip_html(description) or strip_html(encoded)

        content = encoded or snippet or description or ""

        return FeedEntry(
            title=entry.get("title") or "Untitled",
            content=content,
            link=entry.get("link") or "",
            pub_date=self._entry_date(entry),
            content_snippet=snippet,
        )

    @staticmethod
    def _entry_date(entry) -> str:
        for key in ("published_parsed", "updated_parsed"):
            value = entry.get(key)
            if value:
                try:
                    return to_iso(datetime(*value[:6], tzinfo=timezone.utc))
                except (TypeError, ValueError):
                    continue
        return now_iso()


def parse_feed_sync(content: str | bytes, url: str = "") -> ParsedFeed:
    """
    Synchronous feed parsing (for use when content is already fetched).

    Useful for testing or when you already have the feed content.
    """
    parser = FeedParser()
    return parser._parse(url, content)
