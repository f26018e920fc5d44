"""
Pydantic models for API request/response validation and the JSON
import/export envelope.

The JSON boundary uses camelCase field names (``feedId``, ``pubDate``,
``isOwn``...); Python code uses snake_case through aliases.
"""

from pydantic import BaseModel, ConfigDict, Field

from .database import DBFeed, DBFeedItem
from .feeds import FeedEntry, ParsedFeed


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ─────────────────────────────────────────────────────────────
# Item Schemas
# ─────────────────────────────────────────────────────────────

class FeedItemSchema(CamelModel):
    """A feed item as exported, imported and returned by the API."""
    id: str | None = None
    feed_id: str | None = Field(default=None, alias="feedId")
    feed_title: str | None = Field(default=None, alias="feedTitle")
    title: str
    content: str = ""
    link: str | None = None
    pub_date: str | None = Field(default=None, alias="pubDate")
    is_own: bool = Field(default=False, alias="isOwn")
    is_private: bool = Field(default=False, alias="isPrivate")

    @classmethod
    def from_db(cls, item: DBFeedItem) -> "FeedItemSchema":
        return cls(
            id=item.id,
            feed_id=item.feed_id,
            feed_title=item.feed_title,
            title=item.title,
            content=item.content,
            link=item.link,
            pub_date=item.pub_date,
            is_own=item.is_own,
            is_private=item.is_private,
        )


class FeedSchema(CamelModel):
    """A subscription as exported and imported."""
    id: str | None = None
    title: str = ""
    url: str
    description: str | None = None
    link: str | None = None


class ImportDocument(CamelModel):
    """JSON envelope accepted by the importers: ``{feeds?, items?, posts?}``."""
    feeds: list[FeedSchema] | None = None
    items: list[FeedItemSchema] | None = None
    posts: list[FeedItemSchema] | None = None


# ─────────────────────────────────────────────────────────────
# Feed Schemas
# ─────────────────────────────────────────────────────────────

class FeedResponse(BaseModel):
    """Feed for list view."""
    id: str
    url: str
    title: str
    description: str | None = None
    link: str | None = None
    last_fetched: str | None = None
    fetch_error: str | None = None

    @classmethod
    def from_db(cls, feed: DBFeed) -> "FeedResponse":
        return cls(
            id=feed.id,
            url=feed.url,
            title=feed.title,
            description=feed.description,
            link=feed.link,
            last_fetched=feed.last_fetched.isoformat() if feed.last_fetched else None,
            fetch_error=feed.fetch_error,
        )


class AddFeedRequest(BaseModel):
    """Request to subscribe to a feed."""
    url: str


class OwnFeedRequest(BaseModel):
    """Request to subscribe to this installation's own feed."""
    private: bool = False


class RefreshResponse(BaseModel):
    success: bool = True
    added: int = 0
    in_progress: bool = False


class ImportFeedsResponse(BaseModel):
    feeds: int
    items: int


class FeedUrlsResponse(BaseModel):
    public_url: str
    private_url: str


# ─────────────────────────────────────────────────────────────
# Fetch endpoint Schemas
# ─────────────────────────────────────────────────────────────

class FetchRequest(BaseModel):
    url: str | None = None


class FetchedItem(CamelModel):
    title: str
    content: str
    content_snippet: str = Field(default="", alias="contentSnippet")
    link: str
    pub_date: str = Field(alias="pubDate")

    @classmethod
    def from_entry(cls, entry: FeedEntry) -> "FetchedItem":
        return cls(
            title=entry.title,
            content=entry.content,
            content_snippet=entry.content_snippet,
            link=entry.link,
            pub_date=entry.pub_date,
        )


class FetchResponse(BaseModel):
    title: str
    description: str
    link: str
    items: list[FetchedItem]

    @classmethod
    def from_feed(cls, feed: ParsedFeed) -> "FetchResponse":
        return cls(
            title=feed.title,
            description=feed.description,
            link=feed.link,
            items=[FetchedItem.from_entry(e) for e in feed.items],
        )


# ─────────────────────────────────────────────────────────────
# Post Schemas
# ─────────────────────────────────────────────────────────────

class CreatePostRequest(CamelModel):
    """Request to author a post. content is HTML."""
    content: str
    is_private: bool = Field(default=False, alias="isPrivate")


class ImportPostsResponse(BaseModel):
    imported: int
