"""
Export service: JSON, Markdown and ZIP projections of the store.
"""

import io
import json
import logging
import zipfile

from ..database import Database, DBFeedItem
from ..dates import date_stamp
from ..exceptions import NoPostsToExport
from ..markdown_posts import markdown_filename, render_markdown_post
from ..schemas import FeedItemSchema, FeedSchema

logger = logging.getLogger(__name__)


def _dump(document: dict) -> bytes:
    return json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")


def _item_dict(item: DBFeedItem) -> dict:
    return FeedItemSchema.from_db(item).model_dump(by_alias=True)


class ExportService:
    """Service for exporting posts and subscriptions."""

    def __init__(self, db: Database):
        self.db = db

    def export_posts_json(self) -> tuple[str, bytes]:
        """Own posts as ``{"posts": [...]}``. Returns (filename, content)."""
        posts = self.db.get_own_items()
        filename = f"rss-posts-export-{date_stamp()}.json"
        return filename, _dump({"posts": [_item_dict(p) for p in posts]})

    def export_feeds_json(self) -> tuple[str, bytes]:
        """Subscriptions and their items as ``{"feeds": [...], "items": [...]}``."""
        feeds = self.db.get_feeds(include_own=False)
        items = [i for i in self.db.get_items() if not i.is_own]
        document = {
            "feeds": [
                FeedSchema(
                    id=f.id,
                    title=f.title,
                    url=f.url,
                    description=f.description,
                    link=f.link,
                ).model_dump(by_alias=True)
                for f in feeds
            ],
            "items": [_item_dict(i) for i in items],
        }
        filename = f"rss-feeds-export-{date_stamp()}.json"
        return filename, _dump(document)

    def export_markdown(
        self,
        include_private: bool = True,
        include_frontmatter: bool = True,
    ) -> tuple[str, str]:
        """
        Most recently created matching post as Markdown.

        Raises:
            NoPostsToExport: If no own post matches
        """
        post = self.db.items.get_latest_created_own(include_private)
        if post is None:
            raise NoPostsToExport()
        return markdown_filename(post), render_markdown_post(post, include_frontmatter)

    def export_markdown_zip(
        self,
        include_private: bool = True,
        include_frontmatter: bool = True,
    ) -> tuple[str, bytes]:
        """
        Every matching post as a Markdown file inside one ZIP archive.

        Raises:
            NoPostsToExport: If no own post matches
        """
        posts = self.db.get_own_items(include_private)
        if not posts:
            raise NoPostsToExport()

        buffer = io.BytesIO()
        used: set[str] = set()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for post in posts:
                name = _unique_name(markdown_filename(post), used)
                archive.writestr(name, render_markdown_post(post, include_frontmatter))

        logger.info(f"Exported {len(posts)} posts as markdown archive")
        return f"posts-export-{date_stamp()}.zip", buffer.getvalue()


def _unique_name(name: str, used: set[str]) -> str:
    """Suffix -2, -3... before the extension when a file name repeats."""
    candidate = name
    stem = name[:-3] if name.endswith(".md") else name
    counter = 2
    while candidate in used:
        candidate = f"{stem}-{counter}.md"
        counter += 1
    used.add(candidate)
    return candidate
