"""
Import service: merge JSON and Markdown datasets into the store.

Each entry point has its own notion of identity:

- JSON feeds/items: feeds by URL, items by exact (title, pubDate)
- JSON posts: exact (title, pubDate)
- Markdown: case-insensitive title plus fuzzy plain-text similarity

Every import runs inside one transaction and only ever adds.
"""

import io
import json
import logging
import zipfile

from pydantic import ValidationError

from ..database import (
    Database,
    DBFeedItem,
    OWN_FEED_ID,
    OWN_FEED_TITLE,
    OWN_FEED_URL,
    PRIVATE_FEED_TITLE,
    new_id,
)
from ..dates import now_iso
from ..exceptions import InvalidFormat, NoNewPosts, NoValidPosts
from ..markdown_posts import is_duplicate_post, is_markdown_filename, parse_markdown_post
from ..schemas import FeedItemSchema, ImportDocument

logger = logging.getLogger(__name__)


def own_feed_title(is_private: bool) -> str:
    return PRIVATE_FEED_TITLE if is_private else OWN_FEED_TITLE


class ImportService:
    """Service for JSON and Markdown imports."""

    def __init__(self, db: Database):
        self.db = db

    # ─────────────────────────────────────────────────────────────
    # JSON
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def parse_document(payload: str | bytes) -> ImportDocument:
        """
        Validate a JSON import payload before anything touches the store.

        Raises:
            InvalidFormat: If the payload is not JSON or does not match the envelope
        """
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise InvalidFormat()

        if not isinstance(data, dict):
            raise InvalidFormat()

        try:
            return ImportDocument.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Rejected import document: {e.error_count()} validation errors")
            raise InvalidFormat()

    def import_feeds(self, payload: str | bytes) -> tuple[int, int]:
        """
        Merge an exported ``{feeds, items}`` document.

        Returns:
            (feeds added, items added). Zero of either is not an error.
        """
        document = self.parse_document(payload)
        feeds_added = 0
        items_added = 0

        with self.db.transaction():
            for feed in document.feeds or []:
                if feed.url == OWN_FEED_URL or self.db.feed_url_exists(feed.url):
                    continue
                self.db.add_feed(
                    feed.url,
                    feed.title or feed.url,
                    description=feed.description,
                    link=feed.link,
                )
                feeds_added += 1

            for item in document.items or []:
                if self._add_if_new(item, force_own=False):
                    items_added += 1

        logger.info(f"Imported {feeds_added} feeds and {items_added} items")
        return feeds_added, items_added

    def import_posts(self, payload: str | bytes) -> int:
        """
        Merge an exported ``{posts}`` document as own posts.

        Raises:
            InvalidFormat: If the payload is malformed or has no posts array
            NoNewPosts: If every post already exists
        """
        document = self.parse_document(payload)
        if document.posts is None:
            raise InvalidFormat("No posts found in the import file")

        imported = 0
        with self.db.transaction():
            for post in document.posts:
                if self._add_if_new(post, force_own=True):
                    imported += 1

        if imported == 0:
            raise NoNewPosts()

        logger.info(f"Imported {imported} posts from JSON")
        return imported

    def _add_if_new(self, item: FeedItemSchema, force_own: bool) -> bool:
        """Insert unless an item with the same title and pubDate exists."""
        pub_date = item.pub_date or now_iso()
        if self.db.items.exists_with_title_and_date(item.title, pub_date):
            logger.debug(f"Skipping duplicate {item.title!r} ({pub_date})")
            return False

        is_own = True if force_own else item.is_own
        if is_own:
            feed_id = OWN_FEED_ID if force_own else (item.feed_id or OWN_FEED_ID)
            feed_title = item.feed_title or own_feed_title(item.is_private)
        else:
            feed_id = item.feed_id or ""
            feed_title = item.feed_title or ""

        self.db.add_item(DBFeedItem(
            id=new_id(),
            feed_id=feed_id,
            feed_title=feed_title,
            title=item.title,
            content=item.content,
            link=item.link,
            pub_date=pub_date,
            is_own=is_own,
            is_private=item.is_private,
        ))
        return True

    # ─────────────────────────────────────────────────────────────
    # Markdown
    # ─────────────────────────────────────────────────────────────

    def import_markdown(self, text: str, filename: str) -> int:
        """
        Import one Markdown post.

        Returns:
            1 if the post was added, 0 if the file was not Markdown or the
            post duplicates an existing own post
        """
        if not is_markdown_filename(filename):
            return 0

        post = parse_markdown_post(text, filename)

        with self.db.transaction():
            candidates = self.db.items.get_own_by_title(post.title)
            if any(is_duplicate_post(existing, post) for existing in candidates):
                logger.info(f"Skipping duplicate markdown post {post.title!r} from {filename}")
                return 0

            self.db.add_item(DBFeedItem(
                id=new_id(),
                feed_id=OWN_FEED_ID,
                feed_title=own_feed_title(post.is_private),
                title=post.title,
                content=post.html,
                pub_date=post.pub_date,
                is_own=True,
                is_private=post.is_private,
            ))
        return 1

    def _import_markdown_bytes(self, filename: str, data: bytes) -> int:
        """Import one file; a file that cannot be read or imported counts as zero."""
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError:
            logger.warning(f"Skipping {filename}: not valid UTF-8")
            return 0
        try:
            return self.import_markdown(text, filename)
        except Exception as e:
            logger.warning(f"Skipping {filename}: {e}")
            return 0

    def import_markdown_files(self, files: list[tuple[str, bytes]]) -> int:
        """
        Import several uploaded files independently.

        Raises:
            NoValidPosts: If nothing was imported
        """
        imported = 0
        for filename, data in files:
            if not is_markdown_filename(filename):
                continue
            imported += self._import_markdown_bytes(filename, data)

        if imported == 0:
            raise NoValidPosts()

        logger.info(f"Imported {imported} markdown posts")
        return imported

    def import_markdown_zip(self, data: bytes) -> int:
        """
        Import every ``.md`` entry of a ZIP archive (nested paths included).

        Raises:
            InvalidFormat: If the data is not a ZIP archive
            NoValidPosts: If nothing was imported
        """
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile:
            raise InvalidFormat("Invalid ZIP file")

        imported = 0
        with archive:
            for info in archive.infolist():
                if info.is_dir() or not is_markdown_filename(info.filename):
                    continue
                try:
                    content = archive.read(info)
                except Exception as e:
                    logger.warning(f"Skipping {info.filename}: {e}")
                    continue
                imported += self._import_markdown_bytes(info.filename, content)

        if imported == 0:
            raise NoValidPosts("No valid markdown posts found in the ZIP archive")

        logger.info(f"Imported {imported} markdown posts from ZIP archive")
        return imported
