"""
Post service: authoring and managing own posts.
"""

import logging
from typing import Literal

from fastapi import HTTPException

from ..database import Database, DBFeedItem, OWN_FEED_ID, new_id
from ..dates import now_iso
from ..exceptions import require_post
from ..markdown_posts import strip_tags
from .import_service import own_feed_title

logger = logging.getLogger(__name__)

Visibility = Literal["all", "public", "private"]

TITLE_WORDS = 5


def derive_title(content: str) -> str:
    """
    Title from the first words of a post.

    ``"<p>One two three four five six</p>"`` gives ``"One two three four five..."``.
    """
    words = strip_tags(content).split()
    if not words:
        return "Untitled Post"
    title = " ".join(words[:TITLE_WORDS])
    if len(words) > TITLE_WORDS:
        title += "..."
    return title


class PostService:
    """Service for own posts."""

    def __init__(self, db: Database):
        self.db = db

    def create_post(self, content: str, is_private: bool = False) -> DBFeedItem:
        """
        Author a post.

        Raises:
            HTTPException: If the content is empty
        """
        if not strip_tags(content):
            raise HTTPException(status_code=400, detail="Post content is required")

        post = DBFeedItem(
            id=new_id(),
            feed_id=OWN_FEED_ID,
            feed_title=own_feed_title(is_private),
            title=derive_title(content),
            content=content,
            pub_date=now_iso(),
            is_own=True,
            is_private=is_private,
        )
        with self.db.transaction():
            self.db.add_item(post)

        logger.info(f"Created {'private' if is_private else 'public'} post {post.id}")
        return post

    def get_post(self, post_id: str) -> DBFeedItem:
        """Any stored item by id (permalink target)."""
        return require_post(self.db.get_item(post_id))

    def list_posts(self, visibility: Visibility = "all") -> list[DBFeedItem]:
        posts = self.db.get_own_items()
        if visibility == "public":
            return [p for p in posts if not p.is_private]
        if visibility == "private":
            return [p for p in posts if p.is_private]
        return posts

    def delete_post(self, post_id: str) -> None:
        """
        Delete an own post.

        Raises:
            HTTPException: If no own post has this id
        """
        post = self.db.get_item(post_id)
        if post is None or not post.is_own:
            raise HTTPException(status_code=404, detail="Post not found")
        with self.db.transaction():
            self.db.delete_item(post_id)
