"""
Error taxonomy and HTTP exception utilities.

Domain errors carry a human-readable message and the HTTP status the API
answers with; server.py maps them to ``{"error": message}`` responses.
"""

from typing import TypeVar

from fastapi import HTTPException

T = TypeVar("T")


class PublishRSSError(Exception):
    """Base class for errors surfaced to the user."""

    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class FetchFailed(PublishRSSError):
    """Remote feed could not be fetched or parsed."""

    status_code = 502
    default_message = "Failed to fetch or parse the RSS feed"


class InvalidURL(PublishRSSError):
    """Feed URL is not an absolute http(s) URL."""

    default_message = "Invalid feed URL"


class DuplicateFeed(PublishRSSError):
    status_code = 409
    default_message = "This feed is already in your subscriptions"


class InvalidFormat(PublishRSSError):
    default_message = "Invalid JSON format"


class NoNewPosts(PublishRSSError):
    default_message = "No new posts to import (all posts already exist)"


class NoValidPosts(PublishRSSError):
    default_message = "No valid markdown posts found in the selected files"


class NoPostsToExport(PublishRSSError):
    status_code = 404
    default_message = "No posts to export"


class Unauthorized(PublishRSSError):
    status_code = 401
    default_message = "Unauthorized: Invalid or missing token"


def require_resource(resource: T | None, detail: str = "Resource not found") -> T:
    """
    Raise 404 if resource is None, otherwise return the resource.

    Usage:
        post = require_resource(db.get_item(id), "Post not found")
    """
    if resource is None:
        raise HTTPException(status_code=404, detail=detail)
    return resource


def require_feed(feed: T | None) -> T:
    """Raise 404 if feed is None."""
    return require_resource(feed, "Feed not found")


def require_post(post: T | None) -> T:
    """Raise 404 if post is None."""
    return require_resource(post, "Post not found")
