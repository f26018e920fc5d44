"""
URL Validator - reject feed URLs that are not absolute http(s) URLs.

Subscriptions and fetches only accept URLs with an http/https scheme and a
hostname. Anything else is rejected before a request is made.
"""

from urllib.parse import urlparse

from .exceptions import InvalidURL

# Allowed URL schemes
ALLOWED_SCHEMES = {"http", "https"}


def validate_feed_url(url: str) -> str:
    """
    Validate a feed URL.

    Args:
        url: The URL to validate

    Returns:
        The URL with surrounding whitespace removed

    Raises:
        InvalidURL: If the URL is not an absolute http(s) URL
    """
    if not url or not url.strip():
        raise InvalidURL("Feed URL is required")

    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidURL(f"Invalid URL format: {e}")

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidURL(
            f"URL scheme '{parsed.scheme}' is not allowed. Use http or https."
        )

    if not parsed.hostname:
        raise InvalidURL("URL must include a hostname")

    return url
