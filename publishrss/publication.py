"""
RSS 2.0 rendering of own posts.

Two channels are produced from the same store: the public feed (own posts
that are not private) and the token-gated private feed (all own posts, with
private ones marked in the title). A standalone "Now" HTML page built from
the latest public posts is rendered here as well.
"""

from collections.abc import Iterable
from email.utils import format_datetime
from html import escape

from .database.models import DBFeedItem
from .dates import long_date, to_rfc1123, utc_now

RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

PUBLIC_CHANNEL = {
    "title": "Your PublishRSS Feed",
    "description": "Your personal RSS feed",
}

PRIVATE_CHANNEL = {
    "title": "Your Private PublishRSS Feed",
    "description": "Your private personal RSS feed",
}

PRIVATE_SUFFIX = " (Private)"

_XML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}


def escape_xml(text: str) -> str:
    """Escape the five XML special characters."""
    return "".join(_XML_ESCAPES.get(c, c) for c in text)


def cdata(text: str) -> str:
    """Wrap text in a CDATA section, splitting any embedded terminator."""
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def public_items(items: Iterable[DBFeedItem]) -> list[DBFeedItem]:
    return [i for i in items if i.is_own and not i.is_private]


def private_items(items: Iterable[DBFeedItem]) -> list[DBFeedItem]:
    return [i for i in items if i.is_own]


def _render_item(item: DBFeedItem, base_url: str, mark_private: bool) -> str:
    title = escape_xml(item.title)
    if mark_private and item.is_private:
        title += PRIVATE_SUFFIX
    return (
        "  <item>\n"
        f"    <title>{title}</title>\n"
        f"    <link>{escape_xml(base_url)}/post/{escape_xml(item.id)}</link>\n"
        f'    <guid isPermaLink="false">{escape_xml(item.id)}</guid>\n'
        f"    <pubDate>{to_rfc1123(item.pub_date)}</pubDate>\n"
        f"    <content:encoded>{cdata(item.content)}</content:encoded>\n"
        "  </item>\n"
    )


def _render_channel(
    items: list[DBFeedItem],
    base_url: str,
    channel: dict,
    mark_private: bool,
) -> str:
    body = "".join(_render_item(item, base_url, mark_private) for item in items)
    return (
        '<?xml version="1.0" encoding="UTF-8" ?>\n'
        '<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">\n'
        "<channel>\n"
        f"  <title>{escape_xml(channel['title'])}</title>\n"
        f"  <link>{escape_xml(base_url)}</link>\n"
        f"  <description>{escape_xml(channel['description'])}</description>\n"
        f"  <lastBuildDate>{format_datetime(utc_now(), usegmt=True)}</lastBuildDate>\n"
        f"{body}"
        "</channel>\n"
        "</rss>\n"
    )


def render_public_feed(items: Iterable[DBFeedItem], base_url: str) -> str:
    """Public RSS document: own posts that are not private, in store order."""
    return _render_channel(public_items(items), base_url, PUBLIC_CHANNEL, mark_private=False)


def render_private_feed(items: Iterable[DBFeedItem], base_url: str) -> str:
    """Private RSS document: every own post, private ones suffixed " (Private)"."""
    return _render_channel(private_items(items), base_url, PRIVATE_CHANNEL, mark_private=True)


# ─────────────────────────────────────────────────────────────
# Now page
# ─────────────────────────────────────────────────────────────

NOW_PAGE_POSTS = 5

NOW_PAGE_STYLE = """\
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
      line-height: 1.6;
      color: #333;
      max-width: 650px;
      margin: 0 auto;
      padding: 2rem 1rem;
    }
    a { color: #0070f3; text-decoration: none; }
    a:hover { text-decoration: underline; }
    header { margin-bottom: 2rem; text-align: center; }
    h1 { font-size: 2.5rem; margin-bottom: 0.5rem; }
    h2 { font-size: 1.8rem; margin-bottom: 1rem; padding-bottom: 0.5rem; border-bottom: 1px solid #eaeaea; }
    h3 { font-size: 1.4rem; margin-bottom: 0.5rem; }
    .updated, .post-meta { color: #666; font-size: 0.9rem; margin-bottom: 0.5rem; }
    .post { margin-bottom: 2rem; padding-bottom: 1rem; border-bottom: 1px solid #eaeaea; }
    .subscribe { margin-top: 1rem; padding: 1rem; background-color: #f5f5f5; border-radius: 5px; text-align: center; }
    footer { margin-top: 3rem; padding-top: 1rem; border-top: 1px solid #eaeaea; text-align: center; font-size: 0.9rem; color: #666; }
"""


def _render_now_post(item: DBFeedItem) -> str:
    return (
        '    <div class="post">\n'
        f"      <h3>{escape(item.title)}</h3>\n"
        f'      <div class="post-meta">{long_date(item.pub_date)}</div>\n'
        f'      <div class="post-content">\n{item.content}\n      </div>\n'
        "    </div>\n"
    )


def render_now_page(
    items: Iterable[DBFeedItem],
    feed_url: str,
    limit: int = NOW_PAGE_POSTS,
) -> str:
    """
    Standalone "Now" HTML page.

    Lists the latest ``limit`` public own posts (items are taken in store
    order, so pass them newest first) followed by a link to the public feed.
    Private posts and subscribed items never appear. Post content is
    inserted as stored HTML.
    """
    posts = "".join(_render_now_post(item) for item in public_items(items)[:limit])
    today = utc_now()
    url = escape(feed_url)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        "  <title>Now Page</title>\n"
        f"  <style>\n{NOW_PAGE_STYLE}  </style>\n"
        "</head>\n"
        "<body>\n"
        "  <header>\n"
        "    <h1>Now</h1>\n"
        f'    <div class="updated">Last updated: {long_date()}</div>\n'
        "  </header>\n"
        '  <section class="posts">\n'
        "    <h2>Latest Updates</h2>\n"
        f"{posts}"
        "  </section>\n"
        '  <div class="subscribe">\n'
        "    <p>Want to stay updated? Subscribe to my RSS feed:</p>\n"
        f'    <p><a href="{url}" target="_blank">{url}</a></p>\n'
        "  </div>\n"
        "  <footer>\n"
        f"    <p>&copy; {today.year}</p>\n"
        "  </footer>\n"
        "</body>\n"
        "</html>\n"
    )
