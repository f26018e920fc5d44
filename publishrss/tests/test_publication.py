"""
Tests for RSS rendering of own posts.
"""

import re
import xml.etree.ElementTree as ET

from publishrss.database import DBFeedItem, new_id
from publishrss.publication import (
    cdata,
    escape_xml,
    render_now_page,
    render_private_feed,
    render_public_feed,
)

BASE = "https://rss.example.test"
CONTENT_NS = "{http://purl.org/rss/1.0/modules/content/}encoded"


def _titles(xml: str) -> list[str]:
    root = ET.fromstring(xml)
    return [item.findtext("title") for item in root.iter("item")]


class TestPublicFeed:
    """Tests for render_public_feed."""

    def test_only_public_own_posts(self, post_factory):
        """Private posts and subscribed items never appear."""
        remote = DBFeedItem(
            id=new_id(),
            feed_id="remote",
            feed_title="Remote",
            title="Remote item",
            content="",
            pub_date="2024-01-03T00:00:00.000Z",
        )
        items = [
            remote,
            post_factory("Visible", "2024-01-02T00:00:00.000Z"),
            post_factory("Secret", "2024-01-01T00:00:00.000Z", is_private=True),
        ]
        xml = render_public_feed(items, BASE)
        assert _titles(xml) == ["Visible"]
        assert "Secret" not in xml

    def test_channel_and_item_fields(self, post_factory):
        post = post_factory("Hello", "2024-01-15T10:30:00.000Z", content="<p>Hi</p>")
        root = ET.fromstring(render_public_feed([post], BASE))
        channel = root.find("channel")
        assert channel.findtext("title") == "Your PublishRSS Feed"
        assert channel.findtext("link") == BASE

        item = channel.find("item")
        assert item.findtext("link") == f"{BASE}/post/{post.id}"
        assert item.findtext("guid") == post.id
        assert item.find("guid").get("isPermaLink") == "false"
        assert item.findtext("pubDate") == "Mon, 15 Jan 2024 10:30:00 GMT"
        assert item.findtext(CONTENT_NS) == "<p>Hi</p>"

    def test_empty_feed_is_valid(self):
        root = ET.fromstring(render_public_feed([], BASE))
        assert root.find("channel").findall("item") == []


class TestPrivateFeed:
    """Tests for render_private_feed."""

    def test_private_posts_suffixed(self, post_factory):
        items = [
            post_factory("Open", "2024-01-02T00:00:00.000Z"),
            post_factory("Hidden", "2024-01-01T00:00:00.000Z", is_private=True),
        ]
        xml = render_private_feed(items, BASE)
        assert _titles(xml) == ["Open", "Hidden (Private)"]
        assert ET.fromstring(xml).find("channel").findtext("title") == "Your Private PublishRSS Feed"


class TestEscaping:
    """Tests for XML escaping and CDATA wrapping."""

    def test_escape_xml(self):
        assert escape_xml("a & b < c > \"d\" 'e'") == "a &amp; b &lt; c &gt; &quot;d&quot; &apos;e&apos;"

    def test_title_with_markup_is_escaped(self, post_factory):
        post = post_factory("Tom & Jerry <3", "2024-01-01T00:00:00.000Z")
        assert _titles(render_public_feed([post], BASE)) == ["Tom & Jerry <3"]

    def test_cdata_terminator_in_content(self, post_factory):
        """Content containing ]]> should still produce well-formed XML."""
        content = "<p>Tricky ]]> content</p>"
        post = post_factory("Tricky", "2024-01-01T00:00:00.000Z", content=content)
        item = ET.fromstring(render_public_feed([post], BASE)).find("channel/item")
        assert item.findtext(CONTENT_NS) == content

    def test_cdata_wraps(self):
        assert cdata("x") == "<![CDATA[x]]>"


class TestNowPage:
    """Tests for render_now_page."""

    FEED_URL = f"{BASE}/api/rss/your-feed"

    def test_latest_five_public_posts(self, post_factory):
        posts = [
            post_factory(f"Post {n}", f"2024-01-{n:02d}T00:00:00.000Z")
            for n in range(7, 0, -1)
        ]
        posts.insert(1, post_factory("Secret", "2024-01-06T12:00:00.000Z", is_private=True))

        html = render_now_page(posts, self.FEED_URL)
        titles = re.findall(r"<h3>(.*?)</h3>", html)
        assert titles == ["Post 7", "Post 6", "Post 5", "Post 4", "Post 3"]
        assert "Secret" not in html

    def test_page_fields(self, post_factory):
        post = post_factory("Fish & <Chips>", "2024-01-15T10:30:00.000Z", content="<p>Crispy</p>")
        html = render_now_page([post], self.FEED_URL)
        assert html.startswith("<!DOCTYPE html>")
        assert "<h3>Fish &amp; &lt;Chips&gt;</h3>" in html
        assert '<div class="post-meta">January 15, 2024</div>' in html
        assert "<p>Crispy</p>" in html
        assert f'<a href="{self.FEED_URL}" target="_blank">' in html
        assert "Last updated: " in html

    def test_no_posts(self):
        html = render_now_page([], self.FEED_URL)
        assert "<h3>" not in html
        assert "Latest Updates" in html
