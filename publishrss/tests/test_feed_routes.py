"""
Tests for feed routes.
"""

import json

from publishrss.exceptions import FetchFailed

FEED_URL = "https://blog.example.com/feed.xml"


class TestListFeeds:
    """Tests for GET /feeds endpoint."""

    def test_list_feeds_has_own_feed(self, client):
        """A new store lists only the own feed."""
        response = client.get("/feeds")
        assert response.status_code == 200
        feeds = response.json()
        assert len(feeds) == 1
        assert feeds[0]["id"] == "own"
        assert feeds[0]["url"] == "local"


class TestAddFeed:
    """Tests for POST /feeds endpoint."""

    def test_add_feed(self, client):
        """Should subscribe and return the stored feed."""
        response = client.post("/feeds", json={"url": FEED_URL})
        assert response.status_code == 200
        feed = response.json()
        assert feed["title"] == "Example Blog"
        assert feed["url"] == FEED_URL

    def test_add_feed_stores_items(self, client):
        feed_id = client.post("/feeds", json={"url": FEED_URL}).json()["id"]
        response = client.get("/feeds/items", params={"feed_id": feed_id})
        assert response.status_code == 200
        items = response.json()
        assert [i["title"] for i in items] == ["Hello"]
        assert items[0]["feedTitle"] == "Example Blog"
        assert items[0]["isOwn"] is False

    def test_add_duplicate_feed(self, client):
        client.post("/feeds", json={"url": FEED_URL})
        response = client.post("/feeds", json={"url": FEED_URL})
        assert response.status_code == 409
        assert response.json() == {"error": "This feed is already in your subscriptions"}

    def test_add_feed_invalid_url(self, client):
        """Should reject invalid feed URL."""
        response = client.post("/feeds", json={"url": "not-a-valid-url"})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_add_feed_missing_url(self, client):
        """Should require URL."""
        response = client.post("/feeds", json={})
        assert response.status_code == 422

    def test_add_feed_fetch_failure(self, client, mock_parser):
        mock_parser.fetch.side_effect = FetchFailed()
        response = client.post("/feeds", json={"url": FEED_URL})
        assert response.status_code == 502
        assert response.json() == {"error": "Failed to fetch or parse the RSS feed"}

    def test_add_own_feed(self, client):
        response = client.post("/feeds/own", json={"private": False})
        assert response.status_code == 200
        assert response.json()["url"] == "https://rss.example.test/api/rss/your-feed"


class TestDeleteFeed:
    """Tests for DELETE /feeds/{feed_id} endpoint."""

    def test_delete_feed(self, client):
        feed_id = client.post("/feeds", json={"url": FEED_URL}).json()["id"]
        response = client.delete(f"/feeds/{feed_id}")
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert client.get("/feeds/items").json() == []

    def test_delete_own_feed(self, client):
        response = client.delete("/feeds/own")
        assert response.status_code == 400

    def test_delete_missing_feed(self, client):
        response = client.delete("/feeds/missing")
        assert response.status_code == 404


class TestRefresh:
    """Tests for refresh endpoints."""

    def test_refresh_all(self, client):
        client.post("/feeds", json={"url": FEED_URL})
        response = client.post("/feeds/refresh")
        assert response.status_code == 200
        assert response.json() == {"success": True, "added": 0, "in_progress": False}

    def test_refresh_single(self, client):
        feed_id = client.post("/feeds", json={"url": FEED_URL}).json()["id"]
        response = client.post(f"/feeds/{feed_id}/refresh")
        assert response.status_code == 200
        assert response.json()["added"] == 0

    def test_refresh_missing_feed(self, client):
        response = client.post("/feeds/missing/refresh")
        assert response.status_code == 404


class TestItems:
    """Tests for GET /feeds/items endpoint."""

    def test_items_unknown_feed(self, client):
        response = client.get("/feeds/items", params={"feed_id": "missing"})
        assert response.status_code == 404

    def test_items_newest_first(self, client_with_data):
        client, data = client_with_data
        items = client.get("/feeds/items").json()
        assert [i["title"] for i in items] == ["Newer public", "Secret", "Older public"]


class TestImportExport:
    """Tests for JSON import/export of subscriptions."""

    def test_export_download(self, client):
        client.post("/feeds", json={"url": FEED_URL})
        response = client.get("/feeds/export")
        assert response.status_code == 200
        assert "attachment" in response.headers["content-disposition"]
        assert "rss-feeds-export-" in response.headers["content-disposition"]
        document = response.json()
        assert [f["url"] for f in document["feeds"]] == [FEED_URL]
        assert [i["title"] for i in document["items"]] == ["Hello"]

    def test_import_upload(self, client):
        payload = json.dumps({
            "feeds": [{"title": "Remote", "url": "https://remote.example.com/feed"}],
            "items": [],
        })
        response = client.post(
            "/feeds/import",
            files={"file": ("feeds.json", payload, "application/json")},
        )
        assert response.status_code == 200
        assert response.json() == {"feeds": 1, "items": 0}

    def test_import_invalid(self, client):
        response = client.post(
            "/feeds/import",
            files={"file": ("feeds.json", "{broken", "application/json")},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON format"}
