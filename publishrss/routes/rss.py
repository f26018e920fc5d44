"""
RSS routes: remote fetch endpoint, the published public/private feeds and the
Now page.
"""

import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from fastapi.responses import HTMLResponse, JSONResponse

from ..config import config, get_db, get_feed_parser
from ..database import Database
from ..exceptions import FetchFailed, InvalidURL, Unauthorized
from ..feeds import FeedParser
from ..publication import (
    NO_CACHE_HEADERS,
    RSS_MEDIA_TYPE,
    render_now_page,
    render_private_feed,
    render_public_feed,
)
from ..schemas import FeedUrlsResponse, FetchRequest, FetchResponse
from ..services import FeedServiceDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rss", tags=["rss"])


# ─────────────────────────────────────────────────────────────
# Fetch
# ─────────────────────────────────────────────────────────────

@router.post("/fetch")
async def fetch_feed(
    request: FetchRequest,
    feed_parser: Annotated[FeedParser, Depends(get_feed_parser)]
) -> FetchResponse:
    """Fetch and normalize a remote feed without subscribing to it."""
    if not request.url:
        return JSONResponse({"error": "Feed URL is required"}, status_code=400)

    try:
        feed = await feed_parser.fetch(request.url)
    except InvalidURL as e:
        return JSONResponse({"error": e.message}, status_code=400)
    except FetchFailed as e:
        logger.warning(f"Error fetching RSS feed: {e}")
        return JSONResponse(
            {"error": "Failed to fetch or parse the RSS feed"}, status_code=500
        )

    return FetchResponse.from_feed(feed)


# ─────────────────────────────────────────────────────────────
# Published feeds
# ─────────────────────────────────────────────────────────────

@router.get("/your-feed")
async def public_feed(
    db: Annotated[Database, Depends(get_db)]
) -> Response:
    """Public RSS feed of own, non-private posts."""
    xml = render_public_feed(db.get_items(), config.BASE_URL)
    return Response(content=xml, media_type=RSS_MEDIA_TYPE, headers=NO_CACHE_HEADERS)


@router.get("/private-feed")
async def private_feed(
    db: Annotated[Database, Depends(get_db)],
    token: str | None = None
) -> Response:
    """Private RSS feed of all own posts. Requires the private token."""
    if not token:
        raise Unauthorized()

    if config.PRIVATE_FEED_TOKEN_CHECK:
        expected = db.get_private_token()
        if not secrets.compare_digest(token.encode(), expected.encode()):
            raise Unauthorized()

    xml = render_private_feed(db.get_items(), config.BASE_URL)
    return Response(content=xml, media_type=RSS_MEDIA_TYPE, headers=NO_CACHE_HEADERS)


@router.get("/now", response_class=HTMLResponse)
async def now_page(service: FeedServiceDep) -> HTMLResponse:
    """Standalone "Now" page of the latest public posts, ready to host anywhere."""
    html = render_now_page(service.db.get_items(), service.own_feed_url(private=False))
    return HTMLResponse(content=html, headers=NO_CACHE_HEADERS)


@router.get("/urls")
async def feed_urls(service: FeedServiceDep) -> FeedUrlsResponse:
    """Subscription URLs for this installation's public and private feeds."""
    return FeedUrlsResponse(
        public_url=service.own_feed_url(private=False),
        private_url=service.own_feed_url(private=True),
    )


@router.post("/private-token/regenerate")
async def regenerate_private_token(
    service: FeedServiceDep
) -> FeedUrlsResponse:
    """Replace the private token; previously shared private URLs stop working."""
    service.db.regenerate_private_token()
    logger.info("Private feed token regenerated")
    return FeedUrlsResponse(
        public_url=service.own_feed_url(private=False),
        private_url=service.own_feed_url(private=True),
    )
