"""
Feed routes: subscriptions, refresh, items, JSON import/export.
"""

from fastapi import APIRouter, File, UploadFile

from ..schemas import (
    AddFeedRequest,
    FeedItemSchema,
    FeedResponse,
    ImportFeedsResponse,
    OwnFeedRequest,
    RefreshResponse,
)
from ..services import ExportServiceDep, FeedServiceDep, ImportServiceDep
from .responses import attachment

router = APIRouter(prefix="/feeds", tags=["feeds"])


# ─────────────────────────────────────────────────────────────
# Feed Management
# ─────────────────────────────────────────────────────────────

@router.get("")
async def list_feeds(service: FeedServiceDep) -> list[FeedResponse]:
    """List all subscribed feeds, own feed included."""
    return [FeedResponse.from_db(f) for f in service.list_feeds()]


@router.post("")
async def add_feed(
    request: AddFeedRequest,
    service: FeedServiceDep
) -> FeedResponse:
    """Subscribe to a new feed and store its current items."""
    feed = await service.subscribe(request.url)
    return FeedResponse.from_db(feed)


@router.post("/own")
async def add_own_feed(
    request: OwnFeedRequest,
    service: FeedServiceDep
) -> FeedResponse:
    """Subscribe to this installation's public or private feed."""
    feed = await service.subscribe_own_feed(private=request.private)
    return FeedResponse.from_db(feed)


@router.delete("/{feed_id}")
async def remove_feed(
    feed_id: str,
    service: FeedServiceDep
) -> dict:
    """Unsubscribe from a feed. Own posts are never deleted this way."""
    service.unsubscribe(feed_id)
    return {"success": True}


# ─────────────────────────────────────────────────────────────
# Items
# ─────────────────────────────────────────────────────────────

@router.get("/items")
async def list_items(
    service: FeedServiceDep,
    feed_id: str | None = None
) -> list[FeedItemSchema]:
    """Stored items, newest first, optionally limited to one feed."""
    return [FeedItemSchema.from_db(i) for i in service.list_items(feed_id)]


# ─────────────────────────────────────────────────────────────
# Refresh
# ─────────────────────────────────────────────────────────────

@router.post("/refresh")
async def refresh_feeds(service: FeedServiceDep) -> RefreshResponse:
    """Refetch every subscription. Failing feeds are skipped."""
    added = await service.refresh_all()
    if added is None:
        return RefreshResponse(in_progress=True)
    return RefreshResponse(added=added)


@router.post("/{feed_id}/refresh")
async def refresh_feed(
    feed_id: str,
    service: FeedServiceDep
) -> RefreshResponse:
    """Refetch a single subscription."""
    added = await service.refresh_feed(feed_id)
    return RefreshResponse(added=added)


# ─────────────────────────────────────────────────────────────
# JSON Import/Export
# ─────────────────────────────────────────────────────────────

@router.get("/export")
async def export_feeds(service: ExportServiceDep):
    """Download subscriptions and their items as JSON."""
    filename, content = service.export_feeds_json()
    return attachment(content, filename, "application/json")


@router.post("/import")
async def import_feeds(
    service: ImportServiceDep,
    file: UploadFile = File(...)
) -> ImportFeedsResponse:
    """Import subscriptions from a JSON export. Known URLs are skipped."""
    feeds, items = service.import_feeds(await file.read())
    return ImportFeedsResponse(feeds=feeds, items=items)
