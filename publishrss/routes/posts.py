"""
Post routes: authoring own posts and moving them in and out as
JSON, Markdown and ZIP.
"""

from fastapi import APIRouter, File, UploadFile

from ..exceptions import InvalidFormat
from ..schemas import CreatePostRequest, FeedItemSchema, ImportPostsResponse
from ..services import ExportServiceDep, ImportServiceDep, PostServiceDep
from ..services.post_service import Visibility
from .responses import attachment

router = APIRouter(prefix="/posts", tags=["posts"])

# Item links in the published feeds point at /post/{id}
permalink_router = APIRouter(tags=["posts"])


# ─────────────────────────────────────────────────────────────
# Authoring
# ─────────────────────────────────────────────────────────────

@router.get("")
async def list_posts(
    service: PostServiceDep,
    visibility: Visibility = "all"
) -> list[FeedItemSchema]:
    """Own posts, newest first."""
    return [FeedItemSchema.from_db(p) for p in service.list_posts(visibility)]


@router.post("")
async def create_post(
    request: CreatePostRequest,
    service: PostServiceDep
) -> FeedItemSchema:
    """Publish a post to the public or private feed."""
    post = service.create_post(request.content, is_private=request.is_private)
    return FeedItemSchema.from_db(post)


@router.get("/{post_id}")
async def get_post(
    post_id: str,
    service: PostServiceDep
) -> FeedItemSchema:
    """Single item by id."""
    return FeedItemSchema.from_db(service.get_post(post_id))


@permalink_router.get("/post/{post_id}")
async def post_permalink(
    post_id: str,
    service: PostServiceDep
) -> FeedItemSchema:
    """Permalink of a published item."""
    return FeedItemSchema.from_db(service.get_post(post_id))


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    service: PostServiceDep
) -> dict:
    """Delete an own post."""
    service.delete_post(post_id)
    return {"success": True}


# ─────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────

@router.get("/export/json")
async def export_posts_json(service: ExportServiceDep):
    """Download all own posts as JSON."""
    filename, content = service.export_posts_json()
    return attachment(content, filename, "application/json")


@router.get("/export/markdown")
async def export_markdown(
    service: ExportServiceDep,
    include_private: bool = True,
    include_frontmatter: bool = True
):
    """Download the most recently written post as a Markdown file."""
    filename, content = service.export_markdown(include_private, include_frontmatter)
    return attachment(content, filename, "text/markdown; charset=utf-8")


@router.get("/export/zip")
async def export_zip(
    service: ExportServiceDep,
    include_private: bool = True,
    include_frontmatter: bool = True
):
    """Download every own post as Markdown files in a ZIP archive."""
    filename, content = service.export_markdown_zip(include_private, include_frontmatter)
    return attachment(content, filename, "application/zip")


# ─────────────────────────────────────────────────────────────
# Import
# ─────────────────────────────────────────────────────────────

@router.post("/import/json")
async def import_posts_json(
    service: ImportServiceDep,
    file: UploadFile = File(...)
) -> ImportPostsResponse:
    """Import own posts from a JSON export. Existing posts are skipped."""
    imported = service.import_posts(await file.read())
    return ImportPostsResponse(imported=imported)


@router.post("/import/markdown")
async def import_markdown(
    service: ImportServiceDep,
    files: list[UploadFile] = File(...)
) -> ImportPostsResponse:
    """Import one or more Markdown files as own posts."""
    uploads = [(f.filename or "", await f.read()) for f in files]
    imported = service.import_markdown_files(uploads)
    return ImportPostsResponse(imported=imported)


@router.post("/import/zip")
async def import_zip(
    service: ImportServiceDep,
    file: UploadFile = File(...)
) -> ImportPostsResponse:
    """Import every Markdown file inside a ZIP archive."""
    if file.filename and not file.filename.lower().endswith(".zip"):
        raise InvalidFormat("Please select a ZIP file")
    imported = service.import_markdown_zip(await file.read())
    return ImportPostsResponse(imported=imported)
