"""
Service layer for business logic.

Services encapsulate business logic, keeping routes as thin HTTP adapters.
Each service receives its dependencies via constructor injection.

Usage in routes:
    from ..services import FeedServiceDep

    @router.post("/feeds/refresh")
    async def refresh_feeds(service: FeedServiceDep):
        return await service.refresh_all()
"""

from typing import Annotated

from fastapi import Depends

from ..config import config, state, get_db
from ..database import Database

from .export_service import ExportService
from .feed_service import FeedService
from .import_service import ImportService
from .post_service import PostService

__all__ = [
    # Services
    "ExportService",
    "FeedService",
    "ImportService",
    "PostService",
    # Dependency factories
    "get_export_service",
    "get_feed_service",
    "get_import_service",
    "get_post_service",
    # Type aliases for dependency injection
    "ExportServiceDep",
    "FeedServiceDep",
    "ImportServiceDep",
    "PostServiceDep",
]


def get_feed_service(db: Annotated[Database, Depends(get_db)]) -> FeedService:
    """Dependency to get FeedService instance."""
    return FeedService(
        db=db,
        feed_parser=state.feed_parser,
        base_url=config.BASE_URL,
    )


def get_import_service(db: Annotated[Database, Depends(get_db)]) -> ImportService:
    """Dependency to get ImportService instance."""
    return ImportService(db=db)


def get_export_service(db: Annotated[Database, Depends(get_db)]) -> ExportService:
    """Dependency to get ExportService instance."""
    return ExportService(db=db)


def get_post_service(db: Annotated[Database, Depends(get_db)]) -> PostService:
    """Dependency to get PostService instance."""
    return PostService(db=db)


FeedServiceDep = Annotated[FeedService, Depends(get_feed_service)]
ImportServiceDep = Annotated[ImportService, Depends(get_import_service)]
ExportServiceDep = Annotated[ExportService, Depends(get_export_service)]
PostServiceDep = Annotated[PostService, Depends(get_post_service)]
