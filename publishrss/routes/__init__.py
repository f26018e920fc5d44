"""
API route modules.
"""

from .feeds import router as feeds_router
from .misc import router as misc_router
from .posts import permalink_router
from .posts import router as posts_router
from .rss import router as rss_router

__all__ = [
    "feeds_router",
    "misc_router",
    "permalink_router",
    "posts_router",
    "rss_router",
]
