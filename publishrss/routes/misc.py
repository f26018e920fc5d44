"""
Miscellaneous routes: health check.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from .. import __version__
from ..config import state, get_db
from ..database import Database

router = APIRouter(tags=["misc"])


# ─────────────────────────────────────────────────────────────
# Health Check
# ─────────────────────────────────────────────────────────────

@router.get("/status")
async def health_check(
    db: Annotated[Database, Depends(get_db)]
) -> dict:
    """API health check."""
    return {
        "status": "ok",
        "version": __version__,
        "refresh_in_progress": state.refresh_in_progress,
        **db.stats(),
    }
