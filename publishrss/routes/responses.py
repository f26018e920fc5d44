"""
Response helpers shared by the routers.
"""

from urllib.parse import quote

from fastapi import Response


def attachment(content: bytes | str, filename: str, media_type: str) -> Response:
    """A downloadable file response."""
    return Response(
        content=content,
        media_type=media_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
        },
    )
