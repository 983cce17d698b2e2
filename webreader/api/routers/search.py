"""Search endpoint.

Routes
------
GET /search?q=<query>&max_results=10
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Query

from webreader import operations
from webreader.api.routers.pages import unwrap_result

router = APIRouter()


@router.get("")
async def search(
    q: str,
    max_results: Optional[int] = Query(None, ge=1, le=50),
) -> list[dict[str, Any]]:
    """Search DuckDuckGo.

    Args:
        q: Search query string.
        max_results: Maximum number of results; defaults to the configured
            ``DDG_MAX_RESULTS``.
    """
    return unwrap_result(await operations.search(q, max_results))
