"""Page read endpoints.

Routes
------
GET /read?url=<url>             Structured summary (title, text, links, images)
GET /read/markdown?url=<url>    Readable article as markdown
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, HTTPException

from webreader import operations
from webreader.operations import ToolResult
from webreader.scraper.errors import ErrorKind

router = APIRouter()


def unwrap_result(result: ToolResult) -> Any:
    """Return the parsed JSON payload, or raise carrying the error text.

    Invalid input is the caller's fault (400); any other failure is reported
    as a bad upstream (502).
    """
    if result.is_error:
        if result.kind is ErrorKind.INPUT_INVALID:
            raise HTTPException(status_code=400, detail=result.text)
        raise HTTPException(status_code=502, detail=result.text)
    return json.loads(result.text)


@router.get("")
async def read_page(url: str) -> dict[str, Any]:
    """Fetch *url* and return its structured summary."""
    return unwrap_result(await operations.read_structured(url))


@router.get("/markdown")
async def read_page_markdown(url: str) -> dict[str, Any]:
    """Fetch *url* and return its main article converted to markdown."""
    return unwrap_result(await operations.read_markdown(url))
