"""Tool registry endpoints.

Routes
------
GET  /tools         List the registered tools and their input schemas
POST /tools/call    Body: {"name": "...", "arguments": {...}}  → result envelope

The call envelope is returned with HTTP 200 even when the tool failed; the
failure is signalled by ``isError`` in the body.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from webreader.operations import TOOLS, call_tool

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ToolCallRequest(BaseModel):
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("")
def list_tools() -> dict[str, Any]:
    return {"tools": TOOLS}


@router.post("/call")
async def call_tool_endpoint(body: ToolCallRequest) -> dict[str, Any]:
    """Run one tool and return ``{"content": [...], "isError": bool}``."""
    try:
        result = await call_tool(body.name, body.arguments)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Tool not found: {body.name}") from exc
    return result.to_envelope()
