"""Operation contracts exposed to the front ends.

Each operation opens its own browser session, runs one scraper component and
returns a :class:`ToolResult`.  Failures never propagate: every error is
rendered as ``"Error: <message>"`` with ``is_error`` set, so a failed request
cannot take the service down.

The ``TOOLS`` registry describes the three operations as named tools with a
JSON-schema input, and :func:`call_tool` dispatches a tool call to them.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from webreader.config import settings
from webreader.scraper import markdown as markdown_mod
from webreader.scraper import search as search_mod
from webreader.scraper.errors import ErrorKind, InputInvalidError, ScraperError
from webreader.scraper.extractor import extract_structured
from webreader.scraper.session import open_session

logger = logging.getLogger(__name__)

MIN_SEARCH_RESULTS = 1
MAX_SEARCH_RESULTS = 50


@dataclass
class ToolResult:
    text: str
    is_error: bool = False
    # Classification of a failed result; None for unclassified failures.
    kind: Optional[ErrorKind] = None

    def to_envelope(self) -> dict[str, Any]:
        return {"content": [{"type": "text", "text": self.text}], "isError": self.is_error}


def _ok(payload: Any) -> ToolResult:
    return ToolResult(json.dumps(payload, indent=2, ensure_ascii=False))


def _error(exc: BaseException) -> ToolResult:
    kind = exc.kind if isinstance(exc, ScraperError) else None
    return ToolResult(f"Error: {exc}", is_error=True, kind=kind)


async def _guarded(name: str, body: Callable[[], Awaitable[ToolResult]]) -> ToolResult:
    try:
        return await body()
    except ScraperError as exc:
        logger.warning("[%s] %s: %s", name, exc.kind.value, exc)
        return _error(exc)
    except Exception as exc:
        logger.exception("[%s] unexpected failure", name)
        return _error(exc)


def _require(value: Optional[str], name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InputInvalidError(f"'{name}' parameter is required")
    return value.strip()


def clamp_max_results(value: Optional[int]) -> int:
    """Default to ``settings.ddg_max_results`` and clamp into 1–50."""
    if not value:
        value = settings.ddg_max_results
    return max(MIN_SEARCH_RESULTS, min(MAX_SEARCH_RESULTS, int(value)))


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

async def read_structured(url: Optional[str]) -> ToolResult:
    """Return the structured summary of *url* as JSON."""

    async def body() -> ToolResult:
        target = _require(url, "url")
        async with open_session() as session:
            snapshot = await extract_structured(
                session, target, settings.max_links, settings.max_images
            )
        return _ok(snapshot.to_dict())

    return await _guarded("read_webpage", body)


async def read_markdown(url: Optional[str]) -> ToolResult:
    """Return the readable article at *url* as markdown, wrapped in JSON."""

    async def body() -> ToolResult:
        target = _require(url, "url")
        async with open_session() as session:
            result = await markdown_mod.read_markdown(session, target)
        return _ok(result.to_dict())

    return await _guarded("read_webpage_markdown", body)


async def search(query: Optional[str], max_results: Optional[int] = None) -> ToolResult:
    """Return DuckDuckGo results for *query* as a JSON array."""

    async def body() -> ToolResult:
        text = _require(query, "query")
        results = await search_mod.search(text, clamp_max_results(max_results))
        return _ok([item.to_dict() for item in results])

    return await _guarded("duckduckgo_search", body)


# ---------------------------------------------------------------------------
# Tool registry
# ---------------------------------------------------------------------------

_URL_SCHEMA = {
    "type": "object",
    "properties": {
        "url": {"type": "string", "description": "The URL of the webpage to read"}
    },
    "required": ["url"],
}

TOOLS: list[dict[str, Any]] = [
    {
        "name": "read_webpage",
        "description": "Fetches a URL and returns the text, links, and metadata as JSON.",
        "inputSchema": _URL_SCHEMA,
    },
    {
        "name": "read_webpage_markdown",
        "description": (
            "Fetches a URL and returns the full page content converted to "
            "markdown format for detailed overview."
        ),
        "inputSchema": _URL_SCHEMA,
    },
    {
        "name": "duckduckgo_search",
        "description": "Search DuckDuckGo and return URL and title for each result.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "The search query"},
                "maxResults": {
                    "type": "number",
                    "description": "Maximum number of search results to return",
                    "minimum": MIN_SEARCH_RESULTS,
                    "maximum": MAX_SEARCH_RESULTS,
                    "default": settings.ddg_max_results,
                },
            },
            "required": ["query"],
        },
    },
]

_HANDLERS: dict[str, Callable[[dict[str, Any]], Awaitable[ToolResult]]] = {
    "read_webpage": lambda args: read_structured(args.get("url")),
    "read_webpage_markdown": lambda args: read_markdown(args.get("url")),
    "duckduckgo_search": lambda args: search(args.get("query"), args.get("maxResults")),
}


async def call_tool(name: str, arguments: Optional[dict[str, Any]] = None) -> ToolResult:
    """Dispatch a tool call by name.

    Raises:
        KeyError: If no tool called *name* is registered.
    """
    if name not in _HANDLERS:
        raise KeyError(f"Tool not found: {name}")
    return await _HANDLERS[name](arguments or {})
