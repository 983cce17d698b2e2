"""FastAPI application factory.

Routers
-------
All endpoint groups are mounted under their respective path prefix:

    /tools    : tool registry and tool-call envelope
    /read     : structured and markdown page reads
    /search   : DuckDuckGo search

Every request is served independently: each one opens and closes its own
browser session, and no connection-level state is kept on the app.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from webreader.api.routers import pages as pages_router
from webreader.api.routers import search as search_router
from webreader.api.routers import tools as tools_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Web Page Reader",
        description=(
            "Reads web pages through a headless browser and returns them as "
            "structured JSON or readable markdown, and scrapes DuckDuckGo "
            "search results."
        ),
        version="1.0.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tools_router.router, prefix="/tools", tags=["tools"])
    app.include_router(pages_router.router, prefix="/read", tags=["read"])
    app.include_router(search_router.router, prefix="/search", tags=["search"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn webreader.api.app:app --reload
app = create_app()
