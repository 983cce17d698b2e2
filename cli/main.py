"""Web page reader CLI: entry-point for all operations.

Usage:
    python cli/main.py --help

Commands:
    read      → structured summary of a page (JSON)
    markdown  → readable article as markdown (JSON)
    search    → DuckDuckGo results (JSON)
    serve     → run the HTTP API with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from webreader.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
from typing import Optional

import typer

from webreader import operations
from webreader.config import configure_logging, settings
from webreader.operations import ToolResult

app = typer.Typer(
    name="webreader",
    help="Read web pages through a headless browser.",
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    configure_logging()


def _emit(result: ToolResult) -> None:
    """Print the result text; exit 1 when it is an error."""
    if result.is_error:
        typer.echo(result.text, err=True)
        raise typer.Exit(1)
    typer.echo(result.text)


# ---------------------------------------------------------------------------
# Page reads
# ---------------------------------------------------------------------------
@app.command("read")
def read(
    url: str = typer.Argument(..., help="URL of the page to read."),
) -> None:
    """Print the page's title, text, links, images and language as JSON."""
    _emit(asyncio.run(operations.read_structured(url)))


@app.command("markdown")
def markdown(
    url: str = typer.Argument(..., help="URL of the page to read."),
) -> None:
    """Print the page's main article converted to markdown."""
    _emit(asyncio.run(operations.read_markdown(url)))


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
@app.command("search")
def search(
    query: str = typer.Argument(..., help="Search query."),
    max_results: Optional[int] = typer.Option(
        None, "--max-results", "-n", min=1, max=50, help="Maximum number of results."
    ),
) -> None:
    """Search DuckDuckGo and print the results as JSON."""
    _emit(asyncio.run(operations.search(query, max_results)))


# ---------------------------------------------------------------------------
# HTTP server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: $HOST)."),
    port: Optional[int] = typer.Option(None, help="Port (default: $PORT)."),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    bind_host = host or settings.host
    bind_port = port or settings.port
    typer.echo(f"[serve] Listening on http://{bind_host}:{bind_port}")
    uvicorn.run("webreader.api.app:app", host=bind_host, port=bind_port)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
