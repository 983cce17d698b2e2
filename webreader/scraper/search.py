"""DuckDuckGo search via the rendered results page.

DuckDuckGo ships two generations of result markup side by side: a "modern"
React layout and a "legacy" HTML layout.  :func:`parse_results` tries the
modern container selector first and only falls back to the legacy one when
the modern selector matches nothing; the two result sets are never merged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional
from urllib.parse import quote, urljoin

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Error as PlaywrightError

from webreader.config import settings
from webreader.scraper.errors import InputInvalidError, renderer_errors
from webreader.scraper.models import SearchResultItem
from webreader.scraper.session import open_session

logger = logging.getLogger(__name__)

SEARCH_BASE_URL = "https://duckduckgo.com/"

# A realistic desktop UA lowers the chance of a bot-check interstitial.
SEARCH_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

MODERN_RESULT = 'article[data-testid="result"]'
MODERN_TITLE = 'a[data-testid="result-title-a"]'
MODERN_SNIPPET = '[data-result-snippet-container="true"]'

LEGACY_RESULT = ".result__body"
LEGACY_TITLE = ".result__a"
LEGACY_SNIPPET = ".result__snippet"


def build_search_url(query: str) -> str:
    """Return the results-page URL for *query* (percent-encoded)."""
    return f"{SEARCH_BASE_URL}?q={quote(query, safe='')}"


def _select_first(container: Tag, *selectors: str) -> Optional[Tag]:
    for selector in selectors:
        found = container.select_one(selector)
        if found is not None:
            return found
    return None


def _parse_item(container: Tag, base_url: str) -> SearchResultItem:
    anchor = _select_first(container, MODERN_TITLE, LEGACY_TITLE)
    snippet = _select_first(container, MODERN_SNIPPET, LEGACY_SNIPPET)

    title = anchor.get_text().strip() if anchor is not None else ""
    href = anchor.get("href") if anchor is not None else None
    return SearchResultItem(
        title=title or "No title",
        url=urljoin(base_url, href) if isinstance(href, str) and href else "",
        description=snippet.get_text().strip() if snippet is not None else "",
    )


def parse_results(html: str, base_url: str, max_results: int) -> list[SearchResultItem]:
    """Extract up to *max_results* results from a rendered results page.

    Args:
        html: The rendered page markup.
        base_url: Final page URL, used to resolve relative result links.
        max_results: Hard cap on the number of items returned.

    Returns:
        Results in page order.  Empty when neither layout is present.
    """
    soup = BeautifulSoup(html, "html.parser")
    containers = soup.select(MODERN_RESULT)
    if not containers:
        containers = soup.select(LEGACY_RESULT)
    return [_parse_item(c, base_url) for c in containers[: max(0, max_results)]]


async def search(query: str, max_results: int) -> list[SearchResultItem]:
    """Search DuckDuckGo for *query* and return up to *max_results* results.

    Raises:
        InputInvalidError: If *query* is empty.  No browser is started.
        TerminalNavigationError: If the results page cannot be loaded.
    """
    if not query or not query.strip():
        raise InputInvalidError("'query' parameter is required")

    search_url = build_search_url(query)
    async with open_session(user_agent=SEARCH_USER_AGENT) as session:
        page = await session.new_page()
        with renderer_errors():
            await page.goto(
                search_url,
                wait_until="networkidle",
                timeout=session.navigation_timeout_ms,
            )
        try:
            await page.wait_for_selector(
                MODERN_RESULT, timeout=settings.search_selector_timeout_ms
            )
        except PlaywrightError as exc:
            # Timeouts and redirect teardown alike fall through to the legacy pass.
            logger.info(
                "[search] modern layout not detected (%s), checking legacy selectors",
                exc.message,
            )
        with renderer_errors():
            html = await page.content()
            final_url = page.url

    results = await asyncio.to_thread(
        parse_results, html, final_url or search_url, max_results
    )
    logger.info("[search] %r → %d result(s)", query, len(results))
    return results
