"""Readability extraction and markdown conversion.

``read_markdown`` orchestrates the full pipeline from a URL to a
:class:`MarkdownResult`:

    navigate (with retry) → HTML snapshot → isolate article → markdown
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Optional

import trafilatura
from bs4 import BeautifulSoup
from markdownify import ATX, markdownify
from playwright.async_api import Page
from readability import Document
from readability.readability import Unparseable

from webreader.scraper.errors import ExtractionFailedError, renderer_errors
from webreader.scraper.models import ArticleDocument, MarkdownResult, Session
from webreader.scraper.navigator import ResilientNavigator

logger = logging.getLogger(__name__)

_EXCESS_NEWLINES = re.compile(r"\n{3,}")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _page_description(html: str, url: str) -> str:
    """Return the page's meta/OpenGraph description, or empty string."""
    metadata = trafilatura.extract_metadata(html, default_url=url)
    if metadata is None or not metadata.description:
        return ""
    return metadata.description.strip()


def _first_paragraph(soup: BeautifulSoup) -> str:
    for paragraph in soup.find_all("p"):
        text = " ".join(paragraph.get_text().split())
        if text:
            return text
    return ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def isolate_article(html: str, url: str) -> ArticleDocument:
    """Isolate the primary readable content of *html*.

    Relative links and media inside the article are resolved against *url*.

    Raises:
        ExtractionFailedError: If the document cannot be parsed or the
            selected subtree has no text.
    """
    if not html or not html.strip():
        raise ExtractionFailedError("Could not extract article content")

    doc = Document(html, url=url)
    try:
        content = doc.summary(html_partial=True)
        title = doc.short_title()
    except Unparseable as exc:
        raise ExtractionFailedError("Could not extract article content") from exc

    soup = BeautifulSoup(content or "", "html.parser")
    if not soup.get_text(strip=True):
        raise ExtractionFailedError("Could not extract article content")

    excerpt = _page_description(html, url) or _first_paragraph(soup)
    return ArticleDocument(title=title or "", excerpt=excerpt, content=content)


def to_markdown(article: ArticleDocument, url: str) -> MarkdownResult:
    """Convert *article* to markdown with ``#`` headings and fenced code blocks."""
    markdown = markdownify(article.content, heading_style=ATX, code_language="")
    markdown = _EXCESS_NEWLINES.sub("\n\n", markdown).strip()
    return MarkdownResult(
        title=article.title,
        description=article.excerpt,
        markdown=markdown,
        url=url,
    )


def transform(html: str, url: str) -> MarkdownResult:
    """Turn a full HTML snapshot of *url* into a :class:`MarkdownResult`."""
    return to_markdown(isolate_article(html, url), url)


async def read_markdown(
    session: Session, url: str, navigator: Optional[ResilientNavigator] = None
) -> MarkdownResult:
    """Load *url* through the resilient navigator and return it as markdown."""
    navigator = navigator or ResilientNavigator()

    async def _snapshot_and_transform(page: Page) -> MarkdownResult:
        with renderer_errors():
            html = await page.content()
        return await asyncio.to_thread(transform, html, url)

    result = await navigator.run(session, url, _snapshot_and_transform)
    logger.info("[markdown] %s → %d chars of markdown", url, len(result.markdown))
    return result
