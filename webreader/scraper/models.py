"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional

from webreader.scraper.errors import renderer_errors

if TYPE_CHECKING:
    from playwright.async_api import Browser, BrowserContext, Page, Playwright

    from webreader.scraper.errors import ErrorKind, ScraperError


@dataclass
class Session:
    """One isolated, single-use browser execution context.

    Owned by the operation that acquired it and released exactly once via
    :func:`~webreader.scraper.session.release_session`.
    """

    playwright: Playwright
    browser: Browser
    context: BrowserContext
    navigation_timeout_ms: int
    default_timeout_ms: int
    user_agent: Optional[str] = None

    async def new_page(self) -> Page:
        """Open a page in this session's context with both timeouts applied."""
        with renderer_errors():
            page = await self.context.new_page()
        page.set_default_navigation_timeout(self.navigation_timeout_ms)
        page.set_default_timeout(self.default_timeout_ms)
        return page


@dataclass
class NavigationOutcome:
    """Result of directing a page to a URL."""

    url: str
    status: Optional[int]
    ready: bool = False


@dataclass(frozen=True)
class LinkRef:
    href: str
    text: str = ""


@dataclass(frozen=True)
class ImageRef:
    src: str
    alt: Optional[str] = None


@dataclass(frozen=True)
class StructuredSnapshot:
    """Bounded structured summary of one loaded page."""

    url: str
    title: str
    text: str
    links: tuple[LinkRef, ...] = ()
    images: tuple[ImageRef, ...] = ()
    language: str = "unknown"
    scraped_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "text": self.text,
            "links": [{"href": link.href, "text": link.text} for link in self.links],
            "images": [{"src": img.src, "alt": img.alt} for img in self.images],
            "language": self.language,
            "metadata": {"scrapedAt": self.scraped_at.isoformat()},
        }


@dataclass
class ArticleDocument:
    """The primary readable content isolated from a full page."""

    title: str
    excerpt: str
    content: str


@dataclass
class MarkdownResult:
    title: str
    description: str
    markdown: str
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "markdown": self.markdown,
            "url": self.url,
        }


@dataclass(frozen=True)
class SearchResultItem:
    title: str
    url: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url, "description": self.description}


@dataclass
class RetryState:
    """Bookkeeping for one resilient-navigation call."""

    attempt: int = 0
    last_error: Optional[ScraperError] = None
    classification: Optional[ErrorKind] = None
