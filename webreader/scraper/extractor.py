"""Structured extraction: samples a loaded page into a :class:`StructuredSnapshot`."""

from __future__ import annotations

from typing import Any

from webreader.scraper.errors import renderer_errors
from webreader.scraper.models import ImageRef, LinkRef, Session, StructuredSnapshot

# ---------------------------------------------------------------------------
# In-page sampler
# ---------------------------------------------------------------------------

# Runs inside the page so hrefs/srcs come back resolved against the final URL.
_SAMPLE_PAGE_JS = """
([maxLinks, maxImages]) => ({
  title: document.title,
  text: document.body ? document.body.innerText.trim() : "",
  links: [...document.querySelectorAll("a")].slice(0, maxLinks).map(a => ({
    href: a.href,
    text: (a.textContent || "").trim()
  })),
  images: [...document.querySelectorAll("img")].slice(0, maxImages).map(img => ({
    src: img.src,
    alt: img.alt || null
  })),
  language: document.documentElement.lang || ""
})
"""


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _build_snapshot(
    url: str, payload: dict[str, Any], max_links: int, max_images: int
) -> StructuredSnapshot:
    """Normalise the raw in-page payload.

    Both lists are hard-capped again here; anything past the cap is dropped.
    """
    links = tuple(
        LinkRef(href=item.get("href") or "", text=(item.get("text") or "").strip())
        for item in (payload.get("links") or [])[:max_links]
    )
    images = tuple(
        ImageRef(src=item.get("src") or "", alt=item.get("alt") or None)
        for item in (payload.get("images") or [])[:max_images]
    )
    return StructuredSnapshot(
        url=url,
        title=payload.get("title") or "",
        text=(payload.get("text") or "").strip(),
        links=links,
        images=images,
        language=payload.get("language") or "unknown",
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def extract_structured(
    session: Session, url: str, max_links: int, max_images: int
) -> StructuredSnapshot:
    """Load *url* and sample its title, text, links, images and language.

    Waits for the network to go idle.  There is no retry: a navigation
    failure or timeout is raised straight away.

    Raises:
        NavigationTimeoutError: If the page does not settle in time.
        TerminalNavigationError: For any other navigation failure.
    """
    page = await session.new_page()
    with renderer_errors():
        await page.goto(
            url, wait_until="networkidle", timeout=session.navigation_timeout_ms
        )
        payload = await page.evaluate(_SAMPLE_PAGE_JS, [max_links, max_images])
    return _build_snapshot(url, payload, max_links, max_images)
