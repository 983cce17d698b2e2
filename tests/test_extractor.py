"""Tests for the structured extractor.

The in-page sampler cannot run without a browser, so the page's
``evaluate`` is mocked to return the payload the sampler would produce.
"""

from __future__ import annotations

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from webreader.scraper.errors import NavigationTimeoutError
from webreader.scraper.extractor import _build_snapshot, extract_structured
from webreader.scraper.models import ImageRef, LinkRef, Session, StructuredSnapshot


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _payload(n_links: int = 3, n_images: int = 2, language: str = "en") -> dict:
    return {
        "title": "Example Domain",
        "text": "  Example body text.  ",
        "links": [
            {"href": f"https://example.com/{i}", "text": f" Link {i} "}
            for i in range(n_links)
        ],
        "images": [
            {"src": f"https://example.com/img{i}.png", "alt": f"Image {i}" if i % 2 == 0 else None}
            for i in range(n_images)
        ],
        "language": language,
    }


def _fake_session(page: MagicMock) -> Session:
    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    return Session(MagicMock(), MagicMock(), context, 60000, 60000)


def _fake_page(payload: dict | None = None) -> MagicMock:
    page = MagicMock()
    page.goto = AsyncMock(return_value=MagicMock(status=200))
    page.evaluate = AsyncMock(return_value=payload if payload is not None else _payload())
    return page


# ---------------------------------------------------------------------------
# _build_snapshot
# ---------------------------------------------------------------------------

class TestBuildSnapshot:
    def test_caps_links_in_document_order(self) -> None:
        snap = _build_snapshot("https://example.com/", _payload(n_links=30), 20, 10)
        assert len(snap.links) == 20
        assert [link.href for link in snap.links] == [
            f"https://example.com/{i}" for i in range(20)
        ]

    def test_caps_images(self) -> None:
        snap = _build_snapshot("https://example.com/", _payload(n_images=15), 20, 10)
        assert len(snap.images) == 10

    def test_fewer_than_cap_kept_as_is(self) -> None:
        snap = _build_snapshot("https://example.com/", _payload(n_links=2), 20, 10)
        assert len(snap.links) == 2

    def test_missing_language_reports_unknown(self) -> None:
        snap = _build_snapshot("https://example.com/", _payload(language=""), 20, 10)
        assert snap.language == "unknown"

    def test_defaults_text_and_alt(self) -> None:
        payload = {
            "title": "T",
            "text": "body",
            "links": [{"href": "https://a.com", "text": None}],
            "images": [{"src": "https://a.com/x.png", "alt": ""}],
            "language": "fr",
        }
        snap = _build_snapshot("https://a.com", payload, 20, 10)
        assert snap.links == (LinkRef(href="https://a.com", text=""),)
        assert snap.images == (ImageRef(src="https://a.com/x.png", alt=None),)
        assert snap.language == "fr"

    def test_trims_text(self) -> None:
        snap = _build_snapshot("https://example.com/", _payload(), 20, 10)
        assert snap.text == "Example body text."
        assert snap.links[0].text == "Link 0"


class TestSnapshotToDict:
    def test_shape(self) -> None:
        snap = _build_snapshot("https://example.com/", _payload(n_links=1, n_images=1), 20, 10)
        data = snap.to_dict()

        assert set(data) == {"url", "title", "text", "links", "images", "language", "metadata"}
        assert data["links"] == [{"href": "https://example.com/0", "text": "Link 0"}]
        assert data["images"] == [{"src": "https://example.com/img0.png", "alt": "Image 0"}]
        # ISO-8601 timestamp that round-trips through fromisoformat
        assert datetime.fromisoformat(data["metadata"]["scrapedAt"]).tzinfo is not None


# ---------------------------------------------------------------------------
# extract_structured
# ---------------------------------------------------------------------------

class TestExtractStructured:
    async def test_waits_for_network_idle(self) -> None:
        page = _fake_page()
        snap = await extract_structured(_fake_session(page), "https://example.com/", 20, 10)

        page.goto.assert_awaited_once_with(
            "https://example.com/", wait_until="networkidle", timeout=60000
        )
        assert isinstance(snap, StructuredSnapshot)
        assert snap.title == "Example Domain"
        assert snap.url == "https://example.com/"

    async def test_passes_limits_to_page(self) -> None:
        page = _fake_page()
        await extract_structured(_fake_session(page), "https://example.com/", 7, 3)
        _, args = page.evaluate.await_args.args
        assert args == [7, 3]

    async def test_caps_even_if_page_returns_more(self) -> None:
        page = _fake_page(_payload(n_links=50))
        snap = await extract_structured(_fake_session(page), "https://example.com/", 20, 10)
        assert len(snap.links) == 20

    async def test_timeout_raises_without_retry(self) -> None:
        page = _fake_page()
        page.goto.side_effect = PlaywrightTimeoutError("Timeout 60000ms exceeded.")

        with pytest.raises(NavigationTimeoutError):
            await extract_structured(_fake_session(page), "https://slow.example.com/", 20, 10)

        assert page.goto.await_count == 1
        page.evaluate.assert_not_awaited()
