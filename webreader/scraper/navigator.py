"""Resilient navigation with classified retry.

A page's own redirect or unload script can tear the renderer down while we
are still reading from it.  :class:`ResilientNavigator` wraps a
navigate-then-extract unit of work and retries it, on a fresh page, when that
happens.  Terminal outcomes (no response, HTTP >= 400, a browser error page)
are never retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from playwright.async_api import Page

from webreader.config import settings
from webreader.scraper.errors import (
    ScraperError,
    TerminalNavigationError,
    TransientRendererError,
    renderer_errors,
)
from webreader.scraper.models import NavigationOutcome, RetryState, Session

logger = logging.getLogger(__name__)

T = TypeVar("T")

BROWSER_ERROR_PREFIX = "chrome-error://"


async def navigate(page: Page, url: str, timeout_ms: int) -> NavigationOutcome:
    """Load *url* up to DOM-parsed, validate the response, wait for readyState.

    Raises:
        TerminalNavigationError: No response, HTTP status >= 400, or the
            browser landed on its own error page.
        TransientRendererError: The renderer was torn down mid-navigation.
    """
    with renderer_errors():
        response = await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)

    if response is None:
        raise TerminalNavigationError("No response received from the server")
    if response.status >= 400:
        raise TerminalNavigationError(f"HTTP error: {response.status}", status=response.status)
    if page.url.startswith(BROWSER_ERROR_PREFIX):
        raise TerminalNavigationError("Browser error page loaded", status=response.status)

    with renderer_errors():
        await page.wait_for_function("() => document.readyState === 'complete'")

    return NavigationOutcome(url=page.url, status=response.status, ready=True)


class ResilientNavigator:
    """Runs ``navigate + operation`` with linear backoff on transient errors.

    Args:
        max_attempts: Total attempts, including the first.  On the last one a
            transient error is raised instead of retried.
        backoff_seconds: Base delay; attempt *n* waits ``n * backoff_seconds``
            before attempt *n + 1*.
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
    ) -> None:
        self.max_attempts = max(1, max_attempts or settings.navigation_max_attempts)
        self.backoff_seconds = (
            settings.retry_backoff_seconds if backoff_seconds is None else backoff_seconds
        )

    async def _attempt(
        self, session: Session, url: str, operation: Callable[[Page], Awaitable[T]]
    ) -> T:
        page = await session.new_page()
        try:
            await navigate(page, url, session.navigation_timeout_ms)
            return await operation(page)
        finally:
            try:
                await page.close()
            except Exception:
                logger.debug("[navigator] page already gone for %s", url, exc_info=True)

    async def run(
        self, session: Session, url: str, operation: Callable[[Page], Awaitable[T]]
    ) -> T:
        """Navigate *session* to *url* and return ``await operation(page)``.

        Retry bookkeeping is local to the call; an error that escapes carries
        it as ``exc.retry_state``.
        """
        state = RetryState()
        for attempt in range(1, self.max_attempts + 1):
            state.attempt = attempt
            try:
                return await self._attempt(session, url, operation)
            except TransientRendererError as exc:
                state.last_error = exc
                state.classification = exc.kind
                logger.warning(
                    "[navigator] retry %d/%d for %s after error: %s",
                    attempt,
                    self.max_attempts,
                    url,
                    exc,
                )
                if attempt >= self.max_attempts:
                    exc.retry_state = state
                    raise
                await asyncio.sleep(self.backoff_seconds * attempt)
            except ScraperError as exc:
                state.last_error = exc
                state.classification = exc.kind
                exc.retry_state = state
                raise
        # Unreachable: the loop either returns or raises on its final attempt.
        raise AssertionError("retry loop exited without a result")
