"""Session manager: one isolated headless browser per operation.

Each call to :func:`open_session` spawns its own Chromium subprocess and tears
it down on every exit path.  Nothing is pooled or shared between operations.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, nullcontext
from typing import Any, AsyncIterator, Optional

from playwright.async_api import async_playwright

from webreader.config import settings
from webreader.scraper.errors import ResourceUnavailableError
from webreader.scraper.models import Session

logger = logging.getLogger(__name__)

# Sandboxing is disabled: the operator running the service is trusted.
LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

_admission: Optional[asyncio.Semaphore] = None


def _admission_gate() -> Any:
    """Return the process-wide session bound, or a no-op when unbounded."""
    global _admission
    if settings.max_concurrent_sessions <= 0:
        return nullcontext()
    if _admission is None:
        _admission = asyncio.Semaphore(settings.max_concurrent_sessions)
    return _admission


async def _teardown(browser: Any, playwright: Any) -> None:
    if browser is not None:
        try:
            await browser.close()
        except Exception:
            logger.debug("[session] failed to close browser", exc_info=True)
    if playwright is not None:
        try:
            await playwright.stop()
        except Exception:
            logger.debug("[session] failed to stop playwright driver", exc_info=True)


async def acquire_session(user_agent: Optional[str] = None) -> Session:
    """Start a headless browser and open one isolated context in it.

    Raises:
        ResourceUnavailableError: If the driver, the browser or the context
            cannot be started.  Anything already started is torn down first.
    """
    playwright = None
    browser = None
    try:
        playwright = await async_playwright().start()
        browser = await playwright.chromium.launch(headless=True, args=LAUNCH_ARGS)
        context = await browser.new_context(user_agent=user_agent)
    except Exception as exc:
        await _teardown(browser, playwright)
        raise ResourceUnavailableError(f"Could not start browser: {exc}") from exc

    logger.debug("[session] browser started (user_agent=%r)", user_agent)
    return Session(
        playwright=playwright,
        browser=browser,
        context=context,
        navigation_timeout_ms=settings.page_timeout_ms,
        default_timeout_ms=settings.page_timeout_ms,
        user_agent=user_agent,
    )


async def release_session(session: Session) -> None:
    """Close the context and browser, then stop the driver."""
    try:
        await session.context.close()
    except Exception:
        logger.debug("[session] failed to close browser context", exc_info=True)
    await _teardown(session.browser, session.playwright)
    logger.debug("[session] browser released")


@asynccontextmanager
async def open_session(user_agent: Optional[str] = None) -> AsyncIterator[Session]:
    """Acquire a session for the duration of the ``async with`` block.

    The session is released exactly once, whether the block returns or raises.
    """
    async with _admission_gate():
        session = await acquire_session(user_agent)
        try:
            yield session
        finally:
            await release_session(session)
