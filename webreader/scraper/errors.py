"""Tagged error taxonomy for the scraper pipeline.

Every failure is raised as one of the :class:`ScraperError` subclasses at the
point where it happens.  Raw Playwright errors are converted by
:func:`renderer_errors`, so retry decisions further up only ever look at the
exception type:

    TransientRendererError     renderer torn down mid-operation; retryable
    TerminalNavigationError    no response, HTTP >= 400, browser error page
    NavigationTimeoutError     deadline expired (a terminal navigation error)
    ExtractionFailedError      no usable article content
    InputInvalidError          a required parameter is missing
    ResourceUnavailableError   the browser could not be started
"""

from __future__ import annotations

import enum
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

if TYPE_CHECKING:
    from webreader.scraper.models import RetryState

# Symptoms of the renderer tearing down concurrently with extraction,
# typically from a page's own redirect or unload script.
_TEARDOWN_MARKERS = (
    "frame was detached",
    "execution context was destroyed",
    "target closed",
    "has been closed",
)


class ErrorKind(str, enum.Enum):
    TRANSIENT_RENDERER = "transient_renderer"
    TERMINAL_HTTP = "terminal_http"
    EXTRACTION_FAILED = "extraction_failed"
    INPUT_INVALID = "input_invalid"
    RESOURCE_UNAVAILABLE = "resource_unavailable"


class ScraperError(Exception):
    """Base class for every classified scraper failure."""

    kind: ErrorKind
    # Set by the resilient navigator on errors it lets escape.
    retry_state: Optional[RetryState] = None

    @property
    def retryable(self) -> bool:
        return self.kind is ErrorKind.TRANSIENT_RENDERER


class TransientRendererError(ScraperError):
    kind = ErrorKind.TRANSIENT_RENDERER


class TerminalNavigationError(ScraperError):
    kind = ErrorKind.TERMINAL_HTTP

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class NavigationTimeoutError(TerminalNavigationError):
    pass


class ExtractionFailedError(ScraperError):
    kind = ErrorKind.EXTRACTION_FAILED


class InputInvalidError(ScraperError):
    kind = ErrorKind.INPUT_INVALID


class ResourceUnavailableError(ScraperError):
    kind = ErrorKind.RESOURCE_UNAVAILABLE


def classify_browser_error(exc: PlaywrightError) -> ScraperError:
    """Map a raw Playwright error onto the tagged taxonomy."""
    message = exc.message
    if isinstance(exc, PlaywrightTimeoutError):
        return NavigationTimeoutError(message)
    lowered = message.lower()
    if any(marker in lowered for marker in _TEARDOWN_MARKERS):
        return TransientRendererError(message)
    return TerminalNavigationError(message)


@contextmanager
def renderer_errors() -> Iterator[None]:
    """Re-raise Playwright errors from the wrapped block as :class:`ScraperError`."""
    try:
        yield
    except PlaywrightError as exc:
        raise classify_browser_error(exc) from exc
