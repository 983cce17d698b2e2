"""Scraper package: browser sessions, page extraction and search."""

from webreader.scraper.extractor import extract_structured
from webreader.scraper.markdown import read_markdown, transform
from webreader.scraper.models import MarkdownResult, SearchResultItem, StructuredSnapshot
from webreader.scraper.navigator import ResilientNavigator
from webreader.scraper.session import open_session

__all__ = [
    "extract_structured",
    "read_markdown",
    "transform",
    "open_session",
    "ResilientNavigator",
    "StructuredSnapshot",
    "MarkdownResult",
    "SearchResultItem",
]
