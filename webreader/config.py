"""Centralised settings for the web page reader.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    host: str = field(default_factory=lambda: os.environ.get("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", "3000")))

    # ------------------------------------------------------------------
    # Structured read
    # ------------------------------------------------------------------
    max_links: int = field(
        default_factory=lambda: int(os.environ.get("MAX_LINKS", "20"))
    )
    max_images: int = field(
        default_factory=lambda: int(os.environ.get("MAX_IMAGES", "10"))
    )

    # ------------------------------------------------------------------
    # Browser sessions
    # ------------------------------------------------------------------
    page_timeout_ms: int = field(
        default_factory=lambda: int(os.environ.get("PAGE_TIMEOUT", "60000"))
    )
    # 0 means unbounded: every operation launches its own browser at once.
    max_concurrent_sessions: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONCURRENT_SESSIONS", "0"))
    )

    # ------------------------------------------------------------------
    # Resilient navigation
    # ------------------------------------------------------------------
    navigation_max_attempts: int = field(
        default_factory=lambda: int(os.environ.get("NAVIGATION_MAX_ATTEMPTS", "3"))
    )
    retry_backoff_seconds: float = field(
        default_factory=lambda: float(os.environ.get("RETRY_BACKOFF_SECONDS", "1.0"))
    )

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    ddg_max_results: int = field(
        default_factory=lambda: int(os.environ.get("DDG_MAX_RESULTS", "10"))
    )
    search_selector_timeout_ms: int = field(
        default_factory=lambda: int(os.environ.get("SEARCH_SELECTOR_TIMEOUT", "5000"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


def configure_logging() -> None:
    """Apply ``settings.log_level`` to the root logger."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


# Module-level singleton, import this everywhere:
#   from webreader.config import settings
settings = Settings()
