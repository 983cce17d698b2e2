"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from webreader.config import Settings

_VARS = (
    "PORT",
    "MAX_LINKS",
    "MAX_IMAGES",
    "PAGE_TIMEOUT",
    "DDG_MAX_RESULTS",
    "NAVIGATION_MAX_ATTEMPTS",
    "RETRY_BACKOFF_SECONDS",
    "SEARCH_SELECTOR_TIMEOUT",
    "MAX_CONCURRENT_SESSIONS",
    "LOG_LEVEL",
)


@pytest.fixture()
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        s = Settings()
        assert s.port == 3000
        assert s.max_links == 20
        assert s.max_images == 10
        assert s.page_timeout_ms == 60000
        assert s.ddg_max_results == 10
        assert s.navigation_max_attempts == 3
        assert s.retry_backoff_seconds == 1.0
        assert s.search_selector_timeout_ms == 5000
        assert s.max_concurrent_sessions == 0
        assert s.log_level == "INFO"

    def test_env_overrides(self, clean_env):
        clean_env.setenv("MAX_LINKS", "5")
        clean_env.setenv("PAGE_TIMEOUT", "1500")
        clean_env.setenv("RETRY_BACKOFF_SECONDS", "0.25")
        clean_env.setenv("LOG_LEVEL", "debug")
        s = Settings()
        assert s.max_links == 5
        assert s.page_timeout_ms == 1500
        assert s.retry_backoff_seconds == 0.25
        assert s.log_level == "DEBUG"
