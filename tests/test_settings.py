"""Tests for settings and logging setup."""

import logging

import structlog

from hmacfetch.common.logging import get_logger, setup_logging
from hmacfetch.common.settings import Settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.hmac_secret is None
        assert settings.hmac_window_ms == 300_000
        assert settings.auth_mode == "hmac"
        assert settings.replay_protection == "none"
        assert "/health" in settings.auth_exempt_paths

    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("HMACFETCH_HMAC_SECRET", "from-env")
        monkeypatch.setenv("HMACFETCH_HMAC_WINDOW_MS", "30000")
        monkeypatch.setenv("HMACFETCH_REPLAY_PROTECTION", "memory")

        settings = Settings(_env_file=None)

        assert settings.hmac_secret == "from-env"
        assert settings.hmac_window_ms == 30_000
        assert settings.replay_protection == "memory"
        assert settings.replay_ttl_seconds == 60.0


class TestLogging:
    """Tests for structlog setup."""

    def test_setup_logging_json(self, caplog):
        setup_logging(level="DEBUG", json_format=True)
        try:
            with caplog.at_level(logging.INFO):
                get_logger("hmacfetch.test").info("Signed request", method="GET")
        finally:
            structlog.reset_defaults()

        assert '"event": "Signed request"' in caplog.text
        assert '"method": "GET"' in caplog.text
