"""Pytest configuration and fixtures."""

import pytest

from hmacfetch.common.settings import Settings
from hmacfetch.signing.request import SignableRequest

SECRET = b"test-shared-secret"
SIGNED_AT_MS = 1_700_000_000_000


@pytest.fixture
def secret() -> bytes:
    """Shared secret for tests."""
    return SECRET


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        hmac_secret=SECRET.decode("utf-8"),
        auth_mode="hmac",
        replay_protection="none",
        _env_file=None,
    )


@pytest.fixture
def post_request() -> SignableRequest:
    """A request with a JSON body."""
    return SignableRequest.build(
        "POST",
        "https://api.example.com/v1/orders?dry_run=1",
        {"Content-Type": "application/json"},
        b'{"item": "widget", "qty": 3}',
    )


@pytest.fixture
def get_request() -> SignableRequest:
    """A request without a body."""
    return SignableRequest.build("GET", "https://api.example.com/v1/orders")


@pytest.fixture
def signed_at_ms() -> int:
    """Fixed signing time in epoch milliseconds."""
    return SIGNED_AT_MS
