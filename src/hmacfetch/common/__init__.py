"""Common utilities for hmac-fetch."""

from hmacfetch.common.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
