"""Configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hmacfetch.signing.constants import DEFAULT_WINDOW_MS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HMACFETCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # HMAC
    hmac_secret: str | None = Field(
        default=None,
        description="Shared secret used to sign and verify requests",
    )
    hmac_window_ms: int = Field(
        default=DEFAULT_WINDOW_MS,
        description="Max distance (ms) between signing time and verification time, either direction",
    )

    # Auth
    auth_mode: Literal["none", "hmac"] = Field(
        default="hmac",
        description="Authentication mode for inbound requests",
    )
    auth_exempt_paths: tuple[str, ...] = Field(
        default=("/health", "/metrics"),
        description="Paths exempt from HMAC auth",
    )

    # Replay protection
    replay_protection: Literal["none", "memory", "sqlite"] = Field(
        default="none",
        description="Ledger used to reject replays of an accepted signature",
    )
    replay_sqlite_path: str = Field(
        default="data/replay.sqlite",
        description="SQLite path for the replay ledger",
    )
    replay_max_entries: int = Field(
        default=100_000,
        description="Max entries for the in-memory replay ledger",
    )

    @property
    def replay_ttl_seconds(self) -> float:
        """Ledger entries must outlive the whole acceptance window (both directions)."""
        return 2 * self.hmac_window_ms / 1000.0


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
