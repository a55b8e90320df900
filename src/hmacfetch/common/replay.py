"""Seen-signature ledger for rejecting replays inside the freshness window."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Protocol

from hmacfetch.common.settings import Settings
from hmacfetch.signing.digest import decode_signature, encode_signature


class ReplayLedger(Protocol):
    """Records accepted signatures and reports whether one was already seen."""

    def check_and_record(self, signature: str, timestamp_ms: int) -> bool:
        """Return True the first time a (signature, timestamp) pair is seen."""
        ...


def ledger_key(signature: str, timestamp_ms: int) -> str:
    # Re-encode so base64 variants of one digest share a key.
    digest = decode_signature(signature)
    if digest is not None:
        signature = encode_signature(digest)
    return f"{timestamp_ms}:{signature}"


class MemoryReplayLedger:
    """Stores seen signatures in process memory with TTL."""

    def __init__(self, ttl_seconds: float = 600.0, max_entries: int = 100_000):
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._entries: OrderedDict[str, float] = OrderedDict()
        self._lock = threading.Lock()

    def _evict_expired(self, now: float) -> None:
        # Insertion order equals expiry order since the TTL is fixed.
        while self._entries:
            key, expires_at = next(iter(self._entries.items()))
            if expires_at >= now:
                break
            self._entries.popitem(last=False)

    def check_and_record(self, signature: str, timestamp_ms: int) -> bool:
        """Record a signature, returning False if it is a replay."""
        key = ledger_key(signature, timestamp_ms)
        now = time.time()
        with self._lock:
            self._evict_expired(now)
            if key in self._entries:
                return False

            self._entries[key] = now + self._ttl_seconds
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def create_replay_ledger(settings: Settings) -> ReplayLedger | None:
    """Create the ledger selected in settings, or None when disabled."""
    if settings.replay_protection == "memory":
        return MemoryReplayLedger(
            ttl_seconds=settings.replay_ttl_seconds,
            max_entries=settings.replay_max_entries,
        )
    if settings.replay_protection == "sqlite":
        from hmacfetch.common.replay_sqlite import SqliteReplayLedger

        return SqliteReplayLedger(
            settings.replay_sqlite_path,
            ttl_seconds=settings.replay_ttl_seconds,
        )
    return None
