"""SQLite-backed replay ledger for cross-process safety."""

from __future__ import annotations

import sqlite3
import threading
import time
from pathlib import Path

from hmacfetch.common.replay import ledger_key


class SqliteReplayLedger:
    """SQLite ledger with TTL for seen signatures."""

    def __init__(self, path: str, ttl_seconds: float = 600.0) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._ttl_seconds = ttl_seconds
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS seen_signatures ("
            "key TEXT PRIMARY KEY,"
            "expires_at REAL NOT NULL"
            ")"
        )
        self._conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_seen_expires ON seen_signatures (expires_at)"
        )
        self._conn.commit()

    def _cleanup(self, now: float) -> None:
        self._conn.execute("DELETE FROM seen_signatures WHERE expires_at < ?", (now,))

    def check_and_record(self, signature: str, timestamp_ms: int) -> bool:
        """Record a signature, returning False if it is a replay."""
        now = time.time()
        with self._lock:
            self._cleanup(now)
            cursor = self._conn.execute(
                "INSERT OR IGNORE INTO seen_signatures (key, expires_at) VALUES (?, ?)",
                (ledger_key(signature, timestamp_ms), now + self._ttl_seconds),
            )
            self._conn.commit()
            return cursor.rowcount == 1

    def close(self) -> None:
        self._conn.close()
