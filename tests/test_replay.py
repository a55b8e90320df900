"""Tests for replay ledgers."""

import time

from hmacfetch.common.replay import MemoryReplayLedger, create_replay_ledger
from hmacfetch.common.replay_sqlite import SqliteReplayLedger
from hmacfetch.signing.digest import decode_signature, encode_signature


class TestMemoryReplayLedger:
    """Tests for the in-memory ledger."""

    def test_first_sighting_accepted(self):
        ledger = MemoryReplayLedger()
        assert ledger.check_and_record("sig", 1) is True

    def test_repeat_rejected(self):
        ledger = MemoryReplayLedger()
        ledger.check_and_record("sig", 1)
        assert ledger.check_and_record("sig", 1) is False

    def test_keyed_by_signature_and_timestamp(self):
        ledger = MemoryReplayLedger()
        ledger.check_and_record("sig", 1)
        assert ledger.check_and_record("sig", 2) is True
        assert ledger.check_and_record("other", 1) is True

    def test_base64_variants_share_key(self):
        """Signatures decoding to the same digest are one entry."""
        ledger = MemoryReplayLedger()
        digest = bytes(31) + b"\x01"
        canonical = encode_signature(digest)
        variant = canonical[:-2] + "F="
        assert decode_signature(variant) == digest

        assert ledger.check_and_record(canonical, 1) is True
        assert ledger.check_and_record(variant, 1) is False

    def test_expired_entries_evicted(self):
        ledger = MemoryReplayLedger(ttl_seconds=0.05)
        ledger.check_and_record("sig", 1)

        time.sleep(0.1)

        assert ledger.check_and_record("sig", 1) is True

    def test_max_entries_bound(self):
        ledger = MemoryReplayLedger(max_entries=2)
        for i in range(5):
            ledger.check_and_record(f"sig-{i}", i)

        assert len(ledger) == 2


class TestSqliteReplayLedger:
    """Tests for the SQLite ledger."""

    def test_repeat_rejected(self, tmp_path):
        ledger = SqliteReplayLedger(str(tmp_path / "replay.sqlite"))

        assert ledger.check_and_record("sig", 1) is True
        assert ledger.check_and_record("sig", 1) is False
        ledger.close()

    def test_shared_across_instances(self, tmp_path):
        path = str(tmp_path / "nested" / "replay.sqlite")
        first = SqliteReplayLedger(path)
        second = SqliteReplayLedger(path)

        assert first.check_and_record("sig", 1) is True
        assert second.check_and_record("sig", 1) is False
        first.close()
        second.close()

    def test_expired_entries_removed(self, tmp_path):
        ledger = SqliteReplayLedger(str(tmp_path / "replay.sqlite"), ttl_seconds=0.05)
        ledger.check_and_record("sig", 1)

        time.sleep(0.1)

        assert ledger.check_and_record("sig", 1) is True
        ledger.close()


class TestCreateReplayLedger:
    """Tests for building a ledger from settings."""

    def test_disabled(self, settings):
        assert create_replay_ledger(settings) is None

    def test_memory(self, settings):
        settings = settings.model_copy(update={"replay_protection": "memory"})
        assert isinstance(create_replay_ledger(settings), MemoryReplayLedger)

    def test_sqlite(self, settings, tmp_path):
        settings = settings.model_copy(
            update={
                "replay_protection": "sqlite",
                "replay_sqlite_path": str(tmp_path / "replay.sqlite"),
            }
        )
        ledger = create_replay_ledger(settings)
        assert isinstance(ledger, SqliteReplayLedger)
        ledger.close()

    def test_ttl_covers_both_directions(self, settings):
        assert settings.replay_ttl_seconds == 600.0
