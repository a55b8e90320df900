"""Prometheus metrics for signing and verification outcomes."""

from prometheus_client import Counter

# === Counters ===

SIGNATURES_TOTAL = Counter(
    "hmacfetch_signatures_total",
    "Total number of requests signed",
)

VERIFICATIONS_TOTAL = Counter(
    "hmacfetch_verifications_total",
    "Total HMAC verifications",
    # outcome: accepted, missing_header, invalid_timestamp, stale_timestamp,
    # signature_mismatch, replayed
    ["outcome"],
)


# === Helper Functions ===


def record_signature() -> None:
    """Record a signed outbound request."""
    SIGNATURES_TOTAL.inc()


def record_verification(outcome: str) -> None:
    """Record a verification outcome."""
    VERIFICATIONS_TOTAL.labels(outcome=outcome).inc()
