"""Server-side signature verification."""

from __future__ import annotations

import re

from starlette.requests import Request

from hmacfetch.common.logging import get_logger
from hmacfetch.common.metrics import record_verification
from hmacfetch.signing.canonical import canonical_message_for
from hmacfetch.signing.constants import (
    DEFAULT_WINDOW_MS,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
)
from hmacfetch.signing.digest import (
    Secret,
    compute_digest,
    constant_time_equals,
    decode_signature,
)
from hmacfetch.signing.request import SignableRequest
from hmacfetch.signing.signer import current_time_ms

logger = get_logger(__name__)

# Optional sign and at most 20 ASCII digits; int() alone would also take "1_000" or "٣"
# and raises past its digit limit.
_TIMESTAMP_RE = re.compile(r"^\s*[+-]?[0-9]{1,20}\s*$")


class Outcome:
    ACCEPTED = "accepted"
    MISSING_HEADER = "missing_header"
    INVALID_TIMESTAMP = "invalid_timestamp"
    STALE_TIMESTAMP = "stale_timestamp"
    SIGNATURE_MISMATCH = "signature_mismatch"
    REPLAYED = "replayed"


def parse_timestamp(value: str) -> int | None:
    """Parse a base-10 epoch-milliseconds header value."""
    if not _TIMESTAMP_RE.match(value):
        return None
    return int(value)


def check(
    secret: Secret,
    request: SignableRequest,
    *,
    now_ms: int | None = None,
    window_ms: int = DEFAULT_WINDOW_MS,
) -> str:
    """
    Run the verification gates in order and name the first one that fails.

    The outcome is for logs and metrics on the receiving side only.
    """
    signature = request.headers.get(SIGNATURE_HEADER)
    timestamp = request.headers.get(TIMESTAMP_HEADER)
    if not signature or not timestamp:
        return Outcome.MISSING_HEADER

    timestamp_ms = parse_timestamp(timestamp)
    if timestamp_ms is None:
        return Outcome.INVALID_TIMESTAMP

    if now_ms is None:
        now_ms = current_time_ms()
    if abs(now_ms - timestamp_ms) > window_ms:
        return Outcome.STALE_TIMESTAMP

    expected = compute_digest(secret, canonical_message_for(request))
    received = decode_signature(signature)
    if received is None or not constant_time_equals(received, expected):
        return Outcome.SIGNATURE_MISMATCH

    return Outcome.ACCEPTED


def verify(
    secret: Secret,
    request: SignableRequest,
    *,
    now_ms: int | None = None,
    window_ms: int = DEFAULT_WINDOW_MS,
) -> bool:
    """
    Decide whether a request carries a valid, fresh signature.

    Malformed or missing credentials yield False rather than an exception.
    Errors from the digest primitive itself (such as an unusable secret)
    propagate.

    Args:
        secret: Shared secret
        request: Received request
        now_ms: Verification time override (epoch milliseconds)
        window_ms: Max distance between signing and verification time

    Returns:
        True if the signature matches and the timestamp is fresh
    """
    outcome = check(secret, request, now_ms=now_ms, window_ms=window_ms)
    record_verification(outcome)
    if outcome != Outcome.ACCEPTED:
        logger.debug("HMAC verification rejected", reason=outcome, method=request.method)
        return False
    return True


async def verify_request(
    secret: Secret,
    request: Request,
    *,
    now_ms: int | None = None,
    window_ms: int = DEFAULT_WINDOW_MS,
) -> bool:
    """Verify an inbound starlette request, leaving its body readable."""
    signable = await SignableRequest.from_starlette(request)
    return verify(secret, signable, now_ms=now_ms, window_ms=window_ms)
