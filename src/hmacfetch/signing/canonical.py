"""Canonical message construction shared by signer and verifier."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hmacfetch.signing.constants import CONTENT_TYPE_HEADER, TIMESTAMP_HEADER

if TYPE_CHECKING:
    from hmacfetch.signing.request import SignableRequest

_SEPARATOR = b"\r\n"


def build_canonical_message(
    method: str | None,
    url: str | None,
    content_type: str | None,
    timestamp: str | None,
    body: bytes | None,
) -> bytes:
    """
    Build the bytes covered by the HMAC.

    The four text fields are always present, each followed by CRLF, with
    missing values written as empty strings. Body bytes are appended raw
    when the request has a body, even an empty one.

    Args:
        method: HTTP method
        url: Full request URL
        content_type: Content-Type header value
        timestamp: Decimal epoch milliseconds as carried in the header
        body: Request body, or None when the request has none

    Returns:
        Canonical message bytes
    """
    parts = [
        (method or "").encode("utf-8"),
        (url or "").encode("utf-8"),
        (content_type or "").encode("utf-8"),
        (timestamp or "").encode("utf-8"),
    ]
    message = _SEPARATOR.join(parts) + _SEPARATOR
    if body is not None:
        message += bytes(body)
    return message


def canonical_message_for(request: SignableRequest) -> bytes:
    """Build the canonical message from a request's current fields."""
    return build_canonical_message(
        request.method,
        request.url,
        request.headers.get(CONTENT_TYPE_HEADER),
        request.headers.get(TIMESTAMP_HEADER),
        request.body,
    )
