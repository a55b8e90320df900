"""Client-side request signing."""

from __future__ import annotations

import json as jsonlib
import time
from typing import Any, Mapping

import aiohttp
from yarl import URL

from hmacfetch.common.logging import get_logger
from hmacfetch.common.metrics import record_signature
from hmacfetch.signing.canonical import canonical_message_for
from hmacfetch.signing.constants import (
    CONTENT_TYPE_HEADER,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
)
from hmacfetch.signing.digest import Secret, compute_digest, encode_signature
from hmacfetch.signing.request import SignableRequest, normalize_url

logger = get_logger(__name__)


def current_time_ms() -> int:
    """Milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def sign(
    secret: Secret,
    request: SignableRequest,
    *,
    timestamp_ms: int | None = None,
) -> SignableRequest:
    """
    Stamp a timestamp and HMAC signature onto a request.

    The timestamp header is written first so that the digest covers it.

    Args:
        secret: Shared secret
        request: Request to sign, modified in place
        timestamp_ms: Signing time override (epoch milliseconds)

    Returns:
        The same request, ready for transmission
    """
    if timestamp_ms is None:
        timestamp_ms = current_time_ms()

    request.headers[TIMESTAMP_HEADER] = str(timestamp_ms)
    digest = compute_digest(secret, canonical_message_for(request))
    request.headers[SIGNATURE_HEADER] = encode_signature(digest)

    record_signature()
    logger.debug("Signed request", method=request.method, url=request.url, timestamp=timestamp_ms)
    return request


def build_request(
    url: str | URL,
    *,
    method: str = "GET",
    headers: Mapping[str, str] | None = None,
    data: bytes | str | None = None,
    json: Any = None,
) -> SignableRequest:
    """
    Build a request the way it will go over the wire.

    Bodies always get an explicit Content-Type so that the signed value is
    the transmitted one and the HTTP client does not add its own default.
    """
    if data is not None and json is not None:
        raise ValueError("data and json parameters can not be used at the same time")

    request = SignableRequest.build(method, str(normalize_url(url)), headers)

    if json is not None:
        request.body = jsonlib.dumps(json).encode("utf-8")
        request.headers.setdefault(CONTENT_TYPE_HEADER, "application/json")
    elif isinstance(data, str):
        request.body = data.encode("utf-8")
        request.headers.setdefault(CONTENT_TYPE_HEADER, "text/plain;charset=UTF-8")
    elif data is not None:
        request.body = bytes(data)
        request.headers.setdefault(CONTENT_TYPE_HEADER, "application/octet-stream")

    return request


async def send(
    request: SignableRequest,
    session: aiohttp.ClientSession,
    timeout: float | None = None,
) -> aiohttp.ClientResponse:
    """Transmit a signed request exactly as it was signed."""
    kwargs: dict[str, Any] = {}
    if timeout is not None:
        kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)
    return await session.request(
        request.method,
        URL(request.url, encoded=True),
        headers=request.headers,
        data=request.body,
        **kwargs,
    )


async def fetch_with_hmac(
    secret: Secret,
    url: str | URL,
    *,
    method: str = "GET",
    headers: Mapping[str, str] | None = None,
    data: bytes | str | None = None,
    json: Any = None,
    session: aiohttp.ClientSession | None = None,
    timeout: float | None = None,
) -> aiohttp.ClientResponse:
    """
    Sign a request and send it.

    When no session is given a one-off session is opened; the response body
    is read before that session closes, so the returned response stays usable.

    Args:
        secret: Shared secret
        url: Target URL
        method: HTTP method
        headers: Extra request headers
        data: Raw body (str is sent as UTF-8 text)
        json: JSON-serializable body
        session: Existing aiohttp session to send through
        timeout: Total timeout in seconds

    Returns:
        The aiohttp response
    """
    request = sign(secret, build_request(url, method=method, headers=headers, data=data, json=json))

    if session is not None:
        return await send(request, session, timeout)

    async with aiohttp.ClientSession() as own_session:
        response = await send(request, own_session, timeout)
        await response.read()
        return response
