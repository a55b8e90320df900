"""
hmac-fetch: HMAC-SHA256 request signing for HTTP services.

A sender stamps a timestamp and a keyed digest of the request onto its
headers; a receiver recomputes the digest and checks the timestamp is fresh.
"""

from hmacfetch.signing.canonical import build_canonical_message, canonical_message_for
from hmacfetch.signing.request import SignableRequest
from hmacfetch.signing.signer import fetch_with_hmac, sign
from hmacfetch.signing.verifier import verify, verify_request

__version__ = "1.0.0"

__all__ = [
    "SignableRequest",
    "build_canonical_message",
    "canonical_message_for",
    "fetch_with_hmac",
    "sign",
    "verify",
    "verify_request",
]
