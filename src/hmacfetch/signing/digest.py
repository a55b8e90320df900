"""HMAC-SHA256 digest primitive."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac

Secret = bytes | bytearray | str


def _key_bytes(secret: Secret) -> bytes:
    if isinstance(secret, str):
        return secret.encode("utf-8")
    if isinstance(secret, (bytes, bytearray)):
        return bytes(secret)
    raise TypeError(f"HMAC secret must be str or bytes, not {type(secret).__name__}")


def compute_digest(secret: Secret, message: bytes) -> bytes:
    """Return the raw HMAC-SHA256 digest of a message."""
    return hmac.new(_key_bytes(secret), message, hashlib.sha256).digest()


def encode_signature(digest: bytes) -> str:
    """Encode a digest for transport in a header."""
    return base64.b64encode(digest).decode("ascii")


def decode_signature(value: str) -> bytes | None:
    """Decode a header signature, returning None when it is not valid base64."""
    try:
        return base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError):
        return None


def constant_time_equals(left: bytes, right: bytes) -> bool:
    """Compare two byte strings without leaking where they differ."""
    return hmac.compare_digest(left, right)
