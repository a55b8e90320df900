"""Protocol constants shared by signer and verifier."""

TIMESTAMP_HEADER = "X-Hmac-Timestamp"
SIGNATURE_HEADER = "X-Hmac-Signature"
CONTENT_TYPE_HEADER = "Content-Type"

# Symmetric: covers both stale timestamps and clock skew into the future.
DEFAULT_WINDOW_MS = 300_000
