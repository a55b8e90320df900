"""HMAC request signing and verification."""
