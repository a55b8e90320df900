"""Shared error helpers and codes."""

from __future__ import annotations

from starlette.responses import JSONResponse


class ErrorCode:
    UNAUTHORIZED = "unauthorized"
    SERVER_MISCONFIGURED = "server_misconfigured"


def error_response(
    code: str,
    message: str,
    status_code: int,
) -> JSONResponse:
    """Build the JSON error body shared by every middleware rejection."""
    payload = {
        "error": {
            "code": code,
            "message": message,
        }
    }
    return JSONResponse(payload, status_code=status_code)
