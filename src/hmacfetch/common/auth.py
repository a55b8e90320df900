"""HMAC authentication middleware for inbound requests."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from hmacfetch.common.errors import ErrorCode, error_response
from hmacfetch.common.logging import get_logger
from hmacfetch.common.metrics import record_verification
from hmacfetch.common.replay import ReplayLedger, create_replay_ledger
from hmacfetch.common.settings import Settings
from hmacfetch.signing.constants import SIGNATURE_HEADER, TIMESTAMP_HEADER
from hmacfetch.signing.verifier import Outcome, parse_timestamp, verify_request

logger = get_logger(__name__)


class HmacAuthMiddleware(BaseHTTPMiddleware):
    """Reject requests that do not carry a valid, fresh HMAC signature."""

    def __init__(
        self,
        app: ASGIApp,
        settings: Settings,
        replay_ledger: ReplayLedger | None = None,
    ) -> None:
        super().__init__(app)
        self._settings = settings
        self._exempt_paths = set(settings.auth_exempt_paths)
        if replay_ledger is None:
            replay_ledger = create_replay_ledger(settings)
        self._replay_ledger = replay_ledger

    def _unauthorized(self) -> Response:
        # Same response for every rejection reason.
        return error_response(ErrorCode.UNAUTHORIZED, "Invalid HMAC credentials", 401)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._settings.auth_mode != "hmac":
            return await call_next(request)

        if request.url.path in self._exempt_paths:
            return await call_next(request)

        secret = self._settings.hmac_secret
        if not secret:
            logger.error("HMAC secret not configured")
            return error_response(
                ErrorCode.SERVER_MISCONFIGURED,
                "HMAC secret not configured",
                500,
            )

        if not await verify_request(secret, request, window_ms=self._settings.hmac_window_ms):
            return self._unauthorized()

        timestamp_ms = parse_timestamp(request.headers[TIMESTAMP_HEADER])
        if self._replay_ledger is not None and not self._replay_ledger.check_and_record(
            request.headers[SIGNATURE_HEADER], timestamp_ms
        ):
            record_verification(Outcome.REPLAYED)
            logger.warning("Replayed HMAC signature rejected", path=request.url.path)
            return self._unauthorized()

        request.state.hmac_timestamp = timestamp_ms
        return await call_next(request)
