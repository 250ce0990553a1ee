"""
HTTP access logging for the quote API.

Each request gets a ``request_id`` (taken from ``x-request-id`` when the
caller sends one) that is bound for every log line emitted while it is
served, including provider and pathfinder logs, and echoed back in the
response headers.
"""

import time
import uuid
from typing import Iterable, Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ..config import settings

logger = structlog.stdlib.get_logger("swapcore.http")

REQUEST_ID_HEADER = "x-request-id"
QUIET_PATHS = ("/healthz",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request; health probes at DEBUG, slow quotes at WARNING."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        slow_request_seconds: Optional[float] = None,
        quiet_paths: Iterable[str] = QUIET_PATHS,
    ) -> None:
        super().__init__(app)
        self.slow_request_seconds = (
            settings.slow_request_seconds if slow_request_seconds is None else slow_request_seconds
        )
        self.quiet_paths = frozenset(quiet_paths)

    def _log_method(self, path: str, status_code: int, duration_s: float):
        if status_code >= 500:
            return logger.error
        if status_code >= 400 or duration_s >= self.slow_request_seconds:
            return logger.warning
        if path in self.quiet_paths:
            return logger.debug
        return logger.info

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            duration_s = time.perf_counter() - started
            log = self._log_method(request.url.path, status_code, duration_s)
            log(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=status_code,
                duration_ms=round(duration_s * 1000, 1),
            )
