"""Logging middleware for HTTP requests and responses."""

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses with timing metrics.

    For every request it:
    - logs method, path and client on the way in
    - logs status code and duration on the way out (WARNING for 4xx/5xx)
    - sets ``X-Process-Time`` and ``X-Request-ID`` response headers

    Health checks and API documentation are passed through without logging.
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self._quiet_paths = {"/health", "/docs", "/openapi.json", "/redoc"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log the request, run the handler, log the response."""
        if request.url.path in self._quiet_paths:
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        client_host = request.client.host if request.client else "unknown"
        logger.info(f"→ [{request_id}] {request.method} {request.url.path} from {client_host}")

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"← [{request_id}] {request.method} {request.url.path} - "
            f"{response.status_code} ({duration:.3f}s)",
        )

        response.headers["X-Process-Time"] = f"{duration:.3f}"
        response.headers["X-Request-ID"] = request_id
        return response
