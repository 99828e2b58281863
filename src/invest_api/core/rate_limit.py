"""Rate limiting for endpoints that spend third-party API quota."""

import re

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from invest_api.core.config import settings

_SECONDS_PER_UNIT = {"second": 1, "minute": 60, "hour": 3600, "day": 86400}


def _retry_after_seconds(detail: str) -> int:
    """Derive Retry-After from a slowapi detail such as "30 per 1 minute"."""
    match = re.search(r"(\d+)\s+per\s+(\d+)\s+(second|minute|hour|day)", detail)
    if not match:
        return 60
    return int(match.group(2)) * _SECONDS_PER_UNIT[match.group(3)]


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Convert slowapi's exception into the application's error format.

    Args:
        request: The incoming request
        exc: The RateLimitExceeded exception

    Returns:
        429 JSONResponse with ``detail``, ``error_code`` and ``retry_after``
    """
    retry_after = _retry_after_seconds(str(exc.detail))
    response = JSONResponse(
        status_code=429,
        content={
            "detail": f"Rate limit exceeded: {exc.detail}",
            "error_code": "RATE_LIMITED",
            "retry_after": retry_after,
        },
    )
    response.headers["Retry-After"] = str(retry_after)
    return response


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],  # Each endpoint sets its own limit
    enabled=settings.RATE_LIMIT_ENABLED,
    headers_enabled=False,  # Incompatible with FastAPI response models
)
