"""Centralized exception hierarchy and handlers for the application.

Every service and route raises exceptions from this hierarchy instead of
building HTTP responses by hand. A single handler registered in ``main``
turns them into JSON bodies with the matching status code.

Exception Hierarchy:
    AppException (500, unexpected persistence or internal failure)
    ├── ValidationError (400)
    ├── NotFoundError (404)
    ├── ConflictError (409)
    └── ExternalAPIError (503, transport failure talking to a third party)
        └── UpstreamStatusError (502, third party answered with non-success)

Usage in Services:
    from invest_api.core.exceptions import ConflictError

    if await owner_repo.has_investments(owner.id):
        raise ConflictError("Owner still has investments")

Response Format:
    {
        "detail": "User-facing error message",
        "error_code": "MACHINE_READABLE_CODE",
        "upstream_status": 500  # only for UpstreamStatusError
    }
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Base exception class for all application errors.

    Attributes:
        status_code: HTTP status code for this error type
        detail: User-facing error message
        error_code: Machine-readable error code (optional)
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"
    error_code: str | None = "INTERNAL_ERROR"

    def __init__(
        self,
        detail: str | None = None,
        *,
        error_code: str | None = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            detail: Custom error message (overrides class default)
            error_code: Machine-readable error identifier
        """
        self.detail = detail or self.__class__.detail
        self.error_code = error_code or self.__class__.error_code
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, Any]:
        """Build the JSON body returned to the client."""
        body: dict[str, Any] = {"detail": self.detail}
        if self.error_code:
            body["error_code"] = self.error_code
        return body


class ValidationError(AppException):
    """
    Raised when input validation fails outside of request-body parsing.

    Used for malformed path parameters (postal codes, national IDs) and
    business rule violations. Maps to HTTP 400 Bad Request.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Validation error"
    error_code = "VALIDATION_ERROR"


class NotFoundError(AppException):
    """
    Raised when a requested resource is not found.

    Maps to HTTP 404 Not Found.
    """

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Resource not found"
    error_code = "NOT_FOUND"


class ConflictError(AppException):
    """
    Raised when an operation conflicts with the current state.

    Used for duplicate national IDs and for deleting owners that still
    have investments. Maps to HTTP 409 Conflict.
    """

    status_code = status.HTTP_409_CONFLICT
    detail = "Resource conflict"
    error_code = "CONFLICT"


class ExternalAPIError(AppException):
    """
    Raised when a third-party API cannot be reached.

    Maps to HTTP 503 Service Unavailable.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "External service unavailable"
    error_code = "EXTERNAL_API_ERROR"


class UpstreamStatusError(ExternalAPIError):
    """
    Raised when a third-party API answers with a non-success status.

    The upstream status is relayed in the response body. Maps to
    HTTP 502 Bad Gateway.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "External service returned an error"
    error_code = "UPSTREAM_ERROR"

    def __init__(
        self,
        detail: str | None = None,
        *,
        upstream_status: int,
        error_code: str | None = None,
    ) -> None:
        self.upstream_status = upstream_status
        super().__init__(detail, error_code=error_code)

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["upstream_status"] = self.upstream_status
        return body


async def app_exception_handler(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    """
    Handle application exceptions and convert to HTTP responses.

    Args:
        request: FastAPI request object
        exc: The exception instance

    Returns:
        JSONResponse with error details and HTTP status code

    Logging:
        - Server errors (5xx): full stack trace
        - Client errors (4xx): message only
    """
    if exc.status_code >= 500:
        logger.error(
            f"{exc.__class__.__name__}: {exc.detail}",
            exc_info=True,
            extra={
                "status_code": exc.status_code,
                "error_code": exc.error_code,
                "request_path": request.url.path,
            },
        )
    else:
        logger.warning(
            f"{exc.__class__.__name__}: {exc.detail}",
            extra={
                "status_code": exc.status_code,
                "error_code": exc.error_code,
                "request_path": request.url.path,
            },
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )
