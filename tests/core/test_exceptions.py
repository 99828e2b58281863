"""Tests for the exception hierarchy and rate limit helpers."""

import pytest

from invest_api.core.exceptions import (
    AppException,
    ConflictError,
    ExternalAPIError,
    NotFoundError,
    UpstreamStatusError,
    ValidationError,
)
from invest_api.core.rate_limit import _retry_after_seconds

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "exc_class, status_code, error_code",
    [
        (AppException, 500, "INTERNAL_ERROR"),
        (ValidationError, 400, "VALIDATION_ERROR"),
        (NotFoundError, 404, "NOT_FOUND"),
        (ConflictError, 409, "CONFLICT"),
        (ExternalAPIError, 503, "EXTERNAL_API_ERROR"),
    ],
)
def test_exception_status_codes(exc_class, status_code: int, error_code: str) -> None:
    exc = exc_class("boom")

    assert exc.status_code == status_code
    assert exc.to_dict() == {"detail": "boom", "error_code": error_code}


def test_default_detail() -> None:
    assert NotFoundError().detail == "Resource not found"


def test_upstream_status_error_body() -> None:
    exc = UpstreamStatusError("CoinGecko returned HTTP 429", upstream_status=429)

    assert isinstance(exc, ExternalAPIError)
    assert exc.status_code == 502
    assert exc.to_dict() == {
        "detail": "CoinGecko returned HTTP 429",
        "error_code": "UPSTREAM_ERROR",
        "upstream_status": 429,
    }


@pytest.mark.parametrize(
    "detail, expected",
    [
        ("30 per 1 minute", 60),
        ("5 per 1 hour", 3600),
        ("10 per 2 second", 2),
        ("something else", 60),
    ],
)
def test_retry_after_seconds(detail: str, expected: int) -> None:
    assert _retry_after_seconds(detail) == expected
