"""Tests for health check endpoints and request middleware."""

from pathlib import Path

import pytest
from httpx import AsyncClient

from invest_api.services.ticker_cache import TickerCache

pytestmark = pytest.mark.integration


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_database_health(client: AsyncClient) -> None:
    response = await client.get("/health/db")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}


async def test_ticker_health_before_load(client: AsyncClient) -> None:
    """The health check reports state without loading the cache."""
    response = await client.get("/health/tickers")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "not_loaded"
    assert data["tickers"]["loads"] == 0


async def test_ticker_health_after_load(client: AsyncClient, ticker_cache: TickerCache) -> None:
    await ticker_cache.list_all()

    response = await client.get("/health/tickers")
    data = response.json()
    assert data["status"] == "healthy"
    assert data["tickers"]["count"] == 3


async def test_ticker_health_degraded_on_fallback(client: AsyncClient, ticker_csv: Path, ticker_cache: TickerCache) -> None:
    """Serving the built-in list is reported as degraded."""
    ticker_csv.unlink()
    await ticker_cache.force_reload()

    response = await client.get("/health/tickers")
    data = response.json()
    assert data["status"] == "degraded"
    assert data["tickers"]["source"] == "fallback"


async def test_middleware_adds_headers(client: AsyncClient) -> None:
    """API responses carry timing and request ID headers."""
    response = await client.get("/api/v1/market/tickers")

    assert float(response.headers["X-Process-Time"]) >= 0
    assert response.headers["X-Request-ID"]


async def test_middleware_echoes_request_id(client: AsyncClient) -> None:
    response = await client.get("/api/v1/market/tickers", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"
