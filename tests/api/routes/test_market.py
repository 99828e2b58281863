"""Tests for ticker and pass-through endpoints."""

from pathlib import Path

import pytest
from httpx import AsyncClient

from invest_api.core.exceptions import ExternalAPIError, UpstreamStatusError
from invest_api.services.ticker_cache import TickerCache

pytestmark = pytest.mark.integration


async def test_list_tickers(client: AsyncClient) -> None:
    """Codes from the CSV are listed sorted."""
    response = await client.get("/api/v1/market/tickers")
    assert response.status_code == 200
    assert response.json() == {"total": 3, "codes": ["ITUB4", "PETR4", "VALE3"]}


@pytest.mark.parametrize("symbol", ["PETR4", "petr4", "PETR4.SA"])
async def test_validate_listed_ticker(client: AsyncClient, symbol: str) -> None:
    """Every spelling of a listed code validates."""
    response = await client.get(f"/api/v1/market/tickers/{symbol}/validate")
    assert response.status_code == 200
    assert response.json() == {"symbol": "PETR4", "is_valid": True}


async def test_validate_unlisted_ticker(client: AsyncClient) -> None:
    response = await client.get("/api/v1/market/tickers/XXXX3/validate")
    assert response.status_code == 200
    assert response.json()["is_valid"] is False


async def test_reload_tickers(client: AsyncClient, ticker_csv: Path, ticker_cache: TickerCache) -> None:
    """A forced reload picks up the new file contents."""
    await ticker_cache.list_all()
    ticker_csv.write_text('"Ticker"\n"WEGE3"\n', encoding="utf-8")

    response = await client.post("/api/v1/market/tickers/reload")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["source"] == str(ticker_csv)

    response = await client.get("/api/v1/market/tickers/WEGE3/validate")
    assert response.json()["is_valid"] is True


async def test_get_stock_quote(client: AsyncClient, mocker) -> None:
    """The provider body is wrapped with the normalized symbol."""
    body = {"results": {"PETR4": {"price": 38.5}}}
    mocker.patch(
        "invest_api.services.market_data_service._get_json",
        return_value=body,
    )

    response = await client.get("/api/v1/market/quotes/petr4")
    assert response.status_code == 200
    data = response.json()
    assert data["query"] == "PETR4"
    assert data["data"] == body
    assert "timestamp" in data


async def test_get_stock_quote_unlisted(client: AsyncClient, mocker) -> None:
    """Unlisted symbols are 404 and never reach the provider."""
    fetch = mocker.patch("invest_api.services.market_data_service._get_json")

    response = await client.get("/api/v1/market/quotes/XXXX3")
    assert response.status_code == 404
    fetch.assert_not_called()


async def test_upstream_status_is_relayed(client: AsyncClient, mocker) -> None:
    """Provider error statuses become 502 with the upstream status."""
    mocker.patch(
        "invest_api.services.market_data_service._get_json",
        side_effect=UpstreamStatusError("HG Brasil returned HTTP 500", upstream_status=500),
    )

    response = await client.get("/api/v1/market/quotes/PETR4")
    assert response.status_code == 502
    assert response.json()["upstream_status"] == 500
    assert response.json()["error_code"] == "UPSTREAM_ERROR"


async def test_unreachable_provider_is_503(client: AsyncClient, mocker) -> None:
    mocker.patch(
        "invest_api.services.market_data_service._get_json",
        side_effect=ExternalAPIError("ViaCEP is unavailable"),
    )

    response = await client.get("/api/v1/market/addresses/01310-100")
    assert response.status_code == 503


async def test_get_address(client: AsyncClient, mocker) -> None:
    body = {"cep": "01310-100", "logradouro": "Avenida Paulista"}
    mocker.patch("invest_api.services.market_data_service._get_json", return_value=body)

    response = await client.get("/api/v1/market/addresses/01310-100")
    assert response.status_code == 200
    assert response.json()["query"] == "01310100"
    assert response.json()["data"] == body


async def test_get_address_malformed(client: AsyncClient) -> None:
    """Malformed postal codes are a 400."""
    response = await client.get("/api/v1/market/addresses/123")
    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


async def test_get_address_unknown(client: AsyncClient, mocker) -> None:
    mocker.patch(
        "invest_api.services.market_data_service._get_json",
        return_value={"erro": True},
    )

    response = await client.get("/api/v1/market/addresses/99999999")
    assert response.status_code == 404


async def test_get_crypto_price(client: AsyncClient, mocker) -> None:
    body = {"bitcoin": {"usd": 67000.0}}
    fetch = mocker.patch("invest_api.services.market_data_service._get_json", return_value=body)

    response = await client.get("/api/v1/market/crypto/bitcoin", params={"vs_currency": "usd"})
    assert response.status_code == 200
    assert response.json()["data"] == body
    assert fetch.call_args.kwargs["params"] == {"ids": "bitcoin", "vs_currencies": "usd"}


async def test_get_crypto_price_defaults_to_brl(client: AsyncClient, mocker) -> None:
    fetch = mocker.patch(
        "invest_api.services.market_data_service._get_json",
        return_value={"bitcoin": {"brl": 350000.0}},
    )

    response = await client.get("/api/v1/market/crypto/bitcoin")
    assert response.status_code == 200
    assert fetch.call_args.kwargs["params"]["vs_currencies"] == "brl"


async def test_reload_is_rate_limited(client: AsyncClient) -> None:
    """The reload endpoint allows RELOAD_RATE_LIMIT calls per minute."""
    for _ in range(5):
        response = await client.post("/api/v1/market/tickers/reload")
        assert response.status_code == 200

    response = await client.post("/api/v1/market/tickers/reload")
    assert response.status_code == 429
    data = response.json()
    assert data["error_code"] == "RATE_LIMITED"
    assert data["retry_after"] == 60
    assert response.headers["Retry-After"] == "60"
