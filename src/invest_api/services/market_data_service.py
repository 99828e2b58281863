"""Pass-through calls to third-party market and address APIs.

Each function forwards one parameter to a public HTTP API and returns the
decoded JSON body unchanged. Responses are never cached and failed calls are
never retried.

Sources:
- HG Brasil (https://hgbrasil.com/status/finance): B3 stock quotes
- ViaCEP (https://viacep.com.br): Brazilian postal code (CEP) lookup
- CoinGecko (https://www.coingecko.com/en/api): cryptocurrency prices

Error Mapping:
- Non-success HTTP status -> UpstreamStatusError (502) carrying the status
- Timeout / connection failure / invalid JSON -> ExternalAPIError (503)
"""

import logging
import re
from typing import Any

import httpx

from invest_api.core.config import settings
from invest_api.core.constants import MarketConstants
from invest_api.core.exceptions import (
    ExternalAPIError,
    NotFoundError,
    UpstreamStatusError,
    ValidationError,
)
from invest_api.services.ticker_cache import TickerCache, normalize_code

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
_COIN_ID_RE = re.compile(r"^[a-z0-9-]{1,64}$")


async def _get_json(url: str, *, service: str, params: dict[str, str] | None = None) -> Any:
    """GET ``url`` and decode the JSON body.

    Args:
        url: Absolute endpoint URL
        service: Human-readable provider name used in errors and logs
        params: Optional query parameters

    Raises:
        UpstreamStatusError: If the provider answers with a non-2xx status
        ExternalAPIError: If the provider cannot be reached or returns bad JSON
    """
    try:
        async with httpx.AsyncClient(timeout=settings.EXTERNAL_API_TIMEOUT) as client:
            response = await client.get(url, params=params)
    except httpx.HTTPError as e:
        logger.error(f"{service} request failed: {e}")
        raise ExternalAPIError(f"{service} is unavailable: {e}") from e

    if not response.is_success:
        logger.warning(f"{service} returned HTTP {response.status_code} for {url}")
        raise UpstreamStatusError(
            f"{service} returned HTTP {response.status_code}",
            upstream_status=response.status_code,
        )

    try:
        return response.json()
    except ValueError as e:
        logger.error(f"{service} returned a non-JSON body: {e}")
        raise ExternalAPIError(f"{service} returned an invalid response") from e


async def fetch_stock_quote(symbol: str, ticker_cache: TickerCache) -> tuple[str, Any]:
    """Fetch the current quote for a B3 ticker from HG Brasil.

    The symbol must be in the reference ticker set first.

    Returns:
        Tuple of (normalized symbol, provider JSON body)

    Raises:
        NotFoundError: If the symbol is not a listed B3 ticker
    """
    code = normalize_code(symbol)
    if not await ticker_cache.is_valid(code):
        raise NotFoundError(
            f"Ticker {code or symbol!r} is not listed on B3; "
            "see /api/v1/market/tickers for valid codes"
        )

    data = await _get_json(
        settings.QUOTE_API_URL,
        service="HG Brasil",
        params={"key": settings.HG_BRASIL_API_KEY, "symbol": code},
    )
    return code, data


def normalize_postal_code(postal_code: str) -> str:
    """Strip punctuation from a CEP and check it has 8 digits.

    Example:
        >>> normalize_postal_code("01310-100")
        '01310100'

    Raises:
        ValidationError: If the result is not exactly 8 digits
    """
    digits = _NON_DIGITS.sub("", postal_code)
    if len(digits) != 8:
        raise ValidationError(f"Postal code must have 8 digits, got {postal_code!r}")
    return digits


async def fetch_address(postal_code: str) -> tuple[str, Any]:
    """Look up a Brazilian address by postal code on ViaCEP.

    Returns:
        Tuple of (normalized postal code, provider JSON body)

    Raises:
        ValidationError: If the postal code is malformed
        NotFoundError: If ViaCEP reports the postal code does not exist
    """
    cep = normalize_postal_code(postal_code)
    data = await _get_json(f"{settings.ADDRESS_API_URL}/{cep}/json/", service="ViaCEP")

    # ViaCEP answers 200 with {"erro": true} for well-formed unknown codes
    if isinstance(data, dict) and data.get("erro"):
        raise NotFoundError(f"Postal code {cep} not found")
    return cep, data


async def fetch_crypto_price(
    coin_id: str,
    vs_currency: str = MarketConstants.DEFAULT_CRYPTO_CURRENCY,
) -> tuple[str, Any]:
    """Fetch the spot price of a cryptocurrency from CoinGecko.

    Args:
        coin_id: CoinGecko coin identifier (e.g. "bitcoin")
        vs_currency: Quote currency (e.g. "brl", "usd")

    Returns:
        Tuple of (normalized coin id, provider JSON body)

    Raises:
        ValidationError: If the coin id is not a CoinGecko-style slug
        NotFoundError: If CoinGecko knows no such coin
    """
    coin = coin_id.strip().lower()
    currency = vs_currency.strip().lower()
    if not _COIN_ID_RE.match(coin):
        raise ValidationError(f"Invalid coin id {coin_id!r}")

    data = await _get_json(
        settings.CRYPTO_API_URL,
        service="CoinGecko",
        params={"ids": coin, "vs_currencies": currency},
    )

    # CoinGecko answers {} for unknown ids
    if isinstance(data, dict) and coin not in data:
        raise NotFoundError(f"Cryptocurrency {coin!r} not found")
    return coin, data
