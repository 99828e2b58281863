"""Reference ticker and third-party pass-through endpoints."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Request

from invest_api.core.config import settings
from invest_api.core.constants import MarketConstants
from invest_api.core.deps import TickerCacheDep
from invest_api.core.rate_limit import limiter
from invest_api.schemas.market import (
    PassThroughResponse,
    TickerListResponse,
    TickerReloadResponse,
    TickerValidationResponse,
)
from invest_api.services import market_data_service
from invest_api.services.ticker_cache import normalize_code

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/tickers", response_model=TickerListResponse)
async def list_tickers(ticker_cache: TickerCacheDep) -> TickerListResponse:
    """List every valid B3 ticker, sorted."""
    codes = sorted(await ticker_cache.list_all())
    return TickerListResponse(total=len(codes), codes=codes)


@router.post("/tickers/reload", response_model=TickerReloadResponse)
@limiter.limit(settings.RELOAD_RATE_LIMIT)
async def reload_tickers(request: Request, ticker_cache: TickerCacheDep) -> TickerReloadResponse:
    """
    Rebuild the ticker set from its source file right away.

    Returns where the new set came from; ``source`` is ``"fallback"`` when
    no CSV could be read.
    """
    result = await ticker_cache.force_reload()
    logger.info(f"Ticker reload requested: {len(result.codes)} codes from {result.source}")
    return TickerReloadResponse(
        total=len(result.codes),
        source=result.source,
        loaded_at=result.loaded_at,
    )


@router.get("/tickers/{symbol}/validate", response_model=TickerValidationResponse)
async def validate_ticker(symbol: str, ticker_cache: TickerCacheDep) -> TickerValidationResponse:
    """Check whether a symbol is a listed B3 ticker ("petr4.sa" is accepted)."""
    return TickerValidationResponse(
        symbol=normalize_code(symbol),
        is_valid=await ticker_cache.is_valid(symbol),
    )


@router.get("/quotes/{symbol}", response_model=PassThroughResponse)
@limiter.limit(settings.EXTERNAL_RATE_LIMIT)
async def get_stock_quote(
    request: Request,
    symbol: str,
    ticker_cache: TickerCacheDep,
) -> PassThroughResponse:
    """
    Current quote for a B3 ticker, relayed from HG Brasil.

    Raises:
        NotFoundError: If the symbol is not a listed ticker
        UpstreamStatusError: If HG Brasil answers with an error status
        ExternalAPIError: If HG Brasil cannot be reached
    """
    code, data = await market_data_service.fetch_stock_quote(symbol, ticker_cache)
    return PassThroughResponse(query=code, data=data, timestamp=datetime.now(UTC))


@router.get("/addresses/{postal_code}", response_model=PassThroughResponse)
@limiter.limit(settings.EXTERNAL_RATE_LIMIT)
async def get_address(request: Request, postal_code: str) -> PassThroughResponse:
    """
    Address for a Brazilian postal code (CEP), relayed from ViaCEP.

    Raises:
        ValidationError: If the postal code does not have 8 digits
        NotFoundError: If ViaCEP does not know the postal code
    """
    cep, data = await market_data_service.fetch_address(postal_code)
    return PassThroughResponse(query=cep, data=data, timestamp=datetime.now(UTC))


@router.get("/crypto/{coin_id}", response_model=PassThroughResponse)
@limiter.limit(settings.EXTERNAL_RATE_LIMIT)
async def get_crypto_price(
    request: Request,
    coin_id: str,
    vs_currency: str = MarketConstants.DEFAULT_CRYPTO_CURRENCY,
) -> PassThroughResponse:
    """
    Spot price of a cryptocurrency, relayed from CoinGecko.

    Raises:
        NotFoundError: If CoinGecko does not know the coin
    """
    coin, data = await market_data_service.fetch_crypto_price(coin_id, vs_currency)
    return PassThroughResponse(query=coin, data=data, timestamp=datetime.now(UTC))
