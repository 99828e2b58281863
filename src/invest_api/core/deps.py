"""Dependencies for FastAPI routes."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from invest_api.db.session import get_db
from invest_api.services.ticker_cache import TickerCache


def get_ticker_cache(request: Request) -> TickerCache:
    """
    Get the process-wide ticker cache.

    The cache is built once in ``main`` and kept on ``app.state``; tests
    override this dependency to inject a cache backed by a temporary file.

    Args:
        request: Incoming request (gives access to the application)

    Returns:
        The shared TickerCache instance
    """
    return request.app.state.ticker_cache


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
TickerCacheDep = Annotated[TickerCache, Depends(get_ticker_cache)]
