"""Health check endpoints."""

from fastapi import APIRouter
from sqlalchemy import text

from invest_api.core.deps import DbSession, TickerCacheDep

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@router.get("/health/db")
async def database_health(db: DbSession):
    """Database connectivity check."""
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        return {"status": "unhealthy", "database": str(e)}


@router.get("/health/tickers")
async def ticker_cache_health(ticker_cache: TickerCacheDep):
    """
    Reference ticker cache status.

    Reports ``degraded`` while the cache serves the hardcoded fallback list.
    Does not trigger a load.
    """
    stats = ticker_cache.stats()
    if not stats["loaded"]:
        return {"status": "not_loaded", "tickers": stats}
    if stats["source"] == "fallback":
        return {"status": "degraded", "tickers": stats}
    return {"status": "healthy", "tickers": stats}
