"""FastAPI application entry point."""

import logging
import logging.config
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from invest_api.api.routes import health, investments, market, owners
from invest_api.core.config import settings
from invest_api.core.exceptions import AppException, app_exception_handler
from invest_api.core.middleware import RequestLoggingMiddleware
from invest_api.core.rate_limit import limiter, rate_limit_exceeded_handler
from invest_api.db.base import Base
from invest_api.db.session import engine
from invest_api.services.ticker_cache import TickerCache

# Configure logging
logging.config.dictConfig(settings.LOGGING_CONFIG)
logging.getLogger("invest_api").setLevel(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})")

    # Create tables (use Alembic in production)
    if settings.ENVIRONMENT == "development":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    # Warm the ticker cache so the first request does not pay for the CSV parse
    result = await app.state.ticker_cache.force_reload()
    logger.info(f"Ticker cache ready: {len(result.codes)} codes from {result.source}")

    yield

    logger.info("Shutting down application")
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# Add rate limiter and shared ticker cache to app state
app.state.limiter = limiter
app.state.ticker_cache = TickerCache.from_settings(settings)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_CREDENTIALS,
    allow_methods=settings.CORS_METHODS,
    allow_headers=settings.CORS_HEADERS,
)

# Middleware is applied in reverse order, so this is the outermost layer
app.add_middleware(RequestLoggingMiddleware)

# Register exception handlers
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(owners.router, prefix="/api/v1/owners", tags=["owners"])
app.include_router(investments.router, prefix="/api/v1/investments", tags=["investments"])
app.include_router(market.router, prefix="/api/v1/market", tags=["market"])


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
