"""Pytest fixtures for testing."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from invest_api.core.deps import get_ticker_cache
from invest_api.core.rate_limit import limiter
from invest_api.db.base import Base
from invest_api.db.session import get_db
from invest_api.models.investment import Investment
from invest_api.models.owner import Owner
from invest_api.services.ticker_cache import TickerCache
from main import app

# Test database URL (SQLite in-memory for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TICKER_CSV = '"Ticker","Nome"\n"PETR4","Petrobras PN"\n"VALE3","Vale ON"\n"ITUB4","Itau PN"\n'


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_db(test_engine) -> AsyncGenerator[AsyncSession]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest.fixture
def ticker_csv(tmp_path: Path) -> Path:
    """Write a small ticker CSV in the B3 export format."""
    path = tmp_path / "acoes-listadas-b3.csv"
    path.write_text(TICKER_CSV, encoding="utf-8")
    return path


@pytest.fixture
def ticker_cache(ticker_csv: Path) -> TickerCache:
    """Ticker cache backed by the temporary CSV."""
    return TickerCache(ticker_csv)


@pytest.fixture(autouse=True)
def reset_limiter():
    """Reset rate limiter storage so tests do not share quotas."""
    limiter.reset()
    yield
    limiter.reset()


@pytest_asyncio.fixture(scope="function")
async def client(test_db: AsyncSession, ticker_cache: TickerCache) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database and ticker cache overrides."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ticker_cache] = lambda: ticker_cache

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_owner(test_db: AsyncSession) -> Owner:
    """Create a registered owner without investments."""
    owner = Owner(national_id="12345678901", name="Maria Silva", email="maria@example.com")
    test_db.add(owner)
    await test_db.commit()
    await test_db.refresh(owner)
    return owner


@pytest_asyncio.fixture(scope="function")
async def test_investments(test_db: AsyncSession, test_owner: Owner) -> list[Investment]:
    """Create a buy and a sell for the test owner plus a buy for a second owner."""
    other = Owner(national_id="98765432100")
    test_db.add(other)
    await test_db.flush()

    investments = [
        Investment(
            owner_id=test_owner.id,
            category="Stock",
            code="PETR4",
            amount=Decimal("1000.00"),
            operation="buy",
        ),
        Investment(
            owner_id=test_owner.id,
            category="Stock",
            code="PETR4",
            amount=Decimal("250.50"),
            operation="sell",
        ),
        Investment(
            owner_id=other.id,
            category="Fixed Income",
            code="TESOURO2029",
            amount=Decimal("500.00"),
            operation="buy",
        ),
    ]
    test_db.add_all(investments)
    await test_db.commit()
    for investment in investments:
        await test_db.refresh(investment)
    return investments
