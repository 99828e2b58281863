"""Investment endpoints: CRUD plus filter and aggregate queries."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from invest_api.core.constants import APIConstants, InvestmentQueryConstants
from invest_api.core.deps import DbSession
from invest_api.models.investment import Investment
from invest_api.repositories.investment import InvestmentRepository
from invest_api.schemas.investment import (
    CategorySummary,
    InvestmentCreate,
    InvestmentResponse,
    InvestmentUpdate,
    OwnerBalance,
)
from invest_api.services import investment_service

router = APIRouter()

Skip = Annotated[int, Query(ge=0)]
Limit = Annotated[int, Query(ge=1, le=APIConstants.MAX_PAGE_SIZE)]


@router.get("/", response_model=list[InvestmentResponse])
async def list_investments(
    db: DbSession,
    skip: Skip = 0,
    limit: Limit = APIConstants.DEFAULT_PAGE_SIZE,
) -> list[Investment]:
    """
    List all investments, most recent first.

    Args:
        db: Database session
        skip: Number of records to skip (pagination)
        limit: Maximum number of records to return
    """
    repo = InvestmentRepository(Investment, db)
    return await repo.get_all(skip=skip, limit=limit)


@router.post("/", response_model=InvestmentResponse, status_code=status.HTTP_201_CREATED)
async def create_investment(
    investment: InvestmentCreate,
    db: DbSession,
) -> Investment:
    """
    Record a buy or sell.

    The owner is created automatically when the national ID is new.

    Example:
        POST /api/v1/investments/
        {
            "national_id": "12345678901",
            "category": "Stock",
            "code": "PETR4",
            "amount": "1000.50",
            "operation": "buy"
        }
    """
    return await investment_service.create_investment(db, investment)


@router.get("/recent", response_model=list[InvestmentResponse])
async def list_recent_investments(
    db: DbSession,
    days: Annotated[
        int, Query(ge=0, le=InvestmentQueryConstants.MAX_RECENT_DAYS)
    ] = InvestmentQueryConstants.DEFAULT_RECENT_DAYS,
) -> list[Investment]:
    """List investments created within the last ``days`` days (default 30)."""
    repo = InvestmentRepository(Investment, db)
    return await repo.get_recent(days)


@router.get("/summary/by-category", response_model=list[CategorySummary])
async def summarize_by_category(db: DbSession) -> list[dict]:
    """Count, net total (buys minus sells) and average amount per category."""
    repo = InvestmentRepository(Investment, db)
    return await repo.get_summary_by_category()


@router.get("/owners/national-ids", response_model=list[str])
async def list_owner_national_ids(db: DbSession) -> list[str]:
    """Distinct national IDs of owners holding investments, sorted ascending."""
    repo = InvestmentRepository(Investment, db)
    return await repo.get_owner_national_ids()


@router.get("/owner/{national_id}", response_model=list[InvestmentResponse])
async def list_investments_by_owner(
    national_id: str,
    db: DbSession,
    skip: Skip = 0,
    limit: Limit = APIConstants.DEFAULT_PAGE_SIZE,
) -> list[Investment]:
    """List one owner's investments, most recent first."""
    repo = InvestmentRepository(Investment, db)
    return await repo.get_by_national_id(national_id, skip=skip, limit=limit)


@router.get("/balance/{national_id}", response_model=OwnerBalance)
async def get_owner_balance(national_id: str, db: DbSession) -> OwnerBalance:
    """
    Net balance for an owner: sum of buys minus sum of sells.

    Raises:
        NotFoundError: If the owner is not registered
    """
    balance = await investment_service.get_net_balance(db, national_id)
    return OwnerBalance(national_id=national_id, net_balance=balance)


@router.get("/category/{category}", response_model=list[InvestmentResponse])
async def list_investments_by_category(category: str, db: DbSession) -> list[Investment]:
    """List investments of one category (case-insensitive)."""
    repo = InvestmentRepository(Investment, db)
    return await repo.get_by_category(category)


@router.get("/operation/{operation}", response_model=list[InvestmentResponse])
async def list_investments_by_operation(operation: str, db: DbSession) -> list[Investment]:
    """List investments with one operation, "buy" or "sell" (case-insensitive)."""
    repo = InvestmentRepository(Investment, db)
    return await repo.get_by_operation(operation)


@router.get("/{investment_id}", response_model=InvestmentResponse)
async def get_investment(investment_id: UUID, db: DbSession) -> Investment:
    """
    Get a specific investment.

    Raises:
        NotFoundError: If the investment does not exist
    """
    return await investment_service.get_investment(db, investment_id)


@router.put("/{investment_id}", response_model=InvestmentResponse)
async def update_investment(
    investment_id: UUID,
    investment_update: InvestmentUpdate,
    db: DbSession,
) -> Investment:
    """
    Update an investment (partial).

    Raises:
        NotFoundError: If the investment does not exist
    """
    return await investment_service.update_investment(db, investment_id, investment_update)


@router.delete("/{investment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_investment(investment_id: UUID, db: DbSession) -> None:
    """
    Delete an investment.

    Raises:
        NotFoundError: If the investment does not exist
    """
    await investment_service.delete_investment(db, investment_id)
