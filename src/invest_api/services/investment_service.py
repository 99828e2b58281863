"""Service layer for investment writes and owner-scoped aggregates.

Creating an investment resolves its owner by national ID first, creating
the owner when needed. Both inserts run in one transaction, so a failure
while saving the investment leaves no orphan owner behind.
"""

import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from invest_api.core.exceptions import AppException, ConflictError, NotFoundError
from invest_api.db.session import transactional
from invest_api.models.investment import Investment, OperationKind
from invest_api.models.owner import Owner
from invest_api.repositories.investment import InvestmentRepository
from invest_api.schemas.investment import InvestmentCreate, InvestmentUpdate
from invest_api.services.owner_service import get_or_create_owner, get_owner

logger = logging.getLogger(__name__)


def _to_columns(payload: dict[str, Any]) -> dict[str, Any]:
    """Map schema fields onto model columns (national ID is resolved separately)."""
    columns = {k: v for k, v in payload.items() if k != "national_id"}
    if isinstance(columns.get("operation"), OperationKind):
        columns["operation"] = columns["operation"].value
    return columns


async def _resolve_owner(db: AsyncSession, national_id: str) -> Owner:
    """Find or register the owner, mapping a lost insert race to a conflict."""
    try:
        return await get_or_create_owner(db, national_id)
    except IntegrityError as e:
        raise ConflictError(
            f"Owner {national_id} was registered concurrently; retry the request"
        ) from e


async def get_investment(db: AsyncSession, investment_id: UUID) -> Investment:
    """Retrieve an investment by ID.

    Raises:
        NotFoundError: If the investment does not exist
    """
    investment = await InvestmentRepository(Investment, db).get(investment_id)
    if investment is None:
        raise NotFoundError(f"Investment {investment_id} not found")
    return investment


async def create_investment(db: AsyncSession, investment_in: InvestmentCreate) -> Investment:
    """Create an investment, registering its owner on first use.

    Args:
        db: Async database session
        investment_in: Validated investment data

    Returns:
        The committed investment with its owner loaded

    Raises:
        ConflictError: If another request registered the same new owner concurrently
        AppException: On any other persistence failure (message carries the cause)
    """
    national_id = investment_in.national_id
    repo = InvestmentRepository(Investment, db)

    try:
        async with transactional(db):
            owner = await _resolve_owner(db, national_id)
            columns = _to_columns(investment_in.model_dump())
            columns["owner_id"] = owner.id
            investment = await repo.create(obj_in=columns)
    except SQLAlchemyError as e:
        raise AppException(f"Database error saving investment: {e}") from e

    logger.info(
        f"Created investment {investment.id}: {investment.operation} "
        f"{investment.code} {investment.amount} for {national_id}"
    )
    return investment


async def update_investment(
    db: AsyncSession,
    investment_id: UUID,
    investment_in: InvestmentUpdate,
) -> Investment:
    """Apply a partial update.

    A new ``national_id`` moves the investment to that owner, creating the
    owner if needed.

    Raises:
        NotFoundError: If the investment does not exist
        ConflictError: If another request registered the same new owner concurrently
    """
    investment = await get_investment(db, investment_id)
    update_data = investment_in.model_dump(exclude_unset=True)
    repo = InvestmentRepository(Investment, db)

    try:
        async with transactional(db):
            columns = _to_columns(update_data)
            if update_data.get("national_id"):
                owner = await _resolve_owner(db, update_data["national_id"])
                columns["owner_id"] = owner.id
            investment = await repo.update(db_obj=investment, obj_in=columns)
            await db.refresh(investment, attribute_names=["owner"])
    except SQLAlchemyError as e:
        raise AppException(f"Database error updating investment {investment_id}: {e}") from e

    return investment


async def delete_investment(db: AsyncSession, investment_id: UUID) -> None:
    """Delete an investment.

    Raises:
        NotFoundError: If the investment does not exist
    """
    await get_investment(db, investment_id)
    async with transactional(db):
        await InvestmentRepository(Investment, db).delete(id=investment_id)
    logger.info(f"Deleted investment {investment_id}")


async def get_net_balance(db: AsyncSession, national_id: str) -> Decimal:
    """Net balance (buys minus sells) for a registered owner.

    Raises:
        NotFoundError: If no owner has this national ID
    """
    await get_owner(db, national_id)
    return await InvestmentRepository(Investment, db).get_net_balance(national_id)
