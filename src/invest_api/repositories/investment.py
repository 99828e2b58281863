"""Investment repository: filters, sorting and aggregate queries."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy import case, func, select

from invest_api.models.investment import Investment, OperationKind
from invest_api.models.owner import Owner
from invest_api.repositories.base import BaseRepository

# Buys count positive, sells negative
_SIGNED_AMOUNT = case(
    (Investment.operation == OperationKind.BUY.value, Investment.amount),
    else_=-Investment.amount,
)


class InvestmentRepository(BaseRepository[Investment]):
    """Repository for Investment model.

    Every list query is ordered by ``created_at`` descending (most recent
    first). Aggregates are computed by the database.

    Example:
        >>> repo = InvestmentRepository(Investment, db)
        >>> investments = await repo.get_by_national_id("12345678901")
    """

    def _newest_first(self):
        return select(Investment).order_by(Investment.created_at.desc())

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[Investment]:
        """Get all investments, most recent first.

        Args:
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return
        """
        result = await self.db.execute(self._newest_first().offset(skip).limit(limit))
        return list(result.scalars().all())

    async def get_by_national_id(
        self,
        national_id: str,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Investment]:
        """Get investments owned by the person with the given national ID."""
        result = await self.db.execute(
            self._newest_first()
            .where(Investment.owner.has(Owner.national_id == national_id))
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_category(self, category: str) -> list[Investment]:
        """Get investments whose category matches, ignoring case."""
        result = await self.db.execute(
            self._newest_first().where(func.lower(Investment.category) == category.lower())
        )
        return list(result.scalars().all())

    async def get_by_operation(self, operation: str) -> list[Investment]:
        """Get investments whose operation matches, ignoring case.

        Unknown operations simply match nothing.
        """
        result = await self.db.execute(
            self._newest_first().where(func.lower(Investment.operation) == operation.lower())
        )
        return list(result.scalars().all())

    async def get_recent(self, days: int = 30) -> list[Investment]:
        """Get investments created within the last ``days`` days.

        Args:
            days: Size of the window, counted back from now (UTC)
        """
        cutoff = datetime.now(UTC) - timedelta(days=days)
        result = await self.db.execute(
            self._newest_first().where(Investment.created_at >= cutoff)
        )
        return list(result.scalars().all())

    async def get_net_balance(self, national_id: str) -> Decimal:
        """Sum of buy amounts minus sum of sell amounts for one owner.

        Returns:
            The net balance; ``Decimal("0")`` when the owner has no investments
        """
        result = await self.db.execute(
            select(func.coalesce(func.sum(_SIGNED_AMOUNT), 0))
            .select_from(Investment)
            .join(Owner, Investment.owner_id == Owner.id)
            .where(Owner.national_id == national_id)
        )
        return _to_decimal(result.scalar())

    async def get_summary_by_category(self) -> list[dict[str, Any]]:
        """Count, net total and average amount per category.

        Returns:
            One dict per category, ordered by category name, with keys
            ``category``, ``count``, ``net_total`` and ``average_amount``

        Note:
            ``average_amount`` averages the raw amounts regardless of the
            operation, so it equals total amount / count.
        """
        result = await self.db.execute(
            select(
                Investment.category,
                func.count(Investment.id),
                func.sum(_SIGNED_AMOUNT),
                func.avg(Investment.amount),
            )
            .group_by(Investment.category)
            .order_by(Investment.category)
        )
        return [
            {
                "category": category,
                "count": count,
                "net_total": _to_decimal(net_total),
                "average_amount": _to_decimal(average),
            }
            for category, count, net_total, average in result.all()
        ]

    async def get_owner_national_ids(self) -> list[str]:
        """Distinct national IDs of owners that hold at least one investment, sorted."""
        result = await self.db.execute(
            select(Owner.national_id)
            .join(Investment, Investment.owner_id == Owner.id)
            .distinct()
            .order_by(Owner.national_id)
        )
        return list(result.scalars().all())


def _to_decimal(value: Any) -> Decimal:
    """Normalize driver aggregate output (Decimal, float, int or None) to 2 places."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(Decimal("0.01"))
