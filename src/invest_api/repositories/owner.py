"""Owner repository for owner-specific database operations."""

from uuid import UUID

from sqlalchemy import exists, select

from invest_api.models.investment import Investment
from invest_api.models.owner import Owner
from invest_api.repositories.base import BaseRepository


class OwnerRepository(BaseRepository[Owner]):
    """Repository for Owner model.

    Example:
        >>> repo = OwnerRepository(Owner, db)
        >>> owner = await repo.get_by_national_id("12345678901")
    """

    async def get_by_national_id(self, national_id: str) -> Owner | None:
        """Get owner by national ID.

        Args:
            national_id: 11-digit national ID

        Returns:
            Owner if found, None otherwise
        """
        result = await self.db.execute(select(Owner).where(Owner.national_id == national_id))
        return result.scalar_one_or_none()

    async def exists_by_national_id(self, national_id: str) -> bool:
        """Check if a national ID is already registered."""
        owner = await self.get_by_national_id(national_id)
        return owner is not None

    async def has_investments(self, owner_id: UUID) -> bool:
        """Check whether any investment still references the owner.

        Args:
            owner_id: Owner surrogate key

        Returns:
            True if at least one investment exists for the owner
        """
        result = await self.db.execute(
            select(exists().where(Investment.owner_id == owner_id))
        )
        return bool(result.scalar())
