"""Tests for the transactional context manager."""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invest_api.db.session import transactional
from invest_api.models.owner import Owner

pytestmark = pytest.mark.integration


async def test_transactional_commits_on_success(test_db: AsyncSession) -> None:
    """Changes made inside the block are committed on exit."""
    async with transactional(test_db):
        test_db.add(Owner(national_id="22233344455"))

    await test_db.rollback()
    result = await test_db.execute(select(Owner).where(Owner.national_id == "22233344455"))
    assert result.scalar_one_or_none() is not None


async def test_transactional_rolls_back_on_exception(test_db: AsyncSession) -> None:
    """An exception inside the block discards the changes and propagates."""
    with pytest.raises(ValueError):
        async with transactional(test_db):
            test_db.add(Owner(national_id="33344455566"))
            await test_db.flush()
            raise ValueError("Intentional error for testing")

    result = await test_db.execute(select(Owner).where(Owner.national_id == "33344455566"))
    assert result.scalar_one_or_none() is None
