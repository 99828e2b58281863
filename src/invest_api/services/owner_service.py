"""Service layer for owner operations.

Owners are normally created implicitly by ``get_or_create_owner`` the first
time an investment references an unknown national ID, but they can also be
registered, renamed and removed explicitly.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from invest_api.core.exceptions import AppException, ConflictError, NotFoundError
from invest_api.db.session import transactional
from invest_api.models.owner import Owner
from invest_api.repositories.owner import OwnerRepository
from invest_api.schemas.owner import OwnerCreate, OwnerUpdate

logger = logging.getLogger(__name__)


async def get_owner(db: AsyncSession, national_id: str) -> Owner:
    """Retrieve an owner by national ID.

    Raises:
        NotFoundError: If no owner has this national ID
    """
    owner = await OwnerRepository(Owner, db).get_by_national_id(national_id)
    if owner is None:
        raise NotFoundError(f"Owner with national ID {national_id} not found")
    return owner


async def get_or_create_owner(db: AsyncSession, national_id: str) -> Owner:
    """Find the owner for ``national_id`` or insert a bare one.

    Runs inside the caller's transaction and only flushes; the caller
    commits. Two concurrent requests for the same new national ID can both
    miss the lookup, in which case the second insert fails on the unique
    constraint and surfaces as an ``IntegrityError`` to the caller.

    Args:
        db: Async database session
        national_id: 11-digit national ID

    Returns:
        Existing or newly created (flushed) owner
    """
    repo = OwnerRepository(Owner, db)
    owner = await repo.get_by_national_id(national_id)
    if owner is not None:
        return owner

    owner = await repo.create(obj_in={"national_id": national_id})
    logger.info(f"Created owner {owner.id} for national ID {national_id}")
    return owner


async def create_owner(db: AsyncSession, owner_in: OwnerCreate) -> Owner:
    """Register an owner explicitly.

    Raises:
        ConflictError: If the national ID is already registered
    """
    repo = OwnerRepository(Owner, db)
    if await repo.exists_by_national_id(owner_in.national_id):
        raise ConflictError(f"Owner with national ID {owner_in.national_id} already exists")

    try:
        async with transactional(db):
            owner = await repo.create(obj_in=owner_in)
    except IntegrityError as e:
        raise ConflictError(
            f"Owner with national ID {owner_in.national_id} already exists"
        ) from e
    except SQLAlchemyError as e:
        raise AppException(f"Database error creating owner {owner_in.national_id}: {e}") from e

    logger.info(f"Registered owner {owner.id} ({owner.national_id})")
    return owner


async def update_owner(db: AsyncSession, national_id: str, owner_in: OwnerUpdate) -> Owner:
    """Update an owner's optional fields.

    Raises:
        NotFoundError: If no owner has this national ID
    """
    owner = await get_owner(db, national_id)
    async with transactional(db):
        owner = await OwnerRepository(Owner, db).update(db_obj=owner, obj_in=owner_in)
    return owner


async def delete_owner(db: AsyncSession, national_id: str) -> None:
    """Delete an owner that has no investments.

    Raises:
        NotFoundError: If no owner has this national ID
        ConflictError: If investments still reference the owner
    """
    repo = OwnerRepository(Owner, db)
    owner = await get_owner(db, national_id)

    if await repo.has_investments(owner.id):
        raise ConflictError(
            f"Owner {national_id} still has investments; delete them first"
        )

    async with transactional(db):
        await repo.delete(id=owner.id)
    logger.info(f"Deleted owner {owner.id} ({national_id})")
