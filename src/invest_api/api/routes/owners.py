"""Owner endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from invest_api.core.constants import APIConstants
from invest_api.core.deps import DbSession
from invest_api.models.owner import Owner
from invest_api.repositories.owner import OwnerRepository
from invest_api.schemas.owner import OwnerCreate, OwnerResponse, OwnerUpdate
from invest_api.services import owner_service

router = APIRouter()


@router.get("/", response_model=list[OwnerResponse])
async def list_owners(
    db: DbSession,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=APIConstants.MAX_PAGE_SIZE)] = (
        APIConstants.DEFAULT_PAGE_SIZE
    ),
) -> list[Owner]:
    """
    List owners in registration order.

    Args:
        db: Database session
        skip: Number of records to skip (pagination)
        limit: Maximum number of records to return
    """
    repo = OwnerRepository(Owner, db)
    return await repo.get_multi(skip=skip, limit=limit)


@router.get("/{national_id}", response_model=OwnerResponse)
async def get_owner(national_id: str, db: DbSession) -> Owner:
    """
    Get an owner by national ID.

    Raises:
        NotFoundError: If the owner is not registered
    """
    return await owner_service.get_owner(db, national_id)


@router.post("/", response_model=OwnerResponse, status_code=status.HTTP_201_CREATED)
async def create_owner(owner: OwnerCreate, db: DbSession) -> Owner:
    """
    Register an owner.

    Raises:
        ConflictError: If the national ID is already registered
    """
    return await owner_service.create_owner(db, owner)


@router.put("/{national_id}", response_model=OwnerResponse)
async def update_owner(national_id: str, owner_update: OwnerUpdate, db: DbSession) -> Owner:
    """
    Update an owner's name, email or attributes.

    Raises:
        NotFoundError: If the owner is not registered
    """
    return await owner_service.update_owner(db, national_id, owner_update)


@router.delete("/{national_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_owner(national_id: str, db: DbSession) -> None:
    """
    Delete an owner without investments.

    Raises:
        NotFoundError: If the owner is not registered
        ConflictError: If the owner still has investments
    """
    await owner_service.delete_owner(db, national_id)
