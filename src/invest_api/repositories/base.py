"""Base repository with common CRUD operations.

Provides generic database operations inherited by the owner and
investment repositories. Uses SQLAlchemy 2.0's async API.

Supports both Pydantic models and dictionaries for create/update operations.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invest_api.db.base import Base

# Generic type for SQLAlchemy models
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations.

    Repositories do NOT manage transactions - the caller is responsible
    for commit/rollback.

    Type Parameters:
        ModelType: The SQLAlchemy model class

    Example:
        >>> repo = OwnerRepository(Owner, db)
        >>> owner = await repo.get(owner_id)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        """Initialize repository.

        Args:
            model: The SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def get(self, id: Any) -> ModelType | None:
        """Get a single record by primary key.

        Args:
            id: Primary key value

        Returns:
            Model instance if found, None otherwise
        """
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    async def get_multi(
        self,
        *,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ModelType]:
        """Get multiple records with pagination, oldest first.

        Args:
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return

        Returns:
            List of model instances
        """
        result = await self.db.execute(
            select(self.model)
            .order_by(self.model.created_at)  # type: ignore[attr-defined]
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, *, obj_in: BaseModel | dict[str, Any]) -> ModelType:
        """Create a new record.

        Args:
            obj_in: Pydantic model or dictionary of field names and values

        Returns:
            Created model instance (flushed, not yet committed)

        Note:
            Caller must commit the transaction.
        """
        if isinstance(obj_in, BaseModel):
            create_data = obj_in.model_dump(exclude_unset=True)
        else:
            create_data = obj_in

        db_obj = self.model(**create_data)
        self.db.add(db_obj)
        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        *,
        db_obj: ModelType,
        obj_in: BaseModel | dict[str, Any],
    ) -> ModelType:
        """Update an existing record.

        Args:
            db_obj: Existing model instance to update
            obj_in: Pydantic model or dictionary of fields to update (can be partial)

        Returns:
            Updated model instance (flushed, not yet committed)

        Note:
            Caller must commit the transaction.
        """
        if isinstance(obj_in, BaseModel):
            update_data = obj_in.model_dump(exclude_unset=True)
        else:
            update_data = obj_in

        for field, value in update_data.items():
            setattr(db_obj, field, value)

        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    async def delete(self, *, id: Any) -> ModelType:
        """Delete a record by primary key.

        Args:
            id: Primary key value

        Returns:
            Deleted model instance (not yet committed)

        Raises:
            ValueError: If record not found
        """
        db_obj = await self.get(id)
        if not db_obj:
            raise ValueError(f"{self.model.__name__} with id {id} not found")

        await self.db.delete(db_obj)
        await self.db.flush()
        return db_obj
