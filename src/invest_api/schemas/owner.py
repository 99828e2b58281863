"""Owner schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

NATIONAL_ID_PATTERN = r"^\d{11}$"


class OwnerBase(BaseModel):
    """Fields shared by owner create and response schemas."""

    name: str | None = Field(None, max_length=200)
    email: EmailStr | None = None
    attributes: dict[str, Any] | None = None


class OwnerCreate(OwnerBase):
    """Schema for creating an owner explicitly."""

    national_id: str = Field(..., pattern=NATIONAL_ID_PATTERN, description="11 digits, no punctuation")


class OwnerUpdate(OwnerBase):
    """Schema for updating an owner. The national ID is immutable."""

    pass


class OwnerResponse(OwnerBase):
    """Schema for owner response."""

    id: UUID
    national_id: str
    email: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
