"""Investment schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from invest_api.models.investment import OperationKind
from invest_api.schemas.owner import NATIONAL_ID_PATTERN


def _normalize_operation(value: Any) -> Any:
    """Accept "BUY", " Sell " and friends; the enum itself rejects the rest."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


class InvestmentBase(BaseModel):
    """Base investment schema."""

    national_id: str = Field(..., pattern=NATIONAL_ID_PATTERN)
    category: str = Field(..., min_length=1, max_length=50)
    code: str = Field(..., min_length=1, max_length=20)
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    operation: OperationKind

    @field_validator("operation", mode="before")
    @classmethod
    def normalize_operation(cls, v: Any) -> Any:
        """Lowercase the operation before enum validation."""
        return _normalize_operation(v)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        """Instrument codes are stored trimmed and uppercase."""
        return v.strip().upper()


class InvestmentCreate(InvestmentBase):
    """Schema for creating an investment."""

    pass


class InvestmentUpdate(BaseModel):
    """Schema for updating an investment (partial)."""

    national_id: str | None = Field(None, pattern=NATIONAL_ID_PATTERN)
    category: str | None = Field(None, min_length=1, max_length=50)
    code: str | None = Field(None, min_length=1, max_length=20)
    amount: Decimal | None = Field(None, gt=0, decimal_places=2)
    operation: OperationKind | None = None

    @field_validator("national_id", "category", "code", "amount", "operation")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        """Omit a field to keep it; an explicit null is not a valid value."""
        if v is None:
            raise ValueError("Field cannot be null; omit it to leave it unchanged")
        return v

    @field_validator("operation", mode="before")
    @classmethod
    def normalize_operation(cls, v: Any) -> Any:
        """Lowercase the operation before enum validation."""
        return _normalize_operation(v)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str | None) -> str | None:
        """Instrument codes are stored trimmed and uppercase."""
        return v.strip().upper() if v is not None else v


class InvestmentResponse(InvestmentBase):
    """Schema for investment response."""

    id: UUID
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OwnerBalance(BaseModel):
    """Net balance (buys minus sells) for one owner."""

    national_id: str
    net_balance: Decimal


class CategorySummary(BaseModel):
    """Aggregate figures for one investment category."""

    category: str
    count: int
    net_total: Decimal
    average_amount: Decimal
