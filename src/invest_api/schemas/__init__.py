"""Schemas package."""

from invest_api.schemas.investment import (
    CategorySummary,
    InvestmentBase,
    InvestmentCreate,
    InvestmentResponse,
    InvestmentUpdate,
    OwnerBalance,
)
from invest_api.schemas.market import (
    PassThroughResponse,
    TickerListResponse,
    TickerReloadResponse,
    TickerValidationResponse,
)
from invest_api.schemas.owner import OwnerBase, OwnerCreate, OwnerResponse, OwnerUpdate

__all__ = [
    # Owner schemas
    "OwnerBase",
    "OwnerCreate",
    "OwnerResponse",
    "OwnerUpdate",
    # Investment schemas
    "InvestmentBase",
    "InvestmentCreate",
    "InvestmentResponse",
    "InvestmentUpdate",
    "OwnerBalance",
    "CategorySummary",
    # Market schemas
    "PassThroughResponse",
    "TickerListResponse",
    "TickerReloadResponse",
    "TickerValidationResponse",
]
