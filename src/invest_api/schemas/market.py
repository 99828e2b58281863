"""Schemas for reference tickers and third-party pass-through responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class TickerListResponse(BaseModel):
    """All currently valid ticker codes."""

    total: int
    codes: list[str]


class TickerReloadResponse(BaseModel):
    """Outcome of a forced ticker reload."""

    total: int
    source: str
    loaded_at: datetime


class TickerValidationResponse(BaseModel):
    """Whether a symbol is a known ticker."""

    symbol: str
    is_valid: bool


class PassThroughResponse(BaseModel):
    """Third-party body relayed unchanged under ``data``."""

    query: str
    data: Any
    timestamp: datetime
