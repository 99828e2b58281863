"""Repository layer for database operations.

Repositories centralize database access so services and routes never build
queries themselves.

Repositories:
    - BaseRepository: Generic CRUD operations for any model
    - OwnerRepository: Lookups by national ID
    - InvestmentRepository: Filters and aggregates over investments

Usage:
    >>> from invest_api.repositories import InvestmentRepository
    >>> from invest_api.models.investment import Investment
    >>>
    >>> repo = InvestmentRepository(Investment, db)
    >>> balance = await repo.get_net_balance("12345678901")
"""

from invest_api.repositories.base import BaseRepository
from invest_api.repositories.investment import InvestmentRepository
from invest_api.repositories.owner import OwnerRepository

__all__ = [
    "BaseRepository",
    "OwnerRepository",
    "InvestmentRepository",
]
