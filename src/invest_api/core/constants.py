"""Application-wide constants.

Groups the magic numbers used by routes and queries so behavior can be
tuned in one place.
"""


class APIConstants:
    """Constants for API behavior, limits, and defaults."""

    # Pagination defaults for list endpoints
    DEFAULT_PAGE_SIZE = 100
    MAX_PAGE_SIZE = 1000


class InvestmentQueryConstants:
    """Constants for investment filters."""

    # "Recent" means created within this many days unless the caller says otherwise
    DEFAULT_RECENT_DAYS = 30
    MAX_RECENT_DAYS = 3650


class MarketConstants:
    """Constants for the reference ticker and pass-through endpoints."""

    # Quote currency used for crypto prices when none is given
    DEFAULT_CRYPTO_CURRENCY = "brl"
