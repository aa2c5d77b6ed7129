# costing/exceptions.py

"""
COSTING ENGINE ERRORS

Centralized domain errors for every ledger-mutating service.

HTTP mapping lives in costing/api.py (views never invent their own).
"""


class CostingError(Exception):
    """Base exception for all costing engine failures."""


class ValidationError(CostingError):
    """Malformed input. Raised before any document is touched."""


class NotFoundError(CostingError):
    """Referenced material / product / contact does not exist."""


class InsufficientStockError(CostingError):
    """Consumption, sale or wastage would drive on-hand stock below zero."""


class ConcurrencyConflictError(CostingError):
    """A versioned write lost a race and the retry budget is exhausted."""


class StoreUnavailableError(CostingError):
    """The database failed underneath a mutating operation."""
