# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for expense entry and report services.

All of them are costing ValidationErrors, so views map them to HTTP 400
through costing.api.error_response().
"""

from costing.exceptions import ValidationError


class AccountingServiceError(ValidationError):
    """Base exception for all accounting service failures."""


class InvalidPeriodError(AccountingServiceError):
    """Raised when a report period cannot be resolved."""


class ExpenseLockedError(AccountingServiceError):
    """Raised when a ledger-generated expense is edited or deleted by hand."""
