# accounting/api/views/__init__.py

"""
accounting.api.views package

Do NOT import accounting.api.urls from here to avoid circular imports.
"""

from accounting.api.views.balance_sheet import BalanceSheetView
from accounting.api.views.expenses import ExpenseDetailView, ExpenseListCreateView
from accounting.api.views.overview import (
    ExpenseBreakdownView,
    MonthlyReportView,
    RevenueTrendView,
)
from accounting.api.views.profit_and_loss import ProfitAndLossView

__all__ = [
    "BalanceSheetView",
    "ExpenseBreakdownView",
    "ExpenseDetailView",
    "ExpenseListCreateView",
    "MonthlyReportView",
    "ProfitAndLossView",
    "RevenueTrendView",
]
