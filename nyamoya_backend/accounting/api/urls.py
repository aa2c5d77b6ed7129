# accounting/api/urls.py

from django.urls import path

from accounting.api.views import (
    BalanceSheetView,
    ExpenseBreakdownView,
    ExpenseDetailView,
    ExpenseListCreateView,
    MonthlyReportView,
    ProfitAndLossView,
    RevenueTrendView,
)

urlpatterns = [
    # Reports
    path("profit-and-loss/", ProfitAndLossView.as_view(), name="profit-and-loss"),
    path("balance-sheet/", BalanceSheetView.as_view(), name="balance-sheet"),
    path("revenue-trend/", RevenueTrendView.as_view(), name="revenue-trend"),
    path("expense-breakdown/", ExpenseBreakdownView.as_view(), name="expense-breakdown"),
    path("monthly-report/", MonthlyReportView.as_view(), name="monthly-report"),
    # Expenses
    path("expenses/", ExpenseListCreateView.as_view(), name="expenses"),
    path("expenses/<int:pk>/", ExpenseDetailView.as_view(), name="expense-detail"),
]
