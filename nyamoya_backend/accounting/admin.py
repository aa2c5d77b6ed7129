# accounting/admin.py

from django.contrib import admin

from accounting.models.expense import Expense

# ============================================================
# EXPENSES
# ============================================================


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = (
        "expense_date",
        "category",
        "description",
        "amount",
        "source",
        "supplier",
        "recorded_by",
    )
    list_filter = ("category", "source", "expense_date")
    search_fields = ("description",)
    readonly_fields = ("source", "created_at")
    ordering = ("-expense_date", "-created_at")

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.source != Expense.Source.MANUAL:
            return False
        return super().has_delete_permission(request, obj)
