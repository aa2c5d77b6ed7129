# products/admin.py
"""
Admin rules:
- Products can be created and renamed here.
- Stock, average cost and version are ledger-managed and read-only.
"""

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "price",
        "current_stock",
        "average_unit_cost",
        "low_stock_threshold",
        "is_active",
    )
    list_filter = ("is_active",)
    search_fields = ("name",)
    readonly_fields = ("current_stock", "average_unit_cost", "version", "created_at", "updated_at")
