# sales/admin.py

from django.contrib import admin

from sales.models import Sale, SaleItem


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "position",
        "product",
        "product_name",
        "quantity",
        "unit_price_at_sale",
        "cost_per_unit_at_sale",
        "line_total",
        "line_cost",
    )

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "customer_name",
        "payment_method",
        "total_amount",
        "is_total_overridden",
        "total_cost",
        "created_at",
    )
    list_filter = ("payment_method", "is_total_overridden", "created_at")
    search_fields = ("customer_name", "id")
    inlines = [SaleItemInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
