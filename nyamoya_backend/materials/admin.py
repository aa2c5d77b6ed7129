# materials/admin.py

from django.contrib import admin

from materials.models import MaterialReceipt, RawMaterial


@admin.register(RawMaterial)
class RawMaterialAdmin(admin.ModelAdmin):
    list_display = ("name", "unit", "current_stock", "average_cost", "is_active", "updated_at")
    list_filter = ("is_active", "unit")
    search_fields = ("name",)
    readonly_fields = ("current_stock", "average_cost", "version", "created_at", "updated_at")


@admin.register(MaterialReceipt)
class MaterialReceiptAdmin(admin.ModelAdmin):
    list_display = ("material", "quantity", "unit_price", "total_cost", "supplier", "created_at")
    list_filter = ("created_at",)
    search_fields = ("material__name", "supplier__name")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
