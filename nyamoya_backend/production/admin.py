# production/admin.py

from django.contrib import admin

from production.models import BatchIngredient, ProductionBatch


class BatchIngredientInline(admin.TabularInline):
    model = BatchIngredient
    extra = 0
    can_delete = False
    readonly_fields = ("position", "material", "quantity", "unit_cost_at_time_of_use", "line_cost")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(ProductionBatch)
class ProductionBatchAdmin(admin.ModelAdmin):
    list_display = ("batch_number", "product", "quantity_produced", "total_cost", "unit_cost", "created_at")
    list_filter = ("product", "created_at")
    search_fields = ("batch_number", "product__name")
    inlines = [BatchIngredientInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
