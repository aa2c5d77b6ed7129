# wastage/admin.py

from django.contrib import admin

from wastage.models import WastageEntry


@admin.register(WastageEntry)
class WastageEntryAdmin(admin.ModelAdmin):
    list_display = ("item_name", "item_type", "quantity_lost", "valuation_at_loss", "reason", "created_at")
    list_filter = ("item_type", "created_at")
    search_fields = ("item_name", "reason")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
