# contacts/admin.py

from django.contrib import admin

from contacts.models import Customer, Supplier


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "location", "total_spent", "last_purchase_at")
    search_fields = ("name", "phone", "email")
    readonly_fields = ("total_spent", "last_purchase_at", "created_at", "updated_at")


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "category", "created_at")
    list_filter = ("category",)
    search_fields = ("name", "phone")
