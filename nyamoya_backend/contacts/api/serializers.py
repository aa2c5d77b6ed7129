# contacts/api/serializers.py

from rest_framework import serializers

from contacts.models import Customer, Supplier


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "phone",
            "email",
            "location",
            "notes",
            "total_spent",
            "last_purchase_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "total_spent", "last_purchase_at", "created_at", "updated_at"]


class SupplierSerializer(serializers.ModelSerializer):
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)

    class Meta:
        model = Supplier
        fields = ["id", "name", "phone", "category", "notes", "created_at"]
        read_only_fields = ["id", "created_at"]
