# products/api/serializers.py

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """
    Output serializer. current_stock / average_unit_cost are ledger truth.
    """

    stock_value = serializers.DecimalField(max_digits=30, decimal_places=2, read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "price",
            "current_stock",
            "average_unit_cost",
            "stock_value",
            "low_stock_threshold",
            "is_low_stock",
            "version",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=20, decimal_places=4)
    opening_stock = serializers.DecimalField(
        max_digits=18, decimal_places=4, required=False, default=0
    )
    opening_cost = serializers.DecimalField(
        max_digits=24, decimal_places=10, required=False, default=0
    )
    low_stock_threshold = serializers.IntegerField(min_value=0, required=False)


class PriceUpdateSerializer(serializers.Serializer):
    price = serializers.DecimalField(max_digits=20, decimal_places=4)


class DisposeSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=18, decimal_places=4)
    reason = serializers.CharField(max_length=255)
    operation_id = serializers.UUIDField(required=False, allow_null=True)
