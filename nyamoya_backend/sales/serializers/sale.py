# sales/serializers/sale.py

from rest_framework import serializers

from costing.valuation import cartons_to_units
from sales.models import Sale, SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    """
    Sale line item serializer (read-only).
    Designed for receipts + UI display.
    """

    class Meta:
        model = SaleItem
        fields = [
            "position",
            "product",
            "product_name",
            "quantity",
            "unit_price_at_sale",
            "cost_per_unit_at_sale",
            "line_total",
            "line_cost",
        ]
        read_only_fields = fields


class SaleSerializer(serializers.ModelSerializer):
    items = SaleItemSerializer(many=True, read_only=True)
    gross_profit = serializers.DecimalField(max_digits=26, decimal_places=2, read_only=True)
    performed_by = serializers.CharField(source="performed_by.email", read_only=True, default=None)

    class Meta:
        model = Sale
        fields = [
            "id",
            "customer",
            "customer_name",
            "payment_method",
            "items",
            "computed_amount",
            "total_amount",
            "is_total_overridden",
            "total_cost",
            "gross_profit",
            "operation_id",
            "performed_by",
            "created_at",
        ]
        read_only_fields = fields


class SaleItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.DecimalField(max_digits=18, decimal_places=4, required=False)
    cartons = serializers.IntegerField(min_value=0, required=False)
    loose_units = serializers.IntegerField(min_value=0, required=False)
    unit_price = serializers.DecimalField(
        max_digits=20, decimal_places=4, required=False, allow_null=True
    )

    def validate(self, attrs):
        has_cartons = attrs.get("cartons") is not None or attrs.get("loose_units") is not None
        if attrs.get("quantity") is not None and has_cartons:
            raise serializers.ValidationError("Send either quantity or cartons/loose_units, not both.")
        if has_cartons:
            attrs["quantity"] = cartons_to_units(attrs.pop("cartons", 0), attrs.pop("loose_units", 0))
        if attrs.get("quantity") is None:
            raise serializers.ValidationError("quantity (or cartons) is required.")
        return attrs


class SaleCreateSerializer(serializers.Serializer):
    items = SaleItemInputSerializer(many=True)
    payment_method = serializers.CharField(required=False, allow_blank=True)
    customer_id = serializers.UUIDField(required=False, allow_null=True)
    customer_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    manual_total_override = serializers.DecimalField(
        max_digits=24, decimal_places=6, required=False, allow_null=True
    )
    operation_id = serializers.UUIDField(required=False, allow_null=True)
