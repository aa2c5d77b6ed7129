# materials/api/serializers.py

from rest_framework import serializers

from materials.models import MaterialReceipt, RawMaterial


class RawMaterialSerializer(serializers.ModelSerializer):
    """
    Output serializer. Stock and cost are service-managed (read-only).
    """

    stock_value = serializers.DecimalField(max_digits=30, decimal_places=2, read_only=True)

    class Meta:
        model = RawMaterial
        fields = [
            "id",
            "name",
            "unit",
            "current_stock",
            "average_cost",
            "stock_value",
            "version",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RawMaterialCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    unit = serializers.CharField(max_length=32)
    opening_stock = serializers.DecimalField(
        max_digits=18, decimal_places=4, required=False, default=0
    )
    opening_cost = serializers.DecimalField(
        max_digits=24, decimal_places=10, required=False, default=0
    )


class RawMaterialUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    unit = serializers.CharField(max_length=32, required=False)


class RestockSerializer(serializers.Serializer):
    quantity_received = serializers.DecimalField(max_digits=18, decimal_places=4)
    unit_purchase_price = serializers.DecimalField(max_digits=24, decimal_places=10)
    supplier_id = serializers.UUIDField(required=False, allow_null=True)
    operation_id = serializers.UUIDField(required=False, allow_null=True)


class MaterialReceiptSerializer(serializers.ModelSerializer):
    material_name = serializers.CharField(source="material.name", read_only=True)
    supplier_name = serializers.CharField(source="supplier.name", read_only=True, default=None)
    performed_by = serializers.CharField(source="performed_by.email", read_only=True, default=None)

    class Meta:
        model = MaterialReceipt
        fields = [
            "id",
            "material",
            "material_name",
            "quantity",
            "unit_price",
            "total_cost",
            "average_cost_before",
            "average_cost_after",
            "stock_after",
            "supplier",
            "supplier_name",
            "expense",
            "operation_id",
            "performed_by",
            "created_at",
        ]
        read_only_fields = fields
