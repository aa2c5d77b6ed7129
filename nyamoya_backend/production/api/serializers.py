# production/api/serializers.py

from rest_framework import serializers

from costing.exceptions import CostingError
from costing.valuation import cartons_to_units
from production.models import BatchIngredient, ProductionBatch


class BatchIngredientSerializer(serializers.ModelSerializer):
    material_name = serializers.CharField(source="material.name", read_only=True)
    unit = serializers.CharField(source="material.unit", read_only=True)

    class Meta:
        model = BatchIngredient
        fields = [
            "position",
            "material",
            "material_name",
            "unit",
            "quantity",
            "unit_cost_at_time_of_use",
            "line_cost",
        ]
        read_only_fields = fields


class ProductionBatchSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    performed_by = serializers.CharField(source="performed_by.email", read_only=True, default=None)
    ingredients = BatchIngredientSerializer(many=True, read_only=True)

    class Meta:
        model = ProductionBatch
        fields = [
            "id",
            "batch_number",
            "product",
            "product_name",
            "quantity_produced",
            "total_cost",
            "unit_cost",
            "product_average_before",
            "product_average_after",
            "ingredients",
            "operation_id",
            "performed_by",
            "created_at",
        ]
        read_only_fields = fields


class IngredientInputSerializer(serializers.Serializer):
    material_id = serializers.UUIDField()
    quantity = serializers.DecimalField(max_digits=18, decimal_places=4)


class ProductionCreateSerializer(serializers.Serializer):
    """
    Output is given either as quantity_produced (units) or as cartons plus
    loose units, the way the floor counts it.
    """

    product_id = serializers.UUIDField()
    quantity_produced = serializers.DecimalField(max_digits=18, decimal_places=4, required=False)
    cartons = serializers.IntegerField(min_value=0, required=False)
    loose_units = serializers.IntegerField(min_value=0, required=False)
    batch_number = serializers.CharField(max_length=64, required=False, allow_blank=True)
    ingredients = IngredientInputSerializer(many=True)
    operation_id = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        has_units = attrs.get("quantity_produced") is not None
        has_cartons = attrs.get("cartons") is not None or attrs.get("loose_units") is not None

        if has_units and has_cartons:
            raise serializers.ValidationError(
                "Send either quantity_produced or cartons/loose_units, not both."
            )
        if not has_units and not has_cartons:
            raise serializers.ValidationError("quantity_produced (or cartons) is required.")

        if has_cartons:
            try:
                attrs["quantity_produced"] = cartons_to_units(
                    attrs.pop("cartons", 0), attrs.pop("loose_units", 0)
                )
            except CostingError as exc:
                raise serializers.ValidationError(str(exc))
        return attrs
