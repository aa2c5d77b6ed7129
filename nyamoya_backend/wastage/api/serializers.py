# wastage/api/serializers.py

from rest_framework import serializers

from wastage.models import WastageEntry


class WastageEntrySerializer(serializers.ModelSerializer):
    performed_by = serializers.CharField(source="performed_by.email", read_only=True, default=None)

    class Meta:
        model = WastageEntry
        fields = [
            "id",
            "item_type",
            "material",
            "product",
            "item_name",
            "quantity_lost",
            "reason",
            "unit_cost_at_loss",
            "valuation_at_loss",
            "expense",
            "operation_id",
            "performed_by",
            "created_at",
        ]
        read_only_fields = fields


class WastageCreateSerializer(serializers.Serializer):
    item_type = serializers.ChoiceField(choices=WastageEntry.ItemType.choices)
    item_id = serializers.UUIDField()
    quantity = serializers.DecimalField(max_digits=18, decimal_places=4)
    reason = serializers.CharField(max_length=255)
    operation_id = serializers.UUIDField(required=False, allow_null=True)
