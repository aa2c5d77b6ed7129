# accounting/api/serializers/expenses.py

from rest_framework import serializers

from accounting.models.expense import Expense


class ExpenseSerializer(serializers.ModelSerializer):
    """
    Output serializer (DB truth) - clean, stable contract.
    """

    supplier_name = serializers.CharField(source="supplier.name", read_only=True, default=None)
    recorded_by = serializers.CharField(source="recorded_by.email", read_only=True, default=None)

    class Meta:
        model = Expense
        fields = [
            "id",
            "description",
            "category",
            "amount",
            "expense_date",
            "source",
            "supplier",
            "supplier_name",
            "recorded_by",
            "created_at",
        ]
        read_only_fields = fields


class ExpenseCreateSerializer(serializers.Serializer):
    """
    Input serializer (Swagger-visible). Manual entries only.
    """

    description = serializers.CharField(max_length=255)
    category = serializers.CharField(max_length=32, required=False, allow_blank=True)
    amount = serializers.DecimalField(max_digits=24, decimal_places=6)
    expense_date = serializers.DateField(required=False, allow_null=True)
    supplier_id = serializers.UUIDField(required=False, allow_null=True)
