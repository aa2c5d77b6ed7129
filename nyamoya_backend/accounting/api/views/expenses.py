# accounting/api/views/expenses.py

"""
EXPENSES API

GET     /api/accounting/expenses/        staff  list (?category=, ?source=, ?start_date=, ?end_date=)
POST    /api/accounting/expenses/        staff  record a MANUAL expense
DELETE  /api/accounting/expenses/{id}/   admin  delete a MANUAL expense

Restock and wastage expenses appear in the list but are created (and
protected) by their ledgers.
"""

from django.utils.dateparse import parse_date
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.serializers.expenses import ExpenseCreateSerializer, ExpenseSerializer
from accounting.models.expense import Expense
from accounting.services.expense_service import delete_expense, record_expense
from costing.api import error_response
from costing.exceptions import CostingError
from users.permissions import IsAdmin, IsStaffMember


class ExpenseListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsStaffMember]
    serializer_class = ExpenseCreateSerializer

    def get_queryset(self):
        qs = Expense.objects.select_related("supplier", "recorded_by").order_by(
            "-expense_date", "-created_at"
        )
        params = self.request.query_params

        category = (params.get("category") or "").strip()
        if category:
            qs = qs.filter(category=category)

        source = (params.get("source") or "").strip()
        if source:
            qs = qs.filter(source=source)

        start = parse_date((params.get("start_date") or "").strip())
        if start:
            qs = qs.filter(expense_date__gte=start)
        end = parse_date((params.get("end_date") or "").strip())
        if end:
            qs = qs.filter(expense_date__lte=end)
        return qs

    @extend_schema(
        tags=["accounting"],
        responses=ExpenseSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        qs = self.get_queryset()
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(ExpenseSerializer(page, many=True).data)
        return Response(ExpenseSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=ExpenseCreateSerializer,
        responses={201: ExpenseSerializer, 400: dict, 404: dict},
    )
    def post(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            expense = record_expense(
                description=data["description"],
                category=data.get("category"),
                amount=data["amount"],
                expense_date=data.get("expense_date"),
                supplier=data.get("supplier_id"),
                user=request.user,
            )
        except CostingError as exc:
            return error_response(exc)

        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


class ExpenseDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = ExpenseSerializer

    @extend_schema(tags=["accounting"], responses={204: None, 400: dict, 404: dict})
    def delete(self, request, pk, *args, **kwargs):
        try:
            delete_expense(expense=pk, user=request.user)
        except CostingError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
