# sales/api/viewsets/sale.py

"""
======================================================
PATH: sales/api/viewsets/sale.py
======================================================
SALE VIEWSET (STAFF)

Purpose:
- Record a sale (cart of finished goods -> immutable Sale + COGS).
- "Sales History": list + retrieve with basic filters.

Filters (list):
- ?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD
- ?customer_id=<uuid>
- ?payment_method=Cash|Bank/Mobile|Credit
======================================================
"""

from __future__ import annotations

from django.utils.dateparse import parse_date
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from costing.api import error_response, uuid_query_param
from costing.exceptions import CostingError
from sales.models import Sale
from sales.serializers.sale import SaleCreateSerializer, SaleSerializer
from sales.services.sale_service import record_sale
from users.permissions import IsStaffMember


class SaleViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = SaleSerializer
    permission_classes = [IsAuthenticated, IsStaffMember]

    def get_queryset(self):
        qs = (
            Sale.objects.select_related("customer", "performed_by")
            .prefetch_related("items")
            .order_by("-created_at")
        )

        params = self.request.query_params

        start = parse_date((params.get("start_date") or "").strip())
        if start:
            qs = qs.filter(created_at__date__gte=start)
        end = parse_date((params.get("end_date") or "").strip())
        if end:
            qs = qs.filter(created_at__date__lte=end)

        customer_id = uuid_query_param(params, "customer_id")
        if customer_id:
            qs = qs.filter(customer_id=customer_id)

        payment_method = (params.get("payment_method") or "").strip()
        if payment_method:
            qs = qs.filter(payment_method=payment_method)

        return qs

    @extend_schema(
        tags=["sales"],
        request=SaleCreateSerializer,
        responses={201: SaleSerializer, 400: dict, 404: dict, 409: dict},
    )
    def create(self, request, *args, **kwargs):
        s = SaleCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            sale = record_sale(
                items=[
                    {
                        "product_id": item["product_id"],
                        "quantity": item["quantity"],
                        "unit_price": item.get("unit_price"),
                    }
                    for item in data["items"]
                ],
                payment_method=data.get("payment_method"),
                customer=data.get("customer_id"),
                customer_name=data.get("customer_name", ""),
                manual_total_override=data.get("manual_total_override"),
                user=request.user,
                operation_id=data.get("operation_id"),
            )
        except CostingError as exc:
            return error_response(exc)

        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)
