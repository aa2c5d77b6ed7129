# production/api/views.py

"""
PRODUCTION ENDPOINTS

GET   /api/production/batches/          staff  production log (?product_id=)
GET   /api/production/batches/{id}/     staff  batch detail with ingredient snapshots
POST  /api/production/batches/          staff  record a production run
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from costing.api import error_response, uuid_query_param
from costing.exceptions import CostingError
from production.api.serializers import ProductionBatchSerializer, ProductionCreateSerializer
from production.models import ProductionBatch
from production.services.batch_processor import record_production
from users.permissions import IsStaffMember


class ProductionBatchViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = ProductionBatchSerializer
    permission_classes = [IsAuthenticated, IsStaffMember]

    def get_queryset(self):
        qs = (
            ProductionBatch.objects.select_related("product", "performed_by")
            .prefetch_related("ingredients__material")
            .order_by("-created_at")
        )
        product_id = uuid_query_param(self.request.query_params, "product_id")
        if product_id:
            qs = qs.filter(product_id=product_id)
        return qs

    @extend_schema(
        tags=["production"],
        request=ProductionCreateSerializer,
        responses={201: ProductionBatchSerializer, 400: dict, 404: dict, 409: dict},
    )
    def create(self, request, *args, **kwargs):
        s = ProductionCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            batch = record_production(
                product=data["product_id"],
                quantity_produced=data["quantity_produced"],
                ingredients=[
                    {"material_id": line["material_id"], "quantity": line["quantity"]}
                    for line in data["ingredients"]
                ],
                batch_number=data.get("batch_number"),
                user=request.user,
                operation_id=data.get("operation_id"),
            )
        except CostingError as exc:
            return error_response(exc)

        return Response(ProductionBatchSerializer(batch).data, status=status.HTTP_201_CREATED)
