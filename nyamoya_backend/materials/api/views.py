# materials/api/views.py

"""
RAW MATERIAL ENDPOINTS

GET    /api/materials/                    staff  list
GET    /api/materials/{id}/               staff  detail
POST   /api/materials/                    admin  create (optional opening balance)
PATCH  /api/materials/{id}/               admin  rename / change unit
POST   /api/materials/{id}/restock/       staff  purchase receipt (+ expense)
GET    /api/materials/{id}/receipts/      staff  restock history
GET    /api/materials/low-stock/          staff  reorder alerts (?threshold=)

Stock and average cost are never writable here; every change goes through
materials.services.ledger.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from costing.api import error_response
from costing.exceptions import CostingError
from materials.api.serializers import (
    MaterialReceiptSerializer,
    RawMaterialCreateSerializer,
    RawMaterialSerializer,
    RawMaterialUpdateSerializer,
    RestockSerializer,
)
from materials.models import RawMaterial
from materials.services import ledger
from users.permissions import IsAdmin, IsStaffMember


class RawMaterialViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = RawMaterialSerializer
    permission_classes = [IsAuthenticated, IsStaffMember]

    def get_permissions(self):
        if self.action in {"create", "partial_update"}:
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated(), IsStaffMember()]

    def get_queryset(self):
        qs = RawMaterial.objects.all().order_by("name")

        include_inactive = (self.request.query_params.get("include_inactive") or "").strip().lower()
        if include_inactive not in ("1", "true", "yes"):
            qs = qs.filter(is_active=True)

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(name__icontains=q)
        return qs

    @extend_schema(
        tags=["materials"],
        request=RawMaterialCreateSerializer,
        responses={201: RawMaterialSerializer, 400: dict},
    )
    def create(self, request, *args, **kwargs):
        s = RawMaterialCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            material = ledger.create_material(
                name=data["name"],
                unit=data["unit"],
                opening_stock=data.get("opening_stock"),
                opening_cost=data.get("opening_cost"),
                user=request.user,
            )
        except CostingError as exc:
            return error_response(exc)

        return Response(RawMaterialSerializer(material).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["materials"],
        request=RawMaterialUpdateSerializer,
        responses={200: RawMaterialSerializer, 400: dict, 404: dict},
    )
    def partial_update(self, request, pk=None, *args, **kwargs):
        s = RawMaterialUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            material = ledger.rename_material(material=pk, user=request.user, **s.validated_data)
        except CostingError as exc:
            return error_response(exc)

        return Response(RawMaterialSerializer(material).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["materials"], responses=RawMaterialSerializer(many=True))
    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        try:
            materials = ledger.low_stock_materials(request.query_params.get("threshold") or None)
        except CostingError as exc:
            return error_response(exc)
        return Response(RawMaterialSerializer(materials, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["materials"],
        request=RestockSerializer,
        responses={201: MaterialReceiptSerializer, 400: dict, 404: dict, 409: dict},
    )
    @action(detail=True, methods=["post"], url_path="restock")
    def restock(self, request, pk=None):
        s = RestockSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            receipt = ledger.restock(
                material=pk,
                quantity_received=data["quantity_received"],
                unit_purchase_price=data["unit_purchase_price"],
                supplier=data.get("supplier_id"),
                user=request.user,
                operation_id=data.get("operation_id"),
            )
        except CostingError as exc:
            return error_response(exc)

        return Response(MaterialReceiptSerializer(receipt).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["materials"], responses=MaterialReceiptSerializer(many=True))
    @action(detail=True, methods=["get"], url_path="receipts")
    def receipts(self, request, pk=None):
        material = self.get_object()
        qs = material.receipts.select_related("supplier", "performed_by").order_by("-created_at")
        return Response(MaterialReceiptSerializer(qs, many=True).data, status=status.HTTP_200_OK)
