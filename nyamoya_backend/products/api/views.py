# products/api/views.py

"""
FINISHED GOODS ENDPOINTS

GET    /api/products/                      staff  list (?q=, ?include_inactive=)
GET    /api/products/{id}/                 staff  detail
POST   /api/products/                      admin  create (optional opening balance)
POST   /api/products/{id}/price/           admin  selling price edit
POST   /api/products/{id}/dispose/         staff  write off as wastage
GET    /api/products/low-stock/            staff  below-threshold alerts (?threshold=)

Stock only moves through production, sales and wastage.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from costing.api import error_response
from costing.exceptions import CostingError
from products.api.serializers import (
    DisposeSerializer,
    PriceUpdateSerializer,
    ProductCreateSerializer,
    ProductSerializer,
)
from products.models import Product
from products.services import ledger
from users.permissions import IsAdmin, IsStaffMember
from wastage.api.serializers import WastageEntrySerializer


class ProductViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated, IsStaffMember]

    def get_permissions(self):
        if self.action in {"create", "price"}:
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated(), IsStaffMember()]

    def get_queryset(self):
        qs = Product.objects.all().order_by("name")

        include_inactive = (self.request.query_params.get("include_inactive") or "").strip().lower()
        if include_inactive not in ("1", "true", "yes"):
            qs = qs.filter(is_active=True)

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(name__icontains=q)
        return qs

    @extend_schema(
        tags=["products"],
        request=ProductCreateSerializer,
        responses={201: ProductSerializer, 400: dict},
    )
    def create(self, request, *args, **kwargs):
        s = ProductCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            product = ledger.create_product(
                name=data["name"],
                price=data["price"],
                opening_stock=data.get("opening_stock"),
                opening_cost=data.get("opening_cost"),
                low_stock_threshold=data.get("low_stock_threshold"),
                user=request.user,
            )
        except CostingError as exc:
            return error_response(exc)

        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["products"],
        request=PriceUpdateSerializer,
        responses={200: ProductSerializer, 400: dict, 404: dict, 409: dict},
    )
    @action(detail=True, methods=["post"], url_path="price")
    def price(self, request, pk=None):
        s = PriceUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            product = ledger.update_price(product=pk, price=s.validated_data["price"], user=request.user)
        except CostingError as exc:
            return error_response(exc)

        return Response(ProductSerializer(product).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["products"],
        request=DisposeSerializer,
        responses={201: WastageEntrySerializer, 400: dict, 404: dict, 409: dict},
    )
    @action(detail=True, methods=["post"], url_path="dispose")
    def dispose(self, request, pk=None):
        s = DisposeSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            entry = ledger.dispose_as_wastage(
                product=pk,
                quantity=data["quantity"],
                reason=data["reason"],
                user=request.user,
                operation_id=data.get("operation_id"),
            )
        except CostingError as exc:
            return error_response(exc)

        return Response(WastageEntrySerializer(entry).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["products"],
        parameters=[
            OpenApiParameter(
                name="threshold",
                type=float,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Override every product's own low_stock_threshold.",
            ),
        ],
        responses=ProductSerializer(many=True),
    )
    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        try:
            products = ledger.low_stock_products(request.query_params.get("threshold") or None)
        except CostingError as exc:
            return error_response(exc)
        return Response(ProductSerializer(products, many=True).data, status=status.HTTP_200_OK)
