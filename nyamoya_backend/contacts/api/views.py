# contacts/api/views.py

"""
CUSTOMERS & SUPPLIERS

GET    /api/contacts/customers/          staff
POST   /api/contacts/customers/          staff
GET    /api/contacts/customers/{id}/     staff
PATCH  /api/contacts/customers/{id}/     staff  (total_spent is read-only)
GET    /api/contacts/suppliers/          staff
POST   /api/contacts/suppliers/          staff
GET    /api/contacts/suppliers/{id}/     staff
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from contacts.api.serializers import CustomerSerializer, SupplierSerializer
from contacts.models import Customer, Supplier
from contacts.services.contact_service import create_customer, create_supplier, update_customer
from costing.api import error_response
from costing.exceptions import CostingError
from users.permissions import IsStaffMember


class _SearchMixin:
    search_field = "name"

    def get_queryset(self):
        qs = super().get_queryset()
        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(**{f"{self.search_field}__icontains": q})
        return qs


class CustomerViewSet(
    _SearchMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Customer.objects.all().order_by("name")
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated, IsStaffMember]

    @extend_schema(tags=["contacts"], request=CustomerSerializer, responses={201: CustomerSerializer})
    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            customer = create_customer(user=request.user, **s.validated_data)
        except CostingError as exc:
            return error_response(exc)

        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["contacts"], request=CustomerSerializer, responses={200: CustomerSerializer})
    def partial_update(self, request, pk=None, *args, **kwargs):
        customer = self.get_object()
        s = self.get_serializer(customer, data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            customer = update_customer(customer=customer, user=request.user, **s.validated_data)
        except CostingError as exc:
            return error_response(exc)

        return Response(CustomerSerializer(customer).data, status=status.HTTP_200_OK)


class SupplierViewSet(
    _SearchMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Supplier.objects.all().order_by("name")
    serializer_class = SupplierSerializer
    permission_classes = [IsAuthenticated, IsStaffMember]

    @extend_schema(tags=["contacts"], request=SupplierSerializer, responses={201: SupplierSerializer})
    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            supplier = create_supplier(user=request.user, **s.validated_data)
        except CostingError as exc:
            return error_response(exc)

        return Response(SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED)
