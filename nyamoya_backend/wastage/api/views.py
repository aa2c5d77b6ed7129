# wastage/api/views.py

"""
WASTAGE ENDPOINTS

GET   /api/wastage/          staff  loss log (?item_type=, ?start_date=, ?end_date=)
GET   /api/wastage/{id}/     staff  detail
POST  /api/wastage/          staff  report a loss (raw material or finished good)
"""

from __future__ import annotations

from django.utils.dateparse import parse_date
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, serializers, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from costing.api import error_response
from costing.exceptions import CostingError
from users.permissions import IsStaffMember
from wastage.api.serializers import WastageCreateSerializer, WastageEntrySerializer
from wastage.models import WastageEntry
from wastage.services.wastage_service import report_wastage


class WastageViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = WastageEntrySerializer
    permission_classes = [IsAuthenticated, IsStaffMember]

    def get_queryset(self):
        qs = WastageEntry.objects.select_related("performed_by").order_by("-created_at")
        params = self.request.query_params

        item_type = (params.get("item_type") or "").strip()
        if item_type:
            if item_type not in WastageEntry.ItemType.values:
                raise serializers.ValidationError(
                    {"item_type": f"Must be one of: {', '.join(WastageEntry.ItemType.values)}."}
                )
            qs = qs.filter(item_type=item_type)

        start = parse_date((params.get("start_date") or "").strip())
        if start:
            qs = qs.filter(created_at__date__gte=start)
        end = parse_date((params.get("end_date") or "").strip())
        if end:
            qs = qs.filter(created_at__date__lte=end)
        return qs

    @extend_schema(
        tags=["wastage"],
        request=WastageCreateSerializer,
        responses={201: WastageEntrySerializer, 400: dict, 404: dict, 409: dict},
    )
    def create(self, request, *args, **kwargs):
        s = WastageCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            entry = report_wastage(
                item_type=data["item_type"],
                item=data["item_id"],
                quantity=data["quantity"],
                reason=data["reason"],
                user=request.user,
                operation_id=data.get("operation_id"),
            )
        except CostingError as exc:
            return error_response(exc)

        return Response(WastageEntrySerializer(entry).data, status=status.HTTP_201_CREATED)
