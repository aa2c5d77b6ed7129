# audit/api/views.py

"""
AUDIT TRAIL (ADMIN-ONLY, READ-ONLY)

GET /api/audit/logs/?action=&user=&start_date=&end_date=
"""

from __future__ import annotations

from django.utils.dateparse import parse_date
from drf_spectacular.utils import extend_schema
from rest_framework import generics
from rest_framework.permissions import IsAuthenticated

from audit.api.serializers import AuditLogSerializer
from audit.models import AuditLog
from users.permissions import IsAdmin


@extend_schema(tags=["audit"])
class AuditLogListView(generics.ListAPIView):
    serializer_class = AuditLogSerializer
    permission_classes = [IsAuthenticated, IsAdmin]

    def get_queryset(self):
        qs = AuditLog.objects.all()
        params = self.request.query_params

        action = (params.get("action") or "").strip()
        if action:
            qs = qs.filter(action__iexact=action)

        user = (params.get("user") or "").strip()
        if user:
            qs = qs.filter(user__icontains=user)

        start = parse_date((params.get("start_date") or "").strip())
        if start:
            qs = qs.filter(created_at__date__gte=start)
        end = parse_date((params.get("end_date") or "").strip())
        if end:
            qs = qs.filter(created_at__date__lte=end)

        return qs.order_by("-created_at", "-id")
