# audit/urls.py

from django.urls import path

from audit.api.views import AuditLogListView

urlpatterns = [
    path("logs/", AuditLogListView.as_view(), name="audit-logs"),
]
