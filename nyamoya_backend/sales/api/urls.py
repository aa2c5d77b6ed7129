# sales/api/urls.py

"""
SALES API URLS

Provides:
    /api/sales/          list + record a sale
    /api/sales/<uuid>/   retrieve
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from sales.api.viewsets.sale import SaleViewSet

router = SimpleRouter()
router.register(r"", SaleViewSet, basename="sales")

urlpatterns = [
    path("", include(router.urls)),
]
