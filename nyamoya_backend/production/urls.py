# production/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from production.api.views import ProductionBatchViewSet

router = SimpleRouter()
router.register(r"batches", ProductionBatchViewSet, basename="production-batches")

urlpatterns = [
    path("", include(router.urls)),
]
