# materials/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from materials.api.views import RawMaterialViewSet

router = SimpleRouter()
router.register(r"materials", RawMaterialViewSet, basename="materials")

urlpatterns = [
    path("", include(router.urls)),
]
