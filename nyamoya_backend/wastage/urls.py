# wastage/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from wastage.api.views import WastageViewSet

router = SimpleRouter()
router.register(r"", WastageViewSet, basename="wastage")

urlpatterns = [
    path("", include(router.urls)),
]
