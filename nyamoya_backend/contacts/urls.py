# contacts/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from contacts.api.views import CustomerViewSet, SupplierViewSet

router = SimpleRouter()
router.register(r"customers", CustomerViewSet, basename="customers")
router.register(r"suppliers", SupplierViewSet, basename="suppliers")

urlpatterns = [
    path("", include(router.urls)),
]
