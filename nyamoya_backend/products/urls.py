# products/urls.py

"""
PRODUCTS URLS

Purpose:
- Register finished-goods routes under /api/products/
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.api.views import ProductViewSet

router = SimpleRouter()
router.register(r"products", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
