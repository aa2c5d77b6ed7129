from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from products.services import ledger as products_ledger
from sales.models import Sale

User = get_user_model()


class SaleApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.staff = User.objects.create_user(email="staff@example.com", password="pass", role="staff")
        self.product = products_ledger.create_product(
            name="Smooth 400g", price=20, opening_stock=30, opening_cost=6
        )

    def test_anonymous_is_rejected(self):
        response = self.client.post("/api/sales/", {}, format="json")
        self.assertEqual(response.status_code, 401)

    def test_sell_in_cartons(self):
        self.client.force_authenticate(user=self.staff)
        response = self.client.post(
            "/api/sales/",
            {
                "items": [{"product_id": str(self.product.pk), "cartons": 2, "loose_units": 1}],
                "payment_method": "Cash",
            },
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        sale = Sale.objects.get()
        self.assertEqual(sale.total_amount, Decimal("500"))
        self.assertEqual(sale.total_cost, Decimal("150"))
        self.assertEqual(len(response.data["items"]), 1)

    def test_oversell_is_conflict(self):
        self.client.force_authenticate(user=self.staff)
        response = self.client.post(
            "/api/sales/",
            {"items": [{"product_id": str(self.product.pk), "quantity": "31"}]},
            format="json",
        )

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "insufficient_stock")

    def test_history_filters(self):
        self.client.force_authenticate(user=self.staff)
        self.client.post(
            "/api/sales/",
            {"items": [{"product_id": str(self.product.pk), "quantity": "1"}], "payment_method": "Credit"},
            format="json",
        )
        self.client.post(
            "/api/sales/",
            {"items": [{"product_id": str(self.product.pk), "quantity": "1"}]},
            format="json",
        )

        response = self.client.get("/api/sales/", {"payment_method": "Credit"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["payment_method"], "Credit")

    def test_malformed_customer_filter_is_bad_request(self):
        self.client.force_authenticate(user=self.staff)

        response = self.client.get("/api/sales/", {"customer_id": "not-a-uuid"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("customer_id", response.data)
