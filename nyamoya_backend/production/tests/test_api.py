from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from materials.services import ledger as materials_ledger
from production.models import ProductionBatch
from products.services import ledger as products_ledger

User = get_user_model()


class ProductionApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.staff = User.objects.create_user(email="staff@example.com", password="pass", role="staff")
        self.client.force_authenticate(user=self.staff)

        self.peanuts = materials_ledger.create_material(
            name="Peanuts", unit="kg", opening_stock=30, opening_cost=10
        )
        self.product = products_ledger.create_product(name="Smooth 400g", price=20)

    def _post(self, **extra):
        payload = {
            "product_id": str(self.product.pk),
            "ingredients": [{"material_id": str(self.peanuts.pk), "quantity": "29"}],
        }
        payload.update(extra)
        return self.client.post("/api/production/batches/", payload, format="json")

    def test_output_in_cartons(self):
        response = self._post(cartons=2, loose_units=5)

        self.assertEqual(response.status_code, 201)
        batch = ProductionBatch.objects.get()
        self.assertEqual(batch.quantity_produced, Decimal("29"))
        self.assertEqual(batch.unit_cost, Decimal("10"))
        self.assertEqual(len(response.data["ingredients"]), 1)
        self.assertEqual(response.data["performed_by"], "staff@example.com")

    def test_units_and_cartons_are_exclusive(self):
        response = self._post(quantity_produced="29", cartons=2)
        self.assertEqual(response.status_code, 400)

    def test_output_required(self):
        response = self._post()
        self.assertEqual(response.status_code, 400)

    def test_shortage_is_conflict(self):
        response = self.client.post(
            "/api/production/batches/",
            {
                "product_id": str(self.product.pk),
                "quantity_produced": "10",
                "ingredients": [{"material_id": str(self.peanuts.pk), "quantity": "31"}],
            },
            format="json",
        )

        self.assertEqual(response.status_code, 409)
        self.assertFalse(ProductionBatch.objects.exists())

    def test_history(self):
        self._post(quantity_produced="29")

        response = self.client.get("/api/production/batches/", {"product_id": str(self.product.pk)})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["product_name"], "Smooth 400g")

    def test_malformed_product_filter_is_bad_request(self):
        response = self.client.get("/api/production/batches/", {"product_id": "zzz"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("product_id", response.data)
