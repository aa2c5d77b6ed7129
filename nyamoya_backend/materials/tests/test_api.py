import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from accounting.models.expense import Expense
from materials.models import RawMaterial
from materials.services import ledger

User = get_user_model()


class RawMaterialApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@example.com", password="pass", role="admin")
        self.staff = User.objects.create_user(email="staff@example.com", password="pass", role="staff")
        self.material = ledger.create_material(
            name="Peanuts", unit="kg", opening_stock=100, opening_cost=10
        )

    def test_anonymous_is_rejected(self):
        response = self.client.get("/api/materials/")
        self.assertEqual(response.status_code, 401)

    def test_staff_can_list(self):
        self.client.force_authenticate(user=self.staff)
        response = self.client.get("/api/materials/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["name"], "Peanuts")

    def test_staff_cannot_create(self):
        self.client.force_authenticate(user=self.staff)
        response = self.client.post("/api/materials/", {"name": "Salt", "unit": "kg"}, format="json")
        self.assertEqual(response.status_code, 403)

    def test_admin_creates_with_opening_balance(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            "/api/materials/",
            {"name": "Salt", "unit": "kg", "opening_stock": "8", "opening_cost": "2.5"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        salt = RawMaterial.objects.get(name="Salt")
        self.assertEqual(salt.current_stock, Decimal("8"))
        self.assertEqual(salt.average_cost, Decimal("2.5"))

    def test_stock_is_not_writable_through_patch(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            f"/api/materials/{self.material.pk}/",
            {"name": "Red Peanuts", "current_stock": "999"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.material.refresh_from_db()
        self.assertEqual(self.material.name, "Red Peanuts")
        self.assertEqual(self.material.current_stock, Decimal("100"))

    def test_restock_endpoint(self):
        self.client.force_authenticate(user=self.staff)
        response = self.client.post(
            f"/api/materials/{self.material.pk}/restock/",
            {"quantity_received": "100", "unit_purchase_price": "16"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(Decimal(response.data["average_cost_after"]), Decimal("13"))
        self.assertEqual(response.data["performed_by"], "staff@example.com")
        self.assertEqual(Expense.objects.filter(source=Expense.Source.RESTOCK).count(), 1)

        receipts = self.client.get(f"/api/materials/{self.material.pk}/receipts/")
        self.assertEqual(receipts.status_code, 200)
        self.assertEqual(len(receipts.data), 1)

    def test_restock_rejects_zero_quantity(self):
        self.client.force_authenticate(user=self.staff)
        response = self.client.post(
            f"/api/materials/{self.material.pk}/restock/",
            {"quantity_received": "0", "unit_purchase_price": "16"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "validation_error")

    def test_restock_unknown_material(self):
        self.client.force_authenticate(user=self.staff)
        response = self.client.post(
            f"/api/materials/{uuid.uuid4()}/restock/",
            {"quantity_received": "1", "unit_purchase_price": "1"},
            format="json",
        )
        self.assertEqual(response.status_code, 404)

    def test_low_stock_endpoint(self):
        ledger.create_material(name="Salt", unit="kg", opening_stock=3)
        self.client.force_authenticate(user=self.staff)

        response = self.client.get("/api/materials/low-stock/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual([row["name"] for row in response.data], ["Salt"])
