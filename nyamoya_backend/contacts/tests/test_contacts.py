from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from contacts.models import Customer, Supplier
from contacts.services.contact_service import (
    create_customer,
    create_supplier,
    get_customer,
    update_customer,
)
from costing.exceptions import NotFoundError, ValidationError

User = get_user_model()


class ContactServiceTests(TestCase):
    def test_create_customer_trims_fields(self):
        customer = create_customer(name="  Mama Rose ", phone=" 0700 ", location="Owino")

        self.assertEqual(customer.name, "Mama Rose")
        self.assertEqual(customer.phone, "0700")
        self.assertEqual(customer.total_spent, Decimal("0"))

    def test_customer_name_required(self):
        with self.assertRaises(ValidationError):
            create_customer(name="")

    def test_update_customer(self):
        customer = create_customer(name="Mama Rose")

        update_customer(customer=customer.pk, phone="0711", notes="Pays on Fridays")

        customer.refresh_from_db()
        self.assertEqual(customer.phone, "0711")
        self.assertEqual(customer.notes, "Pays on Fridays")

    def test_update_refuses_spend(self):
        customer = create_customer(name="Mama Rose")
        with self.assertRaises(ValidationError):
            update_customer(customer=customer.pk, total_spent=100)

    def test_unknown_customer(self):
        with self.assertRaises(NotFoundError):
            get_customer("00000000-0000-0000-0000-000000000000")
        self.assertIsNone(get_customer(None))

    def test_supplier_default_category(self):
        supplier = create_supplier(name="Gulu Co-op")
        self.assertEqual(supplier.category, "General")


class ContactApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.staff = User.objects.create_user(email="staff@example.com", password="pass", role="staff")
        self.client.force_authenticate(user=self.staff)

    def test_customer_crud(self):
        response = self.client.post(
            "/api/contacts/customers/",
            {"name": "Mama Rose", "phone": "0700", "total_spent": "999"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        customer = Customer.objects.get()
        # running spend is read-only
        self.assertEqual(customer.total_spent, Decimal("0"))

        response = self.client.patch(
            f"/api/contacts/customers/{customer.pk}/", {"location": "Nakasero"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["location"], "Nakasero")

        response = self.client.get("/api/contacts/customers/", {"q": "rose"})
        self.assertEqual(response.data["count"], 1)

    def test_supplier_create_and_search(self):
        response = self.client.post(
            "/api/contacts/suppliers/", {"name": "Kampala Packaging", "category": "Packaging"}, format="json"
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(Supplier.objects.get().category, "Packaging")

        response = self.client.get("/api/contacts/suppliers/", {"q": "gulu"})
        self.assertEqual(response.data["count"], 0)
