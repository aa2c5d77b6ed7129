from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase

from accounting.models.expense import Expense
from contacts.models import Supplier
from materials.models import RawMaterial
from products.models import Product

User = get_user_model()


class SeedCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command("seed_nyamoya", stdout=out)
        call_command("seed_nyamoya", stdout=out)

        self.assertEqual(User.objects.count(), 2)
        self.assertEqual(Supplier.objects.count(), 3)
        self.assertEqual(RawMaterial.objects.count(), 5)
        self.assertEqual(Product.objects.count(), 2)
        # opening balances are not purchases
        self.assertFalse(Expense.objects.exists())
        self.assertIn("Seeded 0 users", out.getvalue())

    def test_seeded_admin_can_log_in(self):
        call_command("seed_nyamoya", "--password", "S3cret!!", stdout=StringIO())

        admin = User.objects.get(email="admin@nyamoya.example.com")
        self.assertTrue(admin.check_password("S3cret!!"))
        self.assertEqual(admin.role, "admin")
