import uuid
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings

from accounting.models.expense import Expense
from audit.models import AuditLog
from contacts.services.contact_service import create_supplier
from costing.exceptions import (
    ConcurrencyConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from costing.money import q2
from materials.models import MaterialReceipt, RawMaterial
from materials.services import ledger

User = get_user_model()


class CreateMaterialTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="admin@example.com", password="pass", role="admin")

    def test_opening_balance_seeds_average(self):
        with self.captureOnCommitCallbacks(execute=True):
            material = ledger.create_material(
                name="Peanuts", unit="kg", opening_stock=100, opening_cost=10, user=self.user
            )

        material.refresh_from_db()
        self.assertEqual(material.current_stock, Decimal("100"))
        self.assertEqual(material.average_cost, Decimal("10"))
        self.assertEqual(material.version, 0)

        # opening stock was paid for before the system: no expense
        self.assertFalse(Expense.objects.exists())

        log = AuditLog.objects.get()
        self.assertEqual(log.action, "Opening Balance")
        self.assertEqual(log.user, "admin@example.com")
        self.assertEqual(log.role, "admin")

    def test_blank_name_rejected(self):
        with self.assertRaises(ValidationError):
            ledger.create_material(name="  ", unit="kg")

    def test_negative_opening_rejected(self):
        with self.assertRaises(ValidationError):
            ledger.create_material(name="Salt", unit="kg", opening_stock=-1)


class RestockTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="staff@example.com", password="pass", role="staff")
        self.material = ledger.create_material(
            name="Peanuts", unit="kg", opening_stock=100, opening_cost=10
        )

    def test_restock_reaverages_and_books_expense(self):
        supplier = create_supplier(name="Gulu Co-op", category="Peanuts")

        receipt = ledger.restock(
            material=self.material.pk,
            quantity_received=100,
            unit_purchase_price=16,
            supplier=supplier.pk,
            user=self.user,
        )

        self.material.refresh_from_db()
        self.assertEqual(self.material.current_stock, Decimal("200"))
        self.assertEqual(self.material.average_cost, Decimal("13"))
        self.assertEqual(self.material.version, 1)

        self.assertEqual(receipt.average_cost_before, Decimal("10"))
        self.assertEqual(receipt.average_cost_after, Decimal("13"))
        self.assertEqual(receipt.stock_after, Decimal("200"))
        self.assertEqual(receipt.performed_by, self.user)

        expense = receipt.expense
        self.assertEqual(expense.category, Expense.Category.RAW_MATERIALS)
        self.assertEqual(expense.source, Expense.Source.RESTOCK)
        self.assertEqual(expense.amount, Decimal("1600"))
        self.assertEqual(expense.supplier, supplier)
        self.assertEqual(expense.description, "Purchased Peanuts (100kg)")

    def test_restock_into_empty_material_takes_price(self):
        jars = ledger.create_material(name="Jars", unit="pcs")

        ledger.restock(material=jars, quantity_received=50, unit_purchase_price=2)

        jars.refresh_from_db()
        self.assertEqual(jars.current_stock, Decimal("50"))
        self.assertEqual(jars.average_cost, Decimal("2"))

    def test_invalid_quantity_touches_nothing(self):
        for qty in (0, -5, "abc", None):
            with self.assertRaises(ValidationError):
                ledger.restock(material=self.material.pk, quantity_received=qty, unit_purchase_price=5)

        self.material.refresh_from_db()
        self.assertEqual(self.material.current_stock, Decimal("100"))
        self.assertFalse(MaterialReceipt.objects.exists())
        self.assertFalse(Expense.objects.exists())

    def test_quantity_finer_than_stock_scale_is_rejected(self):
        with self.assertRaises(ValidationError):
            ledger.restock(material=self.material.pk, quantity_received="0.00004", unit_purchase_price=10)

        self.material.refresh_from_db()
        self.assertEqual(self.material.current_stock, Decimal("100"))
        self.assertEqual(self.material.version, 0)
        self.assertFalse(MaterialReceipt.objects.exists())
        self.assertFalse(Expense.objects.exists())

    def test_unknown_material(self):
        with self.assertRaises(NotFoundError):
            ledger.restock(material=uuid.uuid4(), quantity_received=1, unit_purchase_price=1)

    def test_operation_id_replays_instead_of_applying_twice(self):
        op = uuid.uuid4()

        first = ledger.restock(
            material=self.material.pk, quantity_received=10, unit_purchase_price=20, operation_id=op
        )
        second = ledger.restock(
            material=self.material.pk, quantity_received=10, unit_purchase_price=20, operation_id=op
        )

        self.assertEqual(first.pk, second.pk)
        self.material.refresh_from_db()
        self.assertEqual(self.material.current_stock, Decimal("110"))
        self.assertEqual(MaterialReceipt.objects.count(), 1)
        self.assertEqual(Expense.objects.count(), 1)

    def test_concurrent_restocks_are_both_applied(self):
        real_load = ledger._load_material
        raced = []

        def racing_load(material):
            snapshot = real_load(material)
            if not raced:
                raced.append(True)
                # a second restock commits after our read, before our write
                ledger.restock(material=material, quantity_received=50, unit_purchase_price=20)
            return snapshot

        with mock.patch.object(ledger, "_load_material", side_effect=racing_load):
            ledger.restock(material=self.material.pk, quantity_received=100, unit_purchase_price=16)

        self.material.refresh_from_db()
        self.assertEqual(self.material.current_stock, Decimal("250"))
        # (100*10 + 50*20 + 100*16) / 250
        self.assertEqual(q2(self.material.average_cost), Decimal("14.40"))
        self.assertEqual(self.material.version, 2)
        self.assertEqual(MaterialReceipt.objects.count(), 2)
        self.assertEqual(Expense.objects.count(), 2)

    @override_settings(COSTING_MAX_RETRIES=2)
    def test_exhausted_retries_leave_no_trace(self):
        stale = RawMaterial.objects.get(pk=self.material.pk)
        stale.version = 99

        with mock.patch.object(ledger, "_load_material", return_value=stale):
            with self.assertRaises(ConcurrencyConflictError):
                ledger.restock(material=self.material.pk, quantity_received=5, unit_purchase_price=5)

        self.material.refresh_from_db()
        self.assertEqual(self.material.current_stock, Decimal("100"))
        self.assertFalse(Expense.objects.exists())
        self.assertFalse(MaterialReceipt.objects.exists())


class ConsumeTests(TestCase):
    def setUp(self):
        self.material = ledger.create_material(
            name="Salt", unit="kg", opening_stock=10, opening_cost=3
        )

    def test_consume_keeps_average(self):
        ledger.consume(material=self.material.pk, quantity=4)

        self.material.refresh_from_db()
        self.assertEqual(self.material.current_stock, Decimal("6"))
        self.assertEqual(self.material.average_cost, Decimal("3"))

    def test_consume_to_exactly_zero(self):
        ledger.consume(material=self.material.pk, quantity=10)
        self.material.refresh_from_db()
        self.assertEqual(self.material.current_stock, Decimal("0"))

    def test_overdraw_rejected(self):
        with self.assertRaises(InsufficientStockError):
            ledger.consume(material=self.material.pk, quantity="10.5")

        self.material.refresh_from_db()
        self.assertEqual(self.material.current_stock, Decimal("10"))


class RenameAndLowStockTests(TestCase):
    def test_rename_leaves_stock_alone(self):
        material = ledger.create_material(name="Sugr", unit="kg", opening_stock=5, opening_cost=4)

        renamed = ledger.rename_material(material=material.pk, name="Sugar")

        self.assertEqual(renamed.name, "Sugar")
        material.refresh_from_db()
        self.assertEqual(material.name, "Sugar")
        self.assertEqual(material.current_stock, Decimal("5"))

    def test_rename_needs_a_change(self):
        material = ledger.create_material(name="Sugar", unit="kg")
        with self.assertRaises(ValidationError):
            ledger.rename_material(material=material.pk)

    def test_low_stock_is_strictly_below_threshold(self):
        ledger.create_material(name="Labels", unit="pcs", opening_stock=20)
        ledger.create_material(name="Lids", unit="pcs", opening_stock=19)
        ledger.create_material(name="Peanuts", unit="kg", opening_stock=500)

        names = [m.name for m in ledger.low_stock_materials()]
        self.assertEqual(names, ["Lids"])

        names = [m.name for m in ledger.low_stock_materials(threshold=21)]
        self.assertEqual(names, ["Lids", "Labels"])
