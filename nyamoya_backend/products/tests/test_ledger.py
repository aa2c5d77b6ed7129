import importlib
from decimal import Decimal

from django.test import SimpleTestCase, TestCase, override_settings

from accounting.models.expense import Expense
from costing.exceptions import InsufficientStockError, ValidationError
from products.models import Product
from products.services import ledger
from wastage.models import WastageEntry


class ProductLedgerTests(TestCase):
    """
    Finished-goods ledger.

    GUARANTEES:
    - receive_production re-averages cost
    - sell / write_off never move the average
    - oversell is rejected, never clamped
    """

    def setUp(self):
        self.product = ledger.create_product(
            name="Smooth 400g", price=20, opening_stock=50, opening_cost=6
        )

    def test_receive_production_reaverages(self):
        new_avg = ledger.receive_production(product=self.product, quantity=50, unit_cost=8)

        self.assertEqual(new_avg, Decimal("7"))
        self.product.refresh_from_db()
        self.assertEqual(self.product.current_stock, Decimal("100"))
        self.assertEqual(self.product.average_unit_cost, Decimal("7"))

    def test_sell_returns_cogs_at_average(self):
        cogs = ledger.sell(product=self.product.pk, quantity=10)

        self.assertEqual(cogs, Decimal("60"))
        self.product.refresh_from_db()
        self.assertEqual(self.product.current_stock, Decimal("40"))
        self.assertEqual(self.product.average_unit_cost, Decimal("6"))

    def test_oversell_rejected(self):
        with self.assertRaises(InsufficientStockError):
            ledger.sell(product=self.product.pk, quantity=51)

        self.product.refresh_from_db()
        self.assertEqual(self.product.current_stock, Decimal("50"))

    def test_sell_everything(self):
        ledger.sell(product=self.product.pk, quantity=50)
        self.product.refresh_from_db()
        self.assertEqual(self.product.current_stock, Decimal("0"))

    def test_update_price_leaves_cost(self):
        ledger.update_price(product=self.product.pk, price="22.50")

        self.product.refresh_from_db()
        self.assertEqual(self.product.price, Decimal("22.50"))
        self.assertEqual(self.product.average_unit_cost, Decimal("6"))
        self.assertEqual(self.product.version, 1)

    def test_negative_price_rejected(self):
        with self.assertRaises(ValidationError):
            ledger.update_price(product=self.product.pk, price=-1)

    def test_dispose_as_wastage(self):
        entry = ledger.dispose_as_wastage(product=self.product.pk, quantity=5, reason="Broken jars")

        self.assertIsInstance(entry, WastageEntry)
        self.assertEqual(entry.valuation_at_loss, Decimal("30"))
        self.product.refresh_from_db()
        self.assertEqual(self.product.current_stock, Decimal("45"))

        expense = Expense.objects.get()
        self.assertEqual(expense.category, Expense.Category.WASTAGE)
        self.assertEqual(expense.amount, Decimal("30"))

    def test_dispose_needs_reason(self):
        with self.assertRaises(ValidationError):
            ledger.dispose_as_wastage(product=self.product.pk, quantity=1, reason="")


class LowStockTests(TestCase):
    def test_default_threshold_from_settings(self):
        with override_settings(LOW_STOCK_THRESHOLD=5):
            product = ledger.create_product(name="Crunchy", price=10)
        self.assertEqual(product.low_stock_threshold, 5)

    def test_strictly_below_own_threshold(self):
        ledger.create_product(name="At Threshold", price=10, opening_stock=10, low_stock_threshold=10)
        ledger.create_product(name="Below", price=10, opening_stock=9, low_stock_threshold=10)
        ledger.create_product(name="Custom", price=10, opening_stock=30, low_stock_threshold=40)

        names = [p.name for p in ledger.low_stock_products()]
        self.assertEqual(names, ["Below", "Custom"])

    def test_explicit_threshold_overrides(self):
        ledger.create_product(name="A", price=10, opening_stock=3, low_stock_threshold=1)
        ledger.create_product(name="B", price=10, opening_stock=8, low_stock_threshold=1)

        names = [p.name for p in ledger.low_stock_products(threshold=5)]
        self.assertEqual(names, ["A"])

    def test_inactive_products_not_flagged(self):
        product = ledger.create_product(name="Old Label", price=10, opening_stock=0)
        Product.objects.filter(pk=product.pk).update(is_active=False)

        self.assertEqual(ledger.low_stock_products(), [])


class ServicesPackageTests(SimpleTestCase):
    def test_ledger_importable_through_package(self):
        package = importlib.import_module("products.services")
        module = importlib.import_module("products.services.ledger")

        self.assertIs(package.ledger, module)
        for name in ("create_product", "receive_production", "sell", "write_off", "dispose_as_wastage"):
            self.assertTrue(callable(getattr(module, name)), name)
