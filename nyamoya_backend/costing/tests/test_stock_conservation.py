from decimal import Decimal

from django.test import TestCase

from costing.exceptions import InsufficientStockError
from materials.models import MaterialReceipt, RawMaterial
from materials.services import ledger as materials_ledger
from production.models import BatchIngredient, ProductionBatch
from production.services.batch_processor import record_production
from products.models import Product
from products.services import ledger as products_ledger
from sales.models import SaleItem
from sales.services.sale_service import record_sale
from wastage.models import WastageEntry
from wastage.services.wastage_service import report_wastage


def _total(rows, field):
    return sum((getattr(row, field) for row in rows), Decimal("0"))


class StockConservationTests(TestCase):
    """
    After any mix of restock, production, sale and wastage (failed attempts
    included), every item's stock equals opening + inbound - outbound as
    recorded in the immutable ledgers.
    """

    def setUp(self):
        self.peanuts = materials_ledger.create_material(
            name="Peanuts", unit="kg", opening_stock=50, opening_cost=10
        )
        self.sugar = materials_ledger.create_material(
            name="Sugar", unit="kg", opening_stock=10, opening_cost=5
        )
        self.smooth = products_ledger.create_product(
            name="Smooth 400g", price=20, opening_stock=5, opening_cost=8
        )
        self.opening = {
            self.peanuts.pk: Decimal("50"),
            self.sugar.pk: Decimal("10"),
            self.smooth.pk: Decimal("5"),
        }

    def _run_mixed_sequence(self):
        materials_ledger.restock(material=self.peanuts.pk, quantity_received=30, unit_purchase_price=12)
        materials_ledger.restock(material=self.sugar.pk, quantity_received=5, unit_purchase_price=6)

        record_production(
            product=self.smooth.pk,
            quantity_produced=24,
            ingredients=[
                {"material_id": self.peanuts.pk, "quantity": "20.5"},
                {"material_id": self.sugar.pk, "quantity": "2.25"},
            ],
        )
        record_production(
            product=self.smooth.pk,
            quantity_produced=12,
            ingredients=[
                {"material_id": self.peanuts.pk, "quantity": "10"},
                {"material_id": self.peanuts.pk, "quantity": "0.5"},
                {"material_id": self.sugar.pk, "quantity": "1"},
            ],
        )

        record_sale(items=[{"product_id": self.smooth.pk, "quantity": 30}], payment_method="Cash")

        report_wastage(item_type="raw_material", item=self.peanuts.pk, quantity="3.25", reason="Mould")
        products_ledger.dispose_as_wastage(product=self.smooth.pk, quantity="1.5", reason="Broken jar")

        # rejected attempts must leave no trace in stock or in the ledgers
        with self.assertRaises(InsufficientStockError):
            record_sale(items=[{"product_id": self.smooth.pk, "quantity": 12}])
        with self.assertRaises(InsufficientStockError):
            record_production(
                product=self.smooth.pk,
                quantity_produced=1,
                ingredients=[
                    {"material_id": self.sugar.pk, "quantity": "1"},
                    {"material_id": self.peanuts.pk, "quantity": "1000"},
                ],
            )
        with self.assertRaises(InsufficientStockError):
            report_wastage(item_type="raw_material", item=self.sugar.pk, quantity="500", reason="Spill")

    def test_material_stock_equals_inbound_minus_outbound(self):
        self._run_mixed_sequence()

        for material in RawMaterial.objects.all():
            inbound = self.opening[material.pk] + _total(
                MaterialReceipt.objects.filter(material=material), "quantity"
            )
            outbound = _total(BatchIngredient.objects.filter(material=material), "quantity") + _total(
                WastageEntry.objects.filter(material=material), "quantity_lost"
            )
            self.assertEqual(material.current_stock, inbound - outbound, material.name)

        self.assertEqual(RawMaterial.objects.get(pk=self.peanuts.pk).current_stock, Decimal("45.75"))
        self.assertEqual(RawMaterial.objects.get(pk=self.sugar.pk).current_stock, Decimal("11.75"))

    def test_product_stock_equals_inbound_minus_outbound(self):
        self._run_mixed_sequence()

        for product in Product.objects.all():
            inbound = self.opening[product.pk] + _total(
                ProductionBatch.objects.filter(product=product), "quantity_produced"
            )
            outbound = _total(SaleItem.objects.filter(product=product), "quantity") + _total(
                WastageEntry.objects.filter(product=product), "quantity_lost"
            )
            self.assertEqual(product.current_stock, inbound - outbound, product.name)

        self.assertEqual(Product.objects.get(pk=self.smooth.pk).current_stock, Decimal("9.5"))
        self.assertEqual(ProductionBatch.objects.count(), 2)
        self.assertEqual(SaleItem.objects.count(), 1)
