import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from audit.models import AuditLog
from contacts.services.contact_service import create_customer
from costing.exceptions import InsufficientStockError, NotFoundError, ValidationError
from products.services import ledger as products_ledger
from sales.models import Sale, SaleItem
from sales.services.sale_service import record_sale

User = get_user_model()


class RecordSaleTests(TestCase):
    """
    GUARANTEES:
    - COGS uses the average cost at sale time
    - a failing line rolls back the whole sale
    - manual override changes revenue, never COGS
    """

    def setUp(self):
        self.user = User.objects.create_user(email="cashier@example.com", password="pass", role="staff")
        self.smooth = products_ledger.create_product(
            name="Smooth 400g", price=20, opening_stock=50, opening_cost=6
        )
        self.crunchy = products_ledger.create_product(
            name="Crunchy 400g", price=25, opening_stock=5, opening_cost=8
        )

    def test_sale_records_revenue_and_cogs(self):
        with self.captureOnCommitCallbacks(execute=True):
            sale = record_sale(
                items=[{"product_id": self.smooth.pk, "quantity": 10}],
                user=self.user,
            )

        self.assertEqual(sale.total_amount, Decimal("200"))
        self.assertEqual(sale.computed_amount, Decimal("200"))
        self.assertEqual(sale.total_cost, Decimal("60"))
        self.assertEqual(sale.gross_profit, Decimal("140"))
        self.assertFalse(sale.is_total_overridden)
        self.assertEqual(sale.payment_method, Sale.PaymentMethod.CASH)
        self.assertEqual(sale.customer_name, Sale.WALK_IN_LABEL)
        self.assertEqual(sale.performed_by, self.user)

        item = SaleItem.objects.get(sale=sale)
        self.assertEqual(item.product_name, "Smooth 400g")
        self.assertEqual(item.unit_price_at_sale, Decimal("20"))
        self.assertEqual(item.cost_per_unit_at_sale, Decimal("6"))
        self.assertEqual(item.line_cost, Decimal("60"))

        self.smooth.refresh_from_db()
        self.assertEqual(self.smooth.current_stock, Decimal("40"))
        self.assertEqual(self.smooth.average_unit_cost, Decimal("6"))

        log = AuditLog.objects.get(action="Recorded Sale")
        self.assertEqual(log.user, "cashier@example.com")

    def test_line_price_override(self):
        sale = record_sale(items=[{"product_id": self.smooth.pk, "quantity": 2, "unit_price": "18"}])
        self.assertEqual(sale.total_amount, Decimal("36"))

    def test_manual_total_override(self):
        sale = record_sale(
            items=[{"product_id": self.smooth.pk, "quantity": 10}],
            manual_total_override="150",
        )

        self.assertTrue(sale.is_total_overridden)
        self.assertEqual(sale.computed_amount, Decimal("200"))
        self.assertEqual(sale.total_amount, Decimal("150"))
        self.assertEqual(sale.total_cost, Decimal("60"))

    def test_oversell_rolls_back_every_line(self):
        with self.assertRaises(InsufficientStockError):
            record_sale(
                items=[
                    {"product_id": self.smooth.pk, "quantity": 10},
                    {"product_id": self.crunchy.pk, "quantity": 6},
                ]
            )

        self.smooth.refresh_from_db()
        self.crunchy.refresh_from_db()
        self.assertEqual(self.smooth.current_stock, Decimal("50"))
        self.assertEqual(self.crunchy.current_stock, Decimal("5"))
        self.assertFalse(Sale.objects.exists())

    def test_same_product_on_two_lines(self):
        sale = record_sale(
            items=[
                {"product_id": self.crunchy.pk, "quantity": 3},
                {"product_id": self.crunchy.pk, "quantity": 2},
            ]
        )

        self.assertEqual(sale.total_cost, Decimal("40"))
        self.crunchy.refresh_from_db()
        self.assertEqual(self.crunchy.current_stock, Decimal("0"))

        with self.assertRaises(InsufficientStockError):
            record_sale(items=[{"product_id": self.crunchy.pk, "quantity": 1}])

    def test_customer_spend_is_bumped(self):
        customer = create_customer(name="Mama Rose", phone="0700000000")

        sale = record_sale(
            items=[{"product_id": self.smooth.pk, "quantity": 1}],
            customer=customer.pk,
            payment_method="credit",
        )

        customer.refresh_from_db()
        self.assertEqual(sale.customer_name, "Mama Rose")
        self.assertEqual(sale.payment_method, Sale.PaymentMethod.CREDIT)
        self.assertEqual(customer.total_spent, Decimal("20"))
        self.assertIsNotNone(customer.last_purchase_at)

    def test_walk_in_name(self):
        sale = record_sale(
            items=[{"product_id": self.smooth.pk, "quantity": 1}],
            customer_name="Market stall",
            payment_method="Mobile Money",
        )
        self.assertEqual(sale.customer_name, "Market stall")
        self.assertEqual(sale.payment_method, Sale.PaymentMethod.MOBILE)

    def test_validation(self):
        with self.assertRaises(ValidationError):
            record_sale(items=[])
        with self.assertRaises(ValidationError):
            record_sale(items=[{"product_id": self.smooth.pk, "quantity": 0}])
        with self.assertRaises(ValidationError):
            record_sale(items=[{"product_id": self.smooth.pk, "quantity": 1}], payment_method="Barter")
        with self.assertRaises(ValidationError):
            record_sale(
                items=[{"product_id": self.smooth.pk, "quantity": 1}],
                manual_total_override="-5",
            )
        with self.assertRaises(NotFoundError):
            record_sale(items=[{"product_id": uuid.uuid4(), "quantity": 1}])

        self.assertFalse(Sale.objects.exists())

    def test_operation_id_replay(self):
        op = uuid.uuid4()

        first = record_sale(items=[{"product_id": self.smooth.pk, "quantity": 1}], operation_id=op)
        second = record_sale(items=[{"product_id": self.smooth.pk, "quantity": 1}], operation_id=op)

        self.assertEqual(first.pk, second.pk)
        self.smooth.refresh_from_db()
        self.assertEqual(self.smooth.current_stock, Decimal("49"))
