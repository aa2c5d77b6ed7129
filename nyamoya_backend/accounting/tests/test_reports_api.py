from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from accounting.services.expense_service import record_expense
from products.services import ledger as products_ledger
from sales.services.sale_service import record_sale

User = get_user_model()


class ReportApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@example.com", password="pass", role="admin")
        self.staff = User.objects.create_user(email="staff@example.com", password="pass", role="staff")

        product = products_ledger.create_product(
            name="Smooth 400g", price=20, opening_stock=10, opening_cost=6
        )
        record_sale(items=[{"product_id": product.pk, "quantity": 2}])
        record_expense(description="Rent", amount=10, category="Rent")

    def test_reports_are_admin_only(self):
        self.client.force_authenticate(user=self.staff)
        for url in (
            "/api/accounting/profit-and-loss/",
            "/api/accounting/balance-sheet/",
            "/api/accounting/revenue-trend/",
            "/api/accounting/expense-breakdown/",
            "/api/accounting/monthly-report/?year=2026&month=1",
        ):
            with self.subTest(url=url):
                self.assertEqual(self.client.get(url).status_code, 403)

    def test_profit_and_loss(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get("/api/accounting/profit-and-loss/", {"period": "this_month"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["revenue"], 40.0)
        self.assertEqual(response.data["cogs"], 12.0)
        self.assertEqual(response.data["net_profit"], 18.0)

    def test_bad_period_is_400(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(
            "/api/accounting/profit-and-loss/",
            {"start_date": "2026-02-01", "end_date": "2026-01-01"},
        )
        self.assertEqual(response.status_code, 400)

    def test_balance_sheet(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get("/api/accounting/balance-sheet/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["finished_goods_value"], 48.0)

    def test_revenue_trend(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get("/api/accounting/revenue-trend/", {"months": 2})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["months"]), 2)
        self.assertEqual(response.data["months"][-1]["revenue"], 40.0)

    def test_expense_breakdown(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get("/api/accounting/expense-breakdown/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["categories"][0]["category"], "Rent")

    def test_monthly_report_needs_year_and_month(self):
        self.client.force_authenticate(user=self.admin)
        self.assertEqual(self.client.get("/api/accounting/monthly-report/").status_code, 400)
        self.assertEqual(
            self.client.get("/api/accounting/monthly-report/", {"year": 2026, "month": 13}).status_code,
            400,
        )

    def test_monthly_report_year_out_of_range_is_400(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get("/api/accounting/monthly-report/", {"year": 99999, "month": 1})

        self.assertEqual(response.status_code, 400)
