from decimal import Decimal

from django.test import SimpleTestCase, override_settings

from costing.exceptions import ValidationError
from costing.money import (
    money_str,
    normalize_operation_id,
    q2,
    optional_quantity,
    require_positive,
    require_quantity,
    to_decimal,
    to_minor_int,
)
from costing.valuation import cartons_to_units, line_value, per_unit, weighted_average


class WeightedAverageTests(SimpleTestCase):
    def test_restock_into_existing_stock(self):
        # 100 @ 10 + 100 @ 16 -> 200 @ 13
        self.assertEqual(weighted_average(100, 10, 100, 16), Decimal("13"))

    def test_empty_stock_takes_incoming_cost(self):
        self.assertEqual(weighted_average(0, 0, 50, "20.50"), Decimal("20.50"))

    def test_zero_combined_quantity_is_not_a_division(self):
        self.assertEqual(weighted_average(0, 7, 0, 9), Decimal("9"))

    def test_zero_cost_receipt_dilutes_average(self):
        self.assertEqual(weighted_average(10, 10, 10, 0), Decimal("5"))

    def test_float_inputs_go_through_str(self):
        self.assertEqual(weighted_average(1, 0.1, 1, 0.2), Decimal("0.15"))

    def test_rejects_garbage(self):
        with self.assertRaises(ValidationError):
            weighted_average("abc", 1, 1, 1)


class LineMathTests(SimpleTestCase):
    def test_line_value(self):
        self.assertEqual(line_value("2.5", "4"), Decimal("10.0"))

    def test_per_unit_with_zero_quantity(self):
        self.assertEqual(per_unit(100, 0), Decimal("0"))

    def test_per_unit(self):
        self.assertEqual(per_unit(300, 50), Decimal("6"))


class CartonTests(SimpleTestCase):
    def test_default_carton_is_twelve(self):
        self.assertEqual(cartons_to_units(2, 5), Decimal("29"))

    @override_settings(UNITS_PER_CARTON=24)
    def test_carton_size_from_settings(self):
        self.assertEqual(cartons_to_units(1), Decimal("24"))

    def test_negative_cartons_rejected(self):
        with self.assertRaises(ValidationError):
            cartons_to_units(-1, 0)


class MoneyTests(SimpleTestCase):
    def test_q2_rounds_half_up(self):
        self.assertEqual(q2(Decimal("2.345")), Decimal("2.35"))
        self.assertEqual(q2(None), Decimal("0.00"))

    def test_minor_units(self):
        self.assertEqual(to_minor_int(Decimal("14.395")), 1440)
        self.assertEqual(money_str(Decimal("3")), "3.00")

    def test_to_decimal_rejects_bool_and_nan(self):
        with self.assertRaises(ValidationError):
            to_decimal(True)
        with self.assertRaises(ValidationError):
            to_decimal("NaN")

    def test_require_positive(self):
        with self.assertRaises(ValidationError):
            require_positive(0)
        with self.assertRaises(ValidationError):
            require_positive("")
        self.assertEqual(require_positive("0.5"), Decimal("0.5"))

    def test_quantity_scale_matches_stock_columns(self):
        self.assertEqual(require_quantity("2.5000"), Decimal("2.5000"))
        self.assertEqual(require_quantity("0.0001"), Decimal("0.0001"))
        self.assertEqual(require_quantity(100), Decimal("100"))
        with self.assertRaises(ValidationError):
            require_quantity("0.00004")
        with self.assertRaises(ValidationError):
            optional_quantity("1.23456")
        self.assertEqual(optional_quantity(None), Decimal("0"))

    def test_operation_id(self):
        self.assertIsNone(normalize_operation_id(""))
        with self.assertRaises(ValidationError):
            normalize_operation_id("not-a-uuid")
        op = normalize_operation_id("12345678-1234-5678-1234-567812345678")
        self.assertEqual(str(op), "12345678-1234-5678-1234-567812345678")
