# accounting/services/valuation_service.py

"""
INVENTORY VALUATION (BALANCE SHEET)

Stock on hand at weighted-average cost:
- raw materials:  sum(current_stock * average_cost)
- finished goods: sum(current_stock * average_unit_cost)

Read-only snapshot; rounding only on the way out.
"""

from __future__ import annotations

from decimal import Decimal

from costing.money import ZERO, to_major_number, to_minor_int
from materials.models import RawMaterial
from products.models import Product


def _value_rows(rows, *, cost_attr: str):
    total = ZERO
    lines = []
    for row in rows:
        value = Decimal(row.current_stock or 0) * Decimal(getattr(row, cost_attr) or 0)
        total += value
        lines.append(
            {
                "id": str(row.id),
                "name": row.name,
                "quantity": float(row.current_stock or 0),
                "unit_cost": float(getattr(row, cost_attr) or 0),
                "value": to_major_number(value),
                "value_minor": to_minor_int(value),
            }
        )
    return total, lines


def inventory_valuation() -> dict:
    raw_total, raw_lines = _value_rows(
        RawMaterial.objects.order_by("name"),
        cost_attr="average_cost",
    )
    fg_total, fg_lines = _value_rows(
        Product.objects.order_by("name"),
        cost_attr="average_unit_cost",
    )
    total = raw_total + fg_total

    return {
        "raw_materials": raw_lines,
        "finished_goods": fg_lines,
        "raw_materials_value": to_major_number(raw_total),
        "finished_goods_value": to_major_number(fg_total),
        "total_value": to_major_number(total),
        "raw_materials_value_minor": to_minor_int(raw_total),
        "finished_goods_value_minor": to_minor_int(fg_total),
        "total_value_minor": to_minor_int(total),
    }
