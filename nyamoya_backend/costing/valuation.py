# costing/valuation.py

"""
VALUATION PRIMITIVES (PURE)

The ONLY place weighted-average cost is computed. Restock and production
roll-up both call weighted_average(); nothing re-derives it inline.

No I/O, no rounding, Decimal in -> Decimal out.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings

from costing.exceptions import ValidationError
from costing.money import ZERO, to_decimal


def weighted_average(old_qty, old_avg_cost, incoming_qty, incoming_unit_cost) -> Decimal:
    """
    (old_qty*old_avg + incoming_qty*incoming_cost) / (old_qty + incoming_qty)

    When the combined quantity is zero the incoming cost becomes the fresh
    baseline (never a division by zero).
    """
    oq = to_decimal(old_qty, field_name="old_qty")
    oc = to_decimal(old_avg_cost, field_name="old_avg_cost")
    iq = to_decimal(incoming_qty, field_name="incoming_qty")
    ic = to_decimal(incoming_unit_cost, field_name="incoming_unit_cost")

    total_qty = oq + iq
    if total_qty == ZERO:
        return ic

    return (oq * oc + iq * ic) / total_qty


def line_value(quantity, unit_cost) -> Decimal:
    return to_decimal(quantity, field_name="quantity") * to_decimal(unit_cost, field_name="unit_cost")


def per_unit(total, quantity) -> Decimal:
    qty = to_decimal(quantity, field_name="quantity")
    if qty == ZERO:
        return ZERO
    return to_decimal(total, field_name="total") / qty


def units_per_carton() -> int:
    return int(getattr(settings, "UNITS_PER_CARTON", 12))


def cartons_to_units(cartons=0, loose=0, *, per_carton=None) -> Decimal:
    """
    Floor staff count output and sales in cartons plus loose jars.
    """
    size = per_carton if per_carton is not None else units_per_carton()
    c = to_decimal(cartons or 0, field_name="cartons")
    lo = to_decimal(loose or 0, field_name="loose")
    if c < ZERO or lo < ZERO:
        raise ValidationError("cartons and loose units cannot be negative")
    return c * Decimal(size) + lo
