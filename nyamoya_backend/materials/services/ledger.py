# materials/services/ledger.py

"""
RAW MATERIAL LEDGER SERVICE

Rules:
- Restock recomputes average_cost with costing.valuation.weighted_average and
  writes, in ONE atomic unit:
    RawMaterial (CAS)  +  MaterialReceipt  +  "Raw Materials" Expense
- consume() lowers stock only; average_cost is untouched.
- Stock can never go below zero (InsufficientStockError).
- Every mutation is a versioned compare-and-swap; lost races are retried by
  costing.concurrency.run_optimistic.
"""

from __future__ import annotations

import logging

from django.conf import settings

from accounting.models.expense import Expense
from audit.services import record_action_on_commit
from contacts.services.contact_service import get_supplier
from costing.concurrency import compare_and_swap, replay_or_run, run_optimistic
from costing.exceptions import InsufficientStockError, NotFoundError, ValidationError
from costing.lookups import fetch
from costing.money import (
    ZERO,
    money_str,
    normalize_operation_id,
    optional_non_negative,
    optional_quantity,
    require_non_negative,
    require_quantity,
    require_text,
)
from costing.valuation import line_value, weighted_average
from materials.models import MaterialReceipt, RawMaterial

logger = logging.getLogger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 20


def _load_material(material) -> RawMaterial:
    return fetch(RawMaterial, material, label="Raw material")


def get_material(material) -> RawMaterial:
    return _load_material(material)


def _qty_label(quantity) -> str:
    return f"{quantity.normalize():f}"


def create_material(*, name, unit, opening_stock=0, opening_cost=0, user=None) -> RawMaterial:
    """
    Opening balance (stock + cost) is the first data point of the average.
    No expense is written: the opening stock was paid for before the system.
    """
    name = require_text(name, field_name="name")
    unit = require_text(unit, field_name="unit")
    stock = optional_quantity(opening_stock, field_name="opening_stock")
    cost = optional_non_negative(opening_cost, field_name="opening_cost")

    material = RawMaterial.objects.create(
        name=name,
        unit=unit,
        current_stock=stock,
        average_cost=cost,
    )

    if stock > ZERO:
        record_action_on_commit(
            user,
            "Opening Balance",
            f"Added {name}: {_qty_label(stock)}{unit} @ {money_str(cost)}",
        )
    else:
        record_action_on_commit(user, "Created Material", f"Added {name} ({unit})")

    return material


def rename_material(*, material, name=None, unit=None, user=None) -> RawMaterial:
    """
    Catalogue maintenance only; stock and cost are not touched.
    """
    changes = {}
    if name is not None:
        changes["name"] = require_text(name, field_name="name")
    if unit is not None:
        changes["unit"] = require_text(unit, field_name="unit")
    if not changes:
        raise ValidationError("Nothing to update (name or unit required)")

    def write(snapshot: RawMaterial) -> RawMaterial:
        compare_and_swap(snapshot, **changes)
        record_action_on_commit(user, "Updated Material", f"Updated {snapshot.name} ({snapshot.unit})")
        return snapshot

    return run_optimistic(
        read=lambda: _load_material(material),
        write=write,
        label="rename_material",
    )


def restock(
    *,
    material,
    quantity_received,
    unit_purchase_price,
    supplier=None,
    user=None,
    operation_id=None,
) -> MaterialReceipt:
    qty = require_quantity(quantity_received, field_name="quantity_received")
    price = require_non_negative(unit_purchase_price, field_name="unit_purchase_price")
    op_id = normalize_operation_id(operation_id)
    supplier_obj = get_supplier(supplier)
    performer = user if getattr(user, "is_authenticated", False) else None

    def write(snapshot: RawMaterial) -> MaterialReceipt:
        avg_before = snapshot.average_cost
        new_avg = weighted_average(snapshot.current_stock, avg_before, qty, price)
        new_stock = snapshot.current_stock + qty
        total_cost = line_value(qty, price)

        compare_and_swap(snapshot, current_stock=new_stock, average_cost=new_avg)

        expense = Expense.objects.create(
            description=f"Purchased {snapshot.name} ({_qty_label(qty)}{snapshot.unit})",
            category=Expense.Category.RAW_MATERIALS,
            amount=total_cost,
            source=Expense.Source.RESTOCK,
            supplier=supplier_obj,
            recorded_by=performer,
        )

        receipt = MaterialReceipt.objects.create(
            material=snapshot,
            quantity=qty,
            unit_price=price,
            total_cost=total_cost,
            average_cost_before=avg_before,
            average_cost_after=new_avg,
            stock_after=new_stock,
            supplier=supplier_obj,
            expense=expense,
            operation_id=op_id,
            performed_by=performer,
        )

        record_action_on_commit(
            user,
            "Restock Material",
            f"Restocked {snapshot.name}: +{_qty_label(qty)}{snapshot.unit} @ {money_str(price)}",
        )
        logger.info(
            "Restocked %s: +%s @ %s (avg %s -> %s)",
            snapshot.name,
            qty,
            price,
            avg_before,
            new_avg,
        )
        return receipt

    return replay_or_run(
        model=MaterialReceipt,
        operation_id=op_id,
        run=lambda: run_optimistic(
            read=lambda: _load_material(material),
            write=write,
            label="restock",
        ),
        label="restock",
    )


def consume(*, material, quantity) -> RawMaterial:
    """
    Deduct stock for production.

    Given a RawMaterial snapshot, the CAS runs inside the caller's atomic unit
    (the production batch) and a conflict propagates to the caller's retry
    loop. Given an id, the deduction is its own optimistic unit.
    """
    qty = require_quantity(quantity, field_name="quantity")

    def write(snapshot: RawMaterial) -> RawMaterial:
        remaining = snapshot.current_stock - qty
        if remaining < ZERO:
            raise InsufficientStockError(
                f"Insufficient {snapshot.name}: need {qty}, have {snapshot.current_stock}"
            )
        compare_and_swap(snapshot, current_stock=remaining)
        return snapshot

    if isinstance(material, RawMaterial):
        return write(material)

    return run_optimistic(
        read=lambda: _load_material(material),
        write=write,
        label="consume",
    )


def write_off(*, material: RawMaterial, quantity) -> RawMaterial:
    """
    Wastage deduction. Same stock contract as consume(); used by the wastage
    service inside its own atomic unit.
    """
    if not isinstance(material, RawMaterial):
        raise NotFoundError("Raw material snapshot is required")
    return consume(material=material, quantity=quantity)


def low_stock_materials(threshold=None) -> list[RawMaterial]:
    """
    Active materials strictly below the reorder level
    (settings.RAW_MATERIAL_LOW_STOCK_THRESHOLD, default 20).
    """
    if threshold is None:
        threshold = getattr(settings, "RAW_MATERIAL_LOW_STOCK_THRESHOLD", DEFAULT_LOW_STOCK_THRESHOLD)
    limit = require_non_negative(threshold, field_name="threshold")
    return list(
        RawMaterial.objects.filter(is_active=True, current_stock__lt=limit).order_by(
            "current_stock", "name"
        )
    )
