# wastage/services/wastage_service.py

"""
WASTAGE VALUATION SERVICE

report_wastage() writes, in ONE atomic unit:
- the stock deduction (raw material or finished good, CAS)
- the WastageEntry valued at the item's current weighted average
- the correlated "Wastage" Expense (source=WASTAGE)

Average cost never changes on a loss. Losing more than is on hand is
rejected (InsufficientStockError).
"""

from __future__ import annotations

import logging

from accounting.models.expense import Expense
from audit.services import record_action_on_commit
from costing.concurrency import replay_or_run, run_optimistic
from costing.exceptions import ValidationError
from costing.money import money_str, normalize_operation_id, require_quantity, require_text
from costing.valuation import line_value
from materials.services import ledger as materials_ledger
from products.services import ledger as products_ledger
from wastage.models import WastageEntry

logger = logging.getLogger(__name__)

ITEM_TYPE_ALIASES = {
    "raw_material": WastageEntry.ItemType.RAW_MATERIAL,
    "raw material": WastageEntry.ItemType.RAW_MATERIAL,
    "material": WastageEntry.ItemType.RAW_MATERIAL,
    "finished_good": WastageEntry.ItemType.FINISHED_GOOD,
    "finished good": WastageEntry.ItemType.FINISHED_GOOD,
    "product": WastageEntry.ItemType.FINISHED_GOOD,
}


def _normalize_item_type(item_type) -> str:
    key = (item_type or "").strip().lower()
    if key not in ITEM_TYPE_ALIASES:
        raise ValidationError("item_type must be 'raw_material' or 'finished_good'")
    return ITEM_TYPE_ALIASES[key]


def report_wastage(
    *,
    item_type,
    item,
    quantity,
    reason,
    user=None,
    operation_id=None,
) -> WastageEntry:
    kind = _normalize_item_type(item_type)
    qty = require_quantity(quantity, field_name="quantity")
    reason = require_text(reason, field_name="reason")
    op_id = normalize_operation_id(operation_id)
    performer = user if getattr(user, "is_authenticated", False) else None
    is_material = kind == WastageEntry.ItemType.RAW_MATERIAL

    def read():
        if is_material:
            return materials_ledger.get_material(item)
        return products_ledger.get_product(item)

    def write(snapshot) -> WastageEntry:
        if is_material:
            unit_cost = snapshot.average_cost
            materials_ledger.write_off(material=snapshot, quantity=qty)
            loss = line_value(qty, unit_cost)
        else:
            unit_cost = snapshot.average_unit_cost
            loss = products_ledger.write_off(product=snapshot, quantity=qty)

        expense = Expense.objects.create(
            description=f"Wastage: {snapshot.name} ({reason})",
            category=Expense.Category.WASTAGE,
            amount=loss,
            source=Expense.Source.WASTAGE,
            recorded_by=performer,
        )

        entry = WastageEntry.objects.create(
            item_type=kind,
            material=snapshot if is_material else None,
            product=None if is_material else snapshot,
            item_name=snapshot.name,
            quantity_lost=qty,
            reason=reason,
            unit_cost_at_loss=unit_cost,
            valuation_at_loss=loss,
            expense=expense,
            operation_id=op_id,
            performed_by=performer,
        )

        record_action_on_commit(
            user,
            "Reported Waste",
            f"{snapshot.name}: -{qty.normalize():f} ({reason}), loss {money_str(loss)}",
        )
        logger.info("Wastage %s: %s x %s, loss %s", snapshot.name, qty, unit_cost, loss)
        return entry

    return replay_or_run(
        model=WastageEntry,
        operation_id=op_id,
        run=lambda: run_optimistic(read=read, write=write, label="report_wastage"),
        label="report_wastage",
    )
