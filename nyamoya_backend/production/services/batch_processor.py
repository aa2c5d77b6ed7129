# production/services/batch_processor.py

"""
PRODUCTION BATCH PROCESSOR

record_production() turns raw materials into finished goods in ONE atomic unit:

1) validate output quantity and ingredient lines; per-material demand is
   summed first, so two lines of the same material cannot each pass the stock
   check on their own
2) snapshot every ingredient's average_cost BEFORE anything is consumed
3) consume the raw materials (stock down, average unchanged)
4) total_cost = sum(qty * snapshot cost); unit_cost = total_cost / output
5) receive the output into the finished good (weighted-average roll-up)
6) append the immutable ProductionBatch + BatchIngredient rows

Any failure (validation, insufficient stock, lost CAS race) rolls back every
write of the attempt; lost races are retried by run_optimistic.
"""

from __future__ import annotations

import logging
import secrets
from collections import OrderedDict

from django.db import IntegrityError, transaction
from django.utils import timezone

from audit.services import record_action_on_commit
from costing.concurrency import replay_or_run, run_optimistic
from costing.exceptions import InsufficientStockError, ValidationError
from costing.money import ZERO, normalize_operation_id, require_quantity
from costing.valuation import line_value, per_unit
from materials.services import ledger as materials_ledger
from production.models import BatchIngredient, ProductionBatch
from products.services import ledger as products_ledger

logger = logging.getLogger(__name__)

BATCH_PREFIX = "BATCH-"


def generate_batch_number() -> str:
    """
    BATCH-<last 6 digits of the epoch milliseconds>; random digits on collision.
    """
    candidate = f"{BATCH_PREFIX}{int(timezone.now().timestamp() * 1000) % 1_000_000:06d}"
    for _ in range(10):
        if not ProductionBatch.objects.filter(batch_number=candidate).exists():
            return candidate
        candidate = f"{BATCH_PREFIX}{secrets.randbelow(1_000_000):06d}"
    return f"{BATCH_PREFIX}{secrets.token_hex(4).upper()}"


def _ingredient_ref(line):
    if isinstance(line, dict):
        return line.get("material_id") or line.get("material"), line.get("quantity")
    try:
        material, quantity = line
    except (TypeError, ValueError) as exc:
        raise ValidationError("Each ingredient needs a material and a quantity") from exc
    return material, quantity


def _normalize_ingredients(ingredients) -> list[tuple]:
    if not ingredients:
        raise ValidationError("At least one ingredient is required")

    lines = []
    for index, line in enumerate(ingredients, start=1):
        material, quantity = _ingredient_ref(line)
        if material in (None, ""):
            raise ValidationError(f"Ingredient {index}: material is required")
        qty = require_quantity(quantity, field_name=f"ingredient {index} quantity")
        lines.append((material, qty))
    return lines


def record_production(
    *,
    product,
    quantity_produced,
    ingredients,
    batch_number=None,
    user=None,
    operation_id=None,
) -> ProductionBatch:
    output_qty = require_quantity(quantity_produced, field_name="quantity_produced")
    lines = _normalize_ingredients(ingredients)
    op_id = normalize_operation_id(operation_id)
    performer = user if getattr(user, "is_authenticated", False) else None

    requested_number = (batch_number or "").strip()
    if requested_number and ProductionBatch.objects.filter(batch_number=requested_number).exists():
        raise ValidationError(f"Batch number {requested_number} already exists")

    def read():
        target = products_ledger.get_product(product)
        by_pk = {}
        resolved = []
        for material_ref, qty in lines:
            material = materials_ledger.get_material(material_ref)
            material = by_pk.setdefault(material.pk, material)
            resolved.append((material, qty))
        return target, resolved

    def write(snapshot) -> ProductionBatch:
        target, resolved = snapshot

        demand = OrderedDict()
        for material, qty in resolved:
            demand[material.pk] = demand.get(material.pk, ZERO) + qty
        for material, _ in resolved:
            need = demand[material.pk]
            if need > material.current_stock:
                raise InsufficientStockError(
                    f"Insufficient {material.name}: need {need}, have {material.current_stock}"
                )

        priced = [(material, qty, material.average_cost) for material, qty in resolved]
        total_cost = sum((line_value(qty, cost) for _, qty, cost in priced), ZERO)
        unit_cost = per_unit(total_cost, output_qty)

        for material, qty, _ in priced:
            materials_ledger.consume(material=material, quantity=qty)

        average_before = target.average_unit_cost
        average_after = products_ledger.receive_production(
            product=target,
            quantity=output_qty,
            unit_cost=unit_cost,
        )

        try:
            with transaction.atomic():
                batch = ProductionBatch.objects.create(
                    batch_number=requested_number or generate_batch_number(),
                    product=target,
                    quantity_produced=output_qty,
                    total_cost=total_cost,
                    unit_cost=unit_cost,
                    product_average_before=average_before,
                    product_average_after=average_after,
                    operation_id=op_id,
                    performed_by=performer,
                )
        except IntegrityError as exc:
            # a concurrent run claimed the requested number after the early check
            if requested_number and ProductionBatch.objects.filter(batch_number=requested_number).exists():
                raise ValidationError(f"Batch number {requested_number} already exists") from exc
            raise
        BatchIngredient.objects.bulk_create(
            [
                BatchIngredient(
                    batch=batch,
                    material=material,
                    position=position,
                    quantity=qty,
                    unit_cost_at_time_of_use=cost,
                    line_cost=line_value(qty, cost),
                )
                for position, (material, qty, cost) in enumerate(priced)
            ]
        )

        record_action_on_commit(
            user,
            "Production Run",
            f"{batch.batch_number}: produced {output_qty.normalize():f} x {target.name}",
        )
        logger.info(
            "Batch %s: %s x %s, total cost %s, unit cost %s",
            batch.batch_number,
            output_qty,
            target.name,
            total_cost,
            unit_cost,
        )
        return batch

    return replay_or_run(
        model=ProductionBatch,
        operation_id=op_id,
        run=lambda: run_optimistic(read=read, write=write, label="record_production"),
        label="record_production",
    )
