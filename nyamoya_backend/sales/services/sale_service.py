# sales/services/sale_service.py

"""
CORE SALES DOMAIN SERVICE

SINGLE SOURCE OF TRUTH for:
- Sale + SaleItem creation
- Finished-goods stock deduction (products.services.ledger.sell)
- COGS capture (average cost at sale time)
- Customer spend tracking

GUARANTEES:
- Fully atomic: every line sells or none does
- Oversell is rejected (InsufficientStockError), never clamped
- Revenue override keeps both computed_amount and total_amount
"""

from __future__ import annotations

import logging

from audit.services import record_action_on_commit
from contacts.services.contact_service import bump_customer_spend, get_customer
from costing.concurrency import replay_or_run, run_optimistic
from costing.exceptions import ValidationError
from costing.money import (
    ZERO,
    money_str,
    normalize_operation_id,
    require_non_negative,
    require_quantity,
)
from costing.valuation import line_value
from products.services import ledger as products_ledger
from sales.models import Sale, SaleItem

logger = logging.getLogger(__name__)


def _normalize_payment_method(payment_method) -> str:
    raw = (payment_method or "").strip()
    if not raw:
        return Sale.PaymentMethod.CASH

    aliases = {
        "cash": Sale.PaymentMethod.CASH,
        "bank/mobile": Sale.PaymentMethod.MOBILE,
        "mobile": Sale.PaymentMethod.MOBILE,
        "mobile money": Sale.PaymentMethod.MOBILE,
        "bank": Sale.PaymentMethod.MOBILE,
        "credit": Sale.PaymentMethod.CREDIT,
    }
    method = aliases.get(raw.lower())
    if method is None:
        raise ValidationError(
            f"Invalid payment_method '{raw}'. Use one of: {', '.join(Sale.PaymentMethod.values)}."
        )
    return method


def _normalize_items(items) -> list[dict]:
    if not items:
        raise ValidationError("A sale needs at least one item")

    lines = []
    for index, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise ValidationError(f"Item {index} must be an object")
        product = item.get("product_id") or item.get("product")
        if product in (None, ""):
            raise ValidationError(f"Item {index}: product is required")
        unit_price = item.get("unit_price")
        lines.append(
            {
                "product": product,
                "quantity": require_quantity(item.get("quantity"), field_name=f"item {index} quantity"),
                "unit_price": (
                    None
                    if unit_price in (None, "")
                    else require_non_negative(unit_price, field_name=f"item {index} unit_price")
                ),
            }
        )
    return lines


def record_sale(
    *,
    items,
    payment_method=None,
    customer=None,
    customer_name="",
    manual_total_override=None,
    user=None,
    operation_id=None,
) -> Sale:
    lines = _normalize_items(items)
    method = _normalize_payment_method(payment_method)
    op_id = normalize_operation_id(operation_id)
    override = (
        None
        if manual_total_override in (None, "")
        else require_non_negative(manual_total_override, field_name="manual_total_override")
    )
    customer_obj = get_customer(customer)
    label = customer_obj.name if customer_obj else ((customer_name or "").strip() or Sale.WALK_IN_LABEL)
    performer = user if getattr(user, "is_authenticated", False) else None

    def read():
        by_pk = {}
        resolved = []
        for line in lines:
            product = products_ledger.get_product(line["product"])
            product = by_pk.setdefault(product.pk, product)
            resolved.append((product, line))
        return resolved

    def write(resolved) -> Sale:
        computed = ZERO
        total_cost = ZERO
        priced = []

        for product, line in resolved:
            qty = line["quantity"]
            price = line["unit_price"] if line["unit_price"] is not None else product.price
            cost_per_unit = product.average_unit_cost
            cogs = products_ledger.sell(product=product, quantity=qty)

            line_total = line_value(qty, price)
            computed += line_total
            total_cost += cogs
            priced.append((product, qty, price, cost_per_unit, line_total, cogs))

        revenue = override if override is not None else computed

        sale = Sale.objects.create(
            customer=customer_obj,
            customer_name=label,
            payment_method=method,
            computed_amount=computed,
            total_amount=revenue,
            is_total_overridden=override is not None,
            total_cost=total_cost,
            operation_id=op_id,
            performed_by=performer,
        )
        SaleItem.objects.bulk_create(
            [
                SaleItem(
                    sale=sale,
                    product=product,
                    position=position,
                    product_name=product.name,
                    quantity=qty,
                    unit_price_at_sale=price,
                    cost_per_unit_at_sale=cost_per_unit,
                    line_total=line_total,
                    line_cost=cogs,
                )
                for position, (product, qty, price, cost_per_unit, line_total, cogs) in enumerate(priced)
            ]
        )

        if customer_obj is not None:
            bump_customer_spend(customer=customer_obj, amount=revenue)

        record_action_on_commit(
            user,
            "Recorded Sale",
            f"{label}: {money_str(revenue)} ({method})",
        )
        logger.info("Sale %s: revenue %s, cogs %s", sale.id, revenue, total_cost)
        return sale

    return replay_or_run(
        model=Sale,
        operation_id=op_id,
        run=lambda: run_optimistic(read=read, write=write, label="record_sale"),
        label="record_sale",
    )
