# products/services/ledger.py

"""
FINISHED GOODS LEDGER SERVICE

Rules:
- receive_production() is the ONLY inbound path: stock up, cost re-averaged
  with costing.valuation.weighted_average.
- sell() and write_off() lower stock only. COGS / loss are valued at the
  average_unit_cost read BEFORE the decrement.
- Oversell and over-write-off are rejected (InsufficientStockError).
- Writes are versioned compare-and-swap; when given a Product snapshot they
  join the caller's atomic unit, so a lost race rolls back the whole sale or
  batch and the caller's runner retries.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings

from audit.services import record_action_on_commit
from costing.concurrency import compare_and_swap, run_optimistic
from costing.exceptions import InsufficientStockError, ValidationError
from costing.lookups import fetch
from costing.money import (
    ZERO,
    money_str,
    optional_non_negative,
    optional_quantity,
    require_non_negative,
    require_quantity,
    require_text,
)
from costing.valuation import line_value, weighted_average
from products.models import Product

logger = logging.getLogger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 10


def _load_product(product) -> Product:
    return fetch(Product, product, label="Product")


def get_product(product) -> Product:
    return _load_product(product)


def create_product(
    *,
    name,
    price,
    opening_stock=0,
    opening_cost=0,
    low_stock_threshold=None,
    user=None,
) -> Product:
    name = require_text(name, field_name="name")
    price = require_non_negative(price, field_name="price")
    stock = optional_quantity(opening_stock, field_name="opening_stock")
    cost = optional_non_negative(opening_cost, field_name="opening_cost")

    fields = {
        "name": name,
        "price": price,
        "current_stock": stock,
        "average_unit_cost": cost,
    }
    if low_stock_threshold is not None:
        try:
            threshold = int(low_stock_threshold)
        except (TypeError, ValueError) as exc:
            raise ValidationError("low_stock_threshold must be an integer") from exc
        if threshold < 0:
            raise ValidationError("low_stock_threshold cannot be negative")
        fields["low_stock_threshold"] = threshold
    else:
        fields["low_stock_threshold"] = default_low_stock_threshold()

    product = Product.objects.create(**fields)

    if stock > ZERO:
        record_action_on_commit(
            user,
            "Opening Balance",
            f"Added {name}: {stock.normalize():f} units @ {money_str(cost)}",
        )
    else:
        record_action_on_commit(user, "Created Product", f"Added {name} @ {money_str(price)}")
    return product


def update_price(*, product, price, user=None) -> Product:
    """
    Selling price edit. Cost and stock untouched.
    """
    new_price = require_non_negative(price, field_name="price")

    def write(snapshot: Product) -> Product:
        old_price = snapshot.price
        compare_and_swap(snapshot, price=new_price)
        record_action_on_commit(
            user,
            "Updated Price",
            f"{snapshot.name}: {money_str(old_price)} -> {money_str(new_price)}",
        )
        return snapshot

    return run_optimistic(
        read=lambda: _load_product(product),
        write=write,
        label="update_price",
    )


def receive_production(*, product: Product, quantity, unit_cost) -> Decimal:
    """
    Add a batch's output at its rolled-up unit cost. Returns the new average.
    Runs inside the batch processor's atomic unit.
    """
    qty = require_quantity(quantity, field_name="quantity_produced")
    cost = require_non_negative(unit_cost, field_name="unit_cost")

    new_avg = weighted_average(product.current_stock, product.average_unit_cost, qty, cost)
    compare_and_swap(
        product,
        current_stock=product.current_stock + qty,
        average_unit_cost=new_avg,
    )
    return new_avg


def _deduct(product: Product, qty: Decimal, *, verb: str) -> Decimal:
    remaining = product.current_stock - qty
    if remaining < ZERO:
        raise InsufficientStockError(
            f"Cannot {verb} {qty} of {product.name}: only {product.current_stock} in stock"
        )
    unit_cost = product.average_unit_cost
    compare_and_swap(product, current_stock=remaining)
    return line_value(qty, unit_cost)


def sell(*, product, quantity) -> Decimal:
    """
    Returns COGS = quantity * average_unit_cost (pre-decrement).
    """
    qty = require_quantity(quantity, field_name="quantity")

    if isinstance(product, Product):
        return _deduct(product, qty, verb="sell")

    return run_optimistic(
        read=lambda: _load_product(product),
        write=lambda snapshot: _deduct(snapshot, qty, verb="sell"),
        label="sell",
    )


def write_off(*, product: Product, quantity) -> Decimal:
    """
    Wastage deduction; returns the loss value. Joins the caller's unit.
    """
    qty = require_quantity(quantity, field_name="quantity")
    return _deduct(product, qty, verb="write off")


def dispose_as_wastage(*, product, quantity, reason, user=None, operation_id=None):
    """
    Finished-goods wastage: stock down, loss valued, Wastage expense written.
    Returns the WastageEntry (its valuation_at_loss is the loss value).
    """
    from wastage.services.wastage_service import report_wastage

    return report_wastage(
        item_type="finished_good",
        item=product,
        quantity=quantity,
        reason=require_text(reason, field_name="reason"),
        user=user,
        operation_id=operation_id,
    )


def default_low_stock_threshold() -> int:
    return int(getattr(settings, "LOW_STOCK_THRESHOLD", DEFAULT_LOW_STOCK_THRESHOLD))


def low_stock_products(threshold=None) -> list[Product]:
    """
    Active products strictly below their threshold. An explicit threshold
    overrides every product's own.
    """
    products = Product.objects.filter(is_active=True).order_by("current_stock", "name")

    if threshold is not None:
        limit = require_non_negative(threshold, field_name="threshold")
        return list(products.filter(current_stock__lt=limit))

    return [p for p in products if p.is_low_stock]
