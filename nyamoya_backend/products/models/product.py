# products/models/product.py

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Q


class Product(models.Model):
    """
    A finished good (e.g. "Nyamoya Smooth 400g").

    STOCK MODEL (IMPORTANT):
    - current_stock is the on-hand count of finished units.
    - average_unit_cost is the weighted-average production cost per unit.
    - Production raises stock and re-averages cost.
    - Sales and wastage lower stock only; they NEVER touch average_unit_cost.
    - Both fields are service-managed (products.services.ledger); the API and
      admin expose them read-only.

    price is the current selling price. The price actually charged is
    snapshotted on SaleItem.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)

    price = models.DecimalField(
        max_digits=20,
        decimal_places=4,
        default=Decimal("0"),
        help_text="Current selling price per unit.",
    )

    current_stock = models.DecimalField(
        max_digits=18,
        decimal_places=4,
        default=Decimal("0"),
    )

    average_unit_cost = models.DecimalField(
        max_digits=24,
        decimal_places=10,
        default=Decimal("0"),
    )

    low_stock_threshold = models.PositiveIntegerField(default=10)

    # Optimistic concurrency token, bumped by every ledger write.
    version = models.PositiveIntegerField(default=0)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="products_pr_name_9ff0a3_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(current_stock__gte=0),
                name="chk_product_stock_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(average_unit_cost__gte=0),
                name="chk_product_avg_cost_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(price__gte=0),
                name="chk_product_price_gte_zero",
            ),
        ]

    def __str__(self):
        return self.name

    @property
    def stock_value(self) -> Decimal:
        return Decimal(self.current_stock or 0) * Decimal(self.average_unit_cost or 0)

    @property
    def is_low_stock(self) -> bool:
        return Decimal(self.current_stock or 0) < Decimal(self.low_stock_threshold or 0)
