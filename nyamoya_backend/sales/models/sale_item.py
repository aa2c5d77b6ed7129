# sales/models/sale_item.py

"""
SALE ITEM (IMMUTABLE SNAPSHOT)

Name, price and average cost are copied at sale time so later price edits,
production runs and renames never rewrite history.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from .sale import Sale


class SaleItem(models.Model):
    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="sale_items",
    )

    position = models.PositiveIntegerField(default=0)

    product_name = models.CharField(max_length=255)

    quantity = models.DecimalField(max_digits=18, decimal_places=4)

    unit_price_at_sale = models.DecimalField(max_digits=20, decimal_places=4)
    cost_per_unit_at_sale = models.DecimalField(max_digits=24, decimal_places=10)

    line_total = models.DecimalField(max_digits=24, decimal_places=6)
    line_cost = models.DecimalField(max_digits=24, decimal_places=6)

    class Meta:
        ordering = ["sale", "position"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_saleitem_qty_gt_zero",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SaleItem records are immutable")
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_name} x {self.quantity} @ {self.unit_price_at_sale}"
