# production/models.py

"""
PRODUCTION LOG

ProductionBatch is the immutable record of one production run: which raw
materials went in (with the average cost each had at the moment of use), how
many finished units came out, and the rolled-up unit cost.

Rules:
- Written ONLY by production.services.batch_processor.record_production.
- Never edited or deleted afterwards (history is the costing audit trail).
- BatchIngredient rows keep the order the ingredients were entered in.
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone


class ProductionBatch(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    batch_number = models.CharField(max_length=64, unique=True)

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="production_batches",
    )

    quantity_produced = models.DecimalField(max_digits=18, decimal_places=4)

    total_cost = models.DecimalField(max_digits=24, decimal_places=6)
    unit_cost = models.DecimalField(max_digits=24, decimal_places=10)

    # Finished-good average before/after this batch was received.
    product_average_before = models.DecimalField(max_digits=24, decimal_places=10)
    product_average_after = models.DecimalField(max_digits=24, decimal_places=10)

    operation_id = models.UUIDField(null=True, blank=True, unique=True)

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="production_batches",
    )

    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity_produced__gt=0),
                name="chk_batch_qty_gt_zero",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("ProductionBatch records are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("ProductionBatch records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.batch_number}: {self.quantity_produced} x {self.product.name}"


class BatchIngredient(models.Model):
    batch = models.ForeignKey(
        ProductionBatch,
        on_delete=models.CASCADE,
        related_name="ingredients",
    )

    material = models.ForeignKey(
        "materials.RawMaterial",
        on_delete=models.PROTECT,
        related_name="batch_usages",
    )

    position = models.PositiveIntegerField(default=0)

    quantity = models.DecimalField(max_digits=18, decimal_places=4)
    unit_cost_at_time_of_use = models.DecimalField(max_digits=24, decimal_places=10)
    line_cost = models.DecimalField(max_digits=24, decimal_places=6)

    class Meta:
        ordering = ["batch", "position"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_batch_ingredient_qty_gt_zero",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("BatchIngredient records are immutable")
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.material.name} x {self.quantity} @ {self.unit_cost_at_time_of_use}"
