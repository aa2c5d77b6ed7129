# wastage/models.py

"""
WASTAGE LOG

One row per loss event (spoiled batch, broken jars, spilled oil ...).

Rules:
- Exactly one of material / product is set, matching item_type.
- valuation_at_loss = quantity_lost x unit_cost_at_loss, where the unit cost is
  the item's weighted average at the moment of loss.
- The correlated "Wastage" Expense is written in the same transaction and
  linked one-to-one.
- Immutable once written.
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone


class WastageEntry(models.Model):
    class ItemType(models.TextChoices):
        RAW_MATERIAL = "raw_material", "Raw material"
        FINISHED_GOOD = "finished_good", "Finished good"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    item_type = models.CharField(max_length=16, choices=ItemType.choices)

    material = models.ForeignKey(
        "materials.RawMaterial",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="wastage_entries",
    )

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="wastage_entries",
    )

    item_name = models.CharField(max_length=255)

    quantity_lost = models.DecimalField(max_digits=18, decimal_places=4)
    reason = models.CharField(max_length=255)

    unit_cost_at_loss = models.DecimalField(max_digits=24, decimal_places=10)
    valuation_at_loss = models.DecimalField(max_digits=24, decimal_places=6)

    expense = models.OneToOneField(
        "accounting.Expense",
        on_delete=models.PROTECT,
        related_name="wastage_entry",
    )

    operation_id = models.UUIDField(null=True, blank=True, unique=True)

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="wastage_entries",
    )

    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "Wastage entries"
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity_lost__gt=0),
                name="chk_wastage_qty_gt_zero",
            ),
            models.CheckConstraint(
                condition=(
                    Q(item_type="raw_material", material__isnull=False, product__isnull=True)
                    | Q(item_type="finished_good", product__isnull=False, material__isnull=True)
                ),
                name="chk_wastage_exactly_one_item",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("WastageEntry records are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("WastageEntry records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.item_name} -{self.quantity_lost} ({self.reason})"
