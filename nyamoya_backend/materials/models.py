# materials/models.py

"""
RAW MATERIAL LEDGER

RawMaterial is the authoritative stock + cost record for one ingredient or
packaging item (peanuts, salt, jars, labels ...).

CANONICAL RULES:
- current_stock and average_cost are mutated ONLY by materials.services.ledger
  (restock / consume / write-off) through versioned compare-and-swap writes.
- average_cost is the quantity-weighted mean of the opening balance and every
  restock. Consumption and wastage never change it.
- Stock may not go negative (CheckConstraint + service guard).

MaterialReceipt is the append-only restock log. Each receipt is linked
one-to-one to the "Raw Materials" Expense written in the same transaction.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone


class RawMaterial(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    unit = models.CharField(max_length=32, help_text="Stock unit, e.g. kg, litre, pcs")

    current_stock = models.DecimalField(
        max_digits=18,
        decimal_places=4,
        default=Decimal("0"),
    )

    average_cost = models.DecimalField(
        max_digits=24,
        decimal_places=10,
        default=Decimal("0"),
        help_text="Weighted-average cost per unit (service-managed only).",
    )

    # Optimistic concurrency token, bumped by every ledger write.
    version = models.PositiveIntegerField(default=0)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(current_stock__gte=0),
                name="chk_rawmaterial_stock_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(average_cost__gte=0),
                name="chk_rawmaterial_avg_cost_gte_zero",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.unit})"

    @property
    def stock_value(self) -> Decimal:
        return Decimal(self.current_stock or 0) * Decimal(self.average_cost or 0)


class MaterialReceipt(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    material = models.ForeignKey(
        RawMaterial,
        on_delete=models.PROTECT,
        related_name="receipts",
    )

    quantity = models.DecimalField(max_digits=18, decimal_places=4)
    unit_price = models.DecimalField(max_digits=24, decimal_places=10)
    total_cost = models.DecimalField(max_digits=24, decimal_places=6)

    average_cost_before = models.DecimalField(max_digits=24, decimal_places=10)
    average_cost_after = models.DecimalField(max_digits=24, decimal_places=10)
    stock_after = models.DecimalField(max_digits=18, decimal_places=4)

    supplier = models.ForeignKey(
        "contacts.Supplier",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="material_receipts",
    )

    expense = models.OneToOneField(
        "accounting.Expense",
        on_delete=models.PROTECT,
        related_name="material_receipt",
    )

    operation_id = models.UUIDField(null=True, blank=True, unique=True)

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="material_receipts",
    )

    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["material", "created_at"], name="materials_m_materia_5c1e0a_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("MaterialReceipt records are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("MaterialReceipt records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.material.name} +{self.quantity} @ {self.unit_price}"
