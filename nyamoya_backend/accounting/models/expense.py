# accounting/models/expense.py

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone


class Expense(models.Model):
    """
    Expense (append-only business event).

    Two kinds of rows live here:
    - MANUAL: operating costs typed in by staff (rent, salary, transport, ...)
    - Ledger-emitted: written by the raw-material ledger (RESTOCK) and the
      wastage service (WASTAGE) in the SAME transaction as the stock change.

    Rules:
    - Rows are immutable once written.
    - Only MANUAL rows may be deleted (ledger-emitted rows are linked one-to-one
      to a MaterialReceipt / WastageEntry and disappear only with them).
    """

    class Category(models.TextChoices):
        OPERATING = "Operating", "Operating"
        RAW_MATERIALS = "Raw Materials", "Raw Materials"
        SALARY = "Salary", "Salary"
        TRANSPORT = "Transport", "Transport"
        UTILITIES = "Utilities", "Utilities"
        PACKAGING = "Packaging", "Packaging"
        RENT = "Rent", "Rent"
        MARKETING = "Marketing", "Marketing"
        MAINTENANCE = "Maintenance", "Repairs & Maintenance"
        WASTAGE = "Wastage", "Wastage"
        OTHER = "Other", "Other"

    class Source(models.TextChoices):
        MANUAL = "manual", "Manual entry"
        RESTOCK = "restock", "Raw material restock"
        WASTAGE = "wastage", "Wastage write-off"

    description = models.CharField(max_length=255)

    category = models.CharField(
        max_length=32,
        choices=Category.choices,
        default=Category.OPERATING,
        db_index=True,
    )

    amount = models.DecimalField(
        max_digits=24,
        decimal_places=6,
        validators=[MinValueValidator(Decimal("0"))],
    )

    expense_date = models.DateField(default=timezone.localdate, db_index=True)

    source = models.CharField(
        max_length=16,
        choices=Source.choices,
        default=Source.MANUAL,
        db_index=True,
    )

    supplier = models.ForeignKey(
        "contacts.Supplier",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="expenses",
    )

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="expenses",
    )

    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)

    class Meta:
        ordering = ["-expense_date", "-created_at"]
        verbose_name = "Expense"
        verbose_name_plural = "Expenses"
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gte=0),
                name="chk_expense_amount_gte_zero",
            ),
        ]

    def __str__(self):
        return f"{self.category} | {self.description} | {self.amount} ({self.expense_date})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Expense records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.source != self.Source.MANUAL:
            raise ValidationError(
                "Ledger-generated expenses cannot be deleted; they mirror a stock movement."
            )
        return super().delete(*args, **kwargs)
