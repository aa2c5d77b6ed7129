# sales/models/sale.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Sale(models.Model):
    """
    Represents a completed sale of finished goods.

    GUARANTEES:
    - Immutable financial record once written
    - Stock is mutated ONLY via products.services.ledger.sell
    - total_cost is the COGS frozen at sale time (average cost per line)

    REVENUE:
    - computed_amount = sum(quantity x unit price) over the lines
    - total_amount is the revenue recognised; it equals computed_amount unless
      the cashier overrode the total (is_total_overridden=True). Both are kept.
    """

    class PaymentMethod(models.TextChoices):
        CASH = "Cash", "Cash"
        MOBILE = "Bank/Mobile", "Mobile Money / Bank"
        CREDIT = "Credit", "Credit (Debt)"

    WALK_IN_LABEL = "Walk-in Customer"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer = models.ForeignKey(
        "contacts.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
    )

    customer_name = models.CharField(
        max_length=255,
        default=WALK_IN_LABEL,
        help_text="Registered customer's name or the walk-in label.",
    )

    payment_method = models.CharField(
        max_length=32,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
    )

    computed_amount = models.DecimalField(
        max_digits=24,
        decimal_places=6,
        default=Decimal("0"),
    )

    total_amount = models.DecimalField(
        max_digits=24,
        decimal_places=6,
        default=Decimal("0"),
        help_text="Revenue recognised for this sale.",
    )

    is_total_overridden = models.BooleanField(default=False)

    total_cost = models.DecimalField(
        max_digits=24,
        decimal_places=6,
        default=Decimal("0"),
        help_text="Cost of goods sold (average cost at sale time).",
    )

    operation_id = models.UUIDField(null=True, blank=True, unique=True)

    performed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
        help_text="Staff member who recorded the sale",
    )

    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_amount__gte=0),
                name="chk_sale_total_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(total_cost__gte=0),
                name="chk_sale_cost_gte_zero",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Sale records are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Sale records are immutable and cannot be deleted")

    @property
    def gross_profit(self) -> Decimal:
        return Decimal(self.total_amount or 0) - Decimal(self.total_cost or 0)

    def __str__(self):
        return f"Sale {self.id} | {self.customer_name} | {self.total_amount}"
