from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
        ("contacts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="RawMaterial",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(db_index=True, max_length=255)),
                (
                    "unit",
                    models.CharField(help_text="Stock unit, e.g. kg, litre, pcs", max_length=32),
                ),
                (
                    "current_stock",
                    models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=18),
                ),
                (
                    "average_cost",
                    models.DecimalField(
                        decimal_places=10,
                        default=Decimal("0"),
                        help_text="Weighted-average cost per unit (service-managed only).",
                        max_digits=24,
                    ),
                ),
                ("version", models.PositiveIntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("current_stock__gte", 0)),
                        name="chk_rawmaterial_stock_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("average_cost__gte", 0)),
                        name="chk_rawmaterial_avg_cost_gte_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="MaterialReceipt",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("quantity", models.DecimalField(decimal_places=4, max_digits=18)),
                ("unit_price", models.DecimalField(decimal_places=10, max_digits=24)),
                ("total_cost", models.DecimalField(decimal_places=6, max_digits=24)),
                ("average_cost_before", models.DecimalField(decimal_places=10, max_digits=24)),
                ("average_cost_after", models.DecimalField(decimal_places=10, max_digits=24)),
                ("stock_after", models.DecimalField(decimal_places=4, max_digits=18)),
                ("operation_id", models.UUIDField(blank=True, null=True, unique=True)),
                (
                    "created_at",
                    models.DateTimeField(
                        db_index=True,
                        default=django.utils.timezone.now,
                        editable=False,
                    ),
                ),
                (
                    "expense",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="material_receipt",
                        to="accounting.expense",
                    ),
                ),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="receipts",
                        to="materials.rawmaterial",
                    ),
                ),
                (
                    "performed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="material_receipts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="material_receipts",
                        to="contacts.supplier",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["material", "created_at"],
                        name="materials_m_materia_5c1e0a_idx",
                    )
                ],
            },
        ),
    ]
