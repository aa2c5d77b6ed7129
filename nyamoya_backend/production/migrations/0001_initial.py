from __future__ import annotations

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("materials", "0001_initial"),
        ("products", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ProductionBatch",
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
                ("batch_number", models.CharField(max_length=64, unique=True)),
                ("quantity_produced", models.DecimalField(decimal_places=4, max_digits=18)),
                ("total_cost", models.DecimalField(decimal_places=6, max_digits=24)),
                ("unit_cost", models.DecimalField(decimal_places=10, max_digits=24)),
                ("product_average_before", models.DecimalField(decimal_places=10, max_digits=24)),
                ("product_average_after", models.DecimalField(decimal_places=10, max_digits=24)),
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
                    "performed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="production_batches",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="production_batches",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity_produced__gt", 0)),
                        name="chk_batch_qty_gt_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="BatchIngredient",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("position", models.PositiveIntegerField(default=0)),
                ("quantity", models.DecimalField(decimal_places=4, max_digits=18)),
                ("unit_cost_at_time_of_use", models.DecimalField(decimal_places=10, max_digits=24)),
                ("line_cost", models.DecimalField(decimal_places=6, max_digits=24)),
                (
                    "batch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="ingredients",
                        to="production.productionbatch",
                    ),
                ),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="batch_usages",
                        to="materials.rawmaterial",
                    ),
                ),
            ],
            options={
                "ordering": ["batch", "position"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)),
                        name="chk_batch_ingredient_qty_gt_zero",
                    ),
                ],
            },
        ),
    ]
