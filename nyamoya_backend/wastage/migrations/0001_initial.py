from __future__ import annotations

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
        ("materials", "0001_initial"),
        ("products", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="WastageEntry",
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
                (
                    "item_type",
                    models.CharField(
                        choices=[
                            ("raw_material", "Raw material"),
                            ("finished_good", "Finished good"),
                        ],
                        max_length=16,
                    ),
                ),
                ("item_name", models.CharField(max_length=255)),
                ("quantity_lost", models.DecimalField(decimal_places=4, max_digits=18)),
                ("reason", models.CharField(max_length=255)),
                ("unit_cost_at_loss", models.DecimalField(decimal_places=10, max_digits=24)),
                ("valuation_at_loss", models.DecimalField(decimal_places=6, max_digits=24)),
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
                        related_name="wastage_entry",
                        to="accounting.expense",
                    ),
                ),
                (
                    "material",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="wastage_entries",
                        to="materials.rawmaterial",
                    ),
                ),
                (
                    "performed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="wastage_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="wastage_entries",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Wastage entries",
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity_lost__gt", 0)),
                        name="chk_wastage_qty_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("item_type", "raw_material"),
                                ("material__isnull", False),
                                ("product__isnull", True),
                            ),
                            models.Q(
                                ("item_type", "finished_good"),
                                ("product__isnull", False),
                                ("material__isnull", True),
                            ),
                            _connector="OR",
                        ),
                        name="chk_wastage_exactly_one_item",
                    ),
                ],
            },
        ),
    ]
