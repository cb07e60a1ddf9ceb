"""
======================================================
PATH: cart/migrations/0001_initial.py
======================================================
MIGRATION: CREATE CartItem (one line per principal + product)
"""

from __future__ import annotations

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CartItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                (
                    "clerk_id",
                    models.CharField(
                        max_length=255,
                        db_index=True,
                        help_text="Owning principal (identity provider user id)",
                    ),
                ),
                ("quantity", models.PositiveIntegerField(help_text="Must be greater than zero")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cart_items",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["clerk_id", "created_at"], name="cart_item_owner_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=["clerk_id", "product"],
                        name="unique_product_per_principal_cart",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(quantity__gte=1),
                        name="cart_item_quantity_positive",
                    ),
                ],
            },
        ),
    ]
