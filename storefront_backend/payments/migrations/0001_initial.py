"""
======================================================
PATH: payments/migrations/0001_initial.py
======================================================
MIGRATION: CREATE PaymentAttempt (gateway confirm audit + idempotency)
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentAttempt",
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
                    "provider",
                    models.CharField(
                        max_length=32,
                        choices=[("toss", "Toss Payments")],
                        default="toss",
                    ),
                ),
                (
                    "payment_key",
                    models.CharField(
                        max_length=200,
                        unique=True,
                        help_text="Gateway payment key. Unique for idempotency.",
                    ),
                ),
                (
                    "requested_amount",
                    models.DecimalField(
                        max_digits=12,
                        decimal_places=2,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                (
                    "settled_amount",
                    models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True),
                ),
                (
                    "status",
                    models.CharField(
                        max_length=32,
                        choices=[
                            ("requested", "Requested"),
                            ("confirmed", "Confirmed"),
                            ("amount_mismatch", "Amount mismatch"),
                            ("failed", "Failed"),
                        ],
                        default="requested",
                    ),
                ),
                ("gateway_status", models.CharField(max_length=32, blank=True, default="")),
                ("gateway_payload", models.JSONField(default=dict, blank=True)),
                ("failure_message", models.CharField(max_length=500, blank=True, default="")),
                ("requested_at", models.DateTimeField(auto_now_add=True)),
                ("confirmed_at", models.DateTimeField(null=True, blank=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payment_attempts",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "ordering": ["-requested_at"],
                "indexes": [
                    models.Index(fields=["status"], name="payment_attempt_status_idx"),
                    models.Index(fields=["order", "requested_at"], name="payment_attempt_order_idx"),
                ],
            },
        ),
    ]
