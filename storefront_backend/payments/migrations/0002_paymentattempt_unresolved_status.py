"""
======================================================
PATH: payments/migrations/0002_paymentattempt_unresolved_status.py
======================================================
MIGRATION: ADD "unresolved" PaymentAttempt status (settled, order not confirmed)
"""

from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("payments", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="paymentattempt",
            name="status",
            field=models.CharField(
                max_length=32,
                choices=[
                    ("requested", "Requested"),
                    ("confirmed", "Confirmed"),
                    ("amount_mismatch", "Amount mismatch"),
                    ("failed", "Failed"),
                    ("unresolved", "Unresolved"),
                ],
                default="requested",
            ),
        ),
    ]
