# payments/models/payment_attempt.py

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class PaymentAttempt(models.Model):
    """
    One gateway confirm call for an Order.

    Idempotency rule:
    - payment_key is unique (Toss paymentKey)
    - a key already CONFIRMED is never sent to the gateway again

    Reconciliation:
    - AMOUNT_MISMATCH rows mean money moved at the gateway but the order
      stayed pending; an operator must resolve them.
    - UNRESOLVED rows mean the gateway settled but the order could not be
      moved to confirmed afterwards.
    - Rows in either state keep the settlement payload and are never
      reopened by a retry.
    """

    PROVIDER_TOSS = "toss"
    PROVIDER_CHOICES = [
        (PROVIDER_TOSS, "Toss Payments"),
    ]

    STATUS_REQUESTED = "requested"
    STATUS_CONFIRMED = "confirmed"
    STATUS_AMOUNT_MISMATCH = "amount_mismatch"
    STATUS_FAILED = "failed"
    STATUS_UNRESOLVED = "unresolved"

    STATUS_CHOICES = [
        (STATUS_REQUESTED, "Requested"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_AMOUNT_MISMATCH, "Amount mismatch"),
        (STATUS_FAILED, "Failed"),
        (STATUS_UNRESOLVED, "Unresolved"),
    ]

    NEEDS_RECONCILIATION = (STATUS_AMOUNT_MISMATCH, STATUS_UNRESOLVED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="payment_attempts",
    )

    provider = models.CharField(max_length=32, choices=PROVIDER_CHOICES, default=PROVIDER_TOSS)

    payment_key = models.CharField(
        max_length=200,
        unique=True,
        help_text="Gateway payment key. Unique for idempotency.",
    )

    requested_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    settled_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_REQUESTED)

    gateway_status = models.CharField(max_length=32, blank=True, default="")
    gateway_payload = models.JSONField(default=dict, blank=True)
    failure_message = models.CharField(max_length=500, blank=True, default="")

    requested_at = models.DateTimeField(auto_now_add=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-requested_at"]
        indexes = [
            models.Index(fields=["status"], name="payment_attempt_status_idx"),
            models.Index(fields=["order", "requested_at"], name="payment_attempt_order_idx"),
        ]

    def mark_confirmed(self, payload=None):
        self.status = self.STATUS_CONFIRMED
        self.confirmed_at = self.confirmed_at or timezone.now()
        if payload is not None:
            self.gateway_payload = payload

    def __str__(self):
        return f"{self.provider}:{self.payment_key} | {self.status}"
