# orders/models/order.py

import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone


class Order(models.Model):
    """
    Customer order created from a cart at checkout.

    GUARANTEES:
    - total_amount is frozen at creation (sum of line price x quantity)
    - Financial fields never change after creation
    - status only moves along orders.services.order_lifecycle rules

    PAYMENT:
    - Created as pending
    - Becomes confirmed only after the gateway settles the exact total
    """

    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_SHIPPED = "shipped"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    clerk_id = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Owning principal (identity provider user id)",
    )

    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
    )

    shipping_address = models.JSONField(
        default=dict,
        help_text="name, phone, postcode, address, detailAddress",
    )

    order_note = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["clerk_id", "created_at"], name="order_owner_created_idx"),
            models.Index(fields=["status"], name="order_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="order_total_non_negative",
            ),
        ]

    _IMMUTABLE_FIELDS = (
        "clerk_id",
        "total_amount",
        "shipping_address",
        "order_note",
        "created_at",
    )

    def _validate_immutable(self, previous: "Order"):
        # avoid import cycle: lifecycle rules reference Order status constants
        from orders.services.order_lifecycle import validate_transition

        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValueError(f"Order field '{field}' cannot be changed after creation.")

        if self.status != previous.status:
            validate_transition(order=previous, target_status=self.status)

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Order.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        if self.status == self.STATUS_CONFIRMED and not self.confirmed_at:
            self.confirmed_at = timezone.now()

        super().save(*args, **kwargs)

    @property
    def is_payable(self) -> bool:
        return self.status == self.STATUS_PENDING

    def __str__(self):
        return f"{self.id} | {self.total_amount} | {self.status}"
