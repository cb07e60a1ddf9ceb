# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a sellable catalog product.

    STOCK MODEL:
    - stock_quantity lives on the product row (no batches)
    - stock_quantity is never negative (DB check constraint)
    - Only the order workflow decrements stock

    VISIBILITY:
    - Inactive products are excluded from every customer-facing read
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(null=True, blank=True)

    price = models.DecimalField(max_digits=10, decimal_places=2)

    category = models.CharField(max_length=64, null=True, blank=True, db_index=True)

    stock_quantity = models.PositiveIntegerField(default=0)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active", "created_at"], name="product_active_created_idx"),
            models.Index(fields=["is_active", "category"], name="product_active_category_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="product_stock_non_negative",
            ),
        ]

    def clean(self):
        if self.price is None or Decimal(self.price) < Decimal("0.00"):
            raise ValidationError({"price": "Price cannot be negative"})

    def is_in_stock(self, quantity: int = 1) -> bool:
        return int(self.stock_quantity or 0) >= int(quantity)

    def __str__(self):
        return f"{self.name} ({self.stock_quantity} in stock)"
