# cart/models/cart_item.py

"""
CART ITEM MODEL

Purpose:
- One (product, quantity) line in a principal's cart.
- The principal is the identity provider's opaque user id (clerk_id).

Rules:
- One line per (principal, product) (DB constraint); repeated adds merge.
- Quantity must be >= 1.
- Price is NOT snapshotted here; the order workflow prices from the live product.
- Deleting a product deletes its cart lines (CASCADE).
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product


class CartItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    clerk_id = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Owning principal (identity provider user id)",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="cart_items",
    )

    quantity = models.PositiveIntegerField(help_text="Must be greater than zero")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["clerk_id", "product"],
                name="unique_product_per_principal_cart",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="cart_item_quantity_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["clerk_id", "created_at"], name="cart_item_owner_created_idx"),
        ]

    def clean(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValidationError({"quantity": "Quantity must be greater than zero"})

    @property
    def is_available(self) -> bool:
        """Product still sellable at this quantity (active + enough stock)."""
        product = self.product
        return bool(product.is_active) and int(product.stock_quantity or 0) >= int(self.quantity or 0)

    @property
    def line_total(self):
        return self.product.price * int(self.quantity or 0)

    def __str__(self):
        return f"{getattr(self.product, 'name', 'Product')} x {self.quantity}"
