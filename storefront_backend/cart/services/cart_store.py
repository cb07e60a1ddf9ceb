# cart/services/cart_store.py

"""
CART STORE (PERSISTENCE COLLABORATOR)

Row-level access to cart lines. Every read that returns lines joins the
product so callers never issue per-line product queries.

All calls:
- run in their own transaction.atomic() block (one round trip)
- translate DatabaseError into PersistenceError
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from cart.models import CartItem
from common.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class CartStore:
    def __init__(self, item_model=CartItem):
        self.CartItem = item_model

    def _lines(self):
        return self.CartItem.objects.select_related("product")

    def find(self, line_id):
        try:
            return self._lines().filter(id=line_id).first()
        except (ValueError, ValidationError):
            return None
        except DatabaseError as exc:
            raise PersistenceError("Cart line lookup failed", cart_line_id=str(line_id)) from exc

    def find_for_product(self, principal: str, product_id):
        try:
            return self._lines().filter(clerk_id=principal, product_id=product_id).first()
        except DatabaseError as exc:
            raise PersistenceError("Cart line lookup failed", product_id=str(product_id)) from exc

    def insert(self, principal: str, product, quantity: int):
        try:
            with transaction.atomic():
                return self.CartItem.objects.create(
                    clerk_id=principal,
                    product=product,
                    quantity=quantity,
                )
        except DatabaseError as exc:
            raise PersistenceError("Failed to add item to cart", product_id=str(product.id)) from exc

    def update_quantity(self, line, quantity: int):
        line.quantity = quantity
        try:
            with transaction.atomic():
                line.save(update_fields=["quantity", "updated_at"])
        except DatabaseError as exc:
            raise PersistenceError("Failed to update cart item", cart_line_id=str(line.id)) from exc
        return line

    def delete(self, line_id) -> None:
        try:
            with transaction.atomic():
                self.CartItem.objects.filter(id=line_id).delete()
        except DatabaseError as exc:
            raise PersistenceError("Failed to remove cart item", cart_line_id=str(line_id)) from exc

    def list_for(self, principal: str) -> list:
        try:
            return list(self._lines().filter(clerk_id=principal).order_by("-created_at"))
        except DatabaseError as exc:
            raise PersistenceError("Failed to load cart") from exc

    def count_for(self, principal: str) -> int:
        try:
            return self.CartItem.objects.filter(clerk_id=principal).count()
        except DatabaseError as exc:
            raise PersistenceError("Failed to count cart items") from exc

    def delete_for(self, principal: str) -> int:
        """Delete every line owned by principal. Returns the number of rows removed."""
        try:
            with transaction.atomic():
                deleted, _ = self.CartItem.objects.filter(clerk_id=principal).delete()
        except DatabaseError as exc:
            raise PersistenceError("Failed to clear cart") from exc
        return deleted
