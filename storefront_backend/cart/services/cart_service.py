# cart/services/cart_service.py

"""
CART SERVICE

Per-principal cart operations with stock-aware add/merge.

Rules:
- Quantities are whole units >= 1 (InvalidQuantity otherwise).
- Only active products can be added or re-quantified (NotFound otherwise).
- Stock is checked against the MERGED quantity on repeated add.
- A line owned by another principal is never touched (Forbidden).
- No price is stored on the line; money is computed from the live product.

Stock is NOT reserved here. The order workflow re-validates at checkout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from cart.services.cart_store import CartStore
from common.exceptions import Forbidden, InsufficientStock, InvalidQuantity, NotFound
from common.money import money, to_int_qty
from products.services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


@dataclass
class CartSummary:
    items: list = field(default_factory=list)
    line_count: int = 0
    total_quantity: int = 0
    subtotal: Decimal = Decimal("0.00")
    has_unavailable_items: bool = False


def _validate_quantity(quantity) -> int:
    try:
        qty = to_int_qty(quantity)
    except ValueError as exc:
        raise InvalidQuantity(requested=str(quantity)) from exc
    if qty < 1:
        raise InvalidQuantity(requested=qty)
    return qty


class CartService:
    def __init__(self, *, catalog: CatalogStore | None = None, carts: CartStore | None = None):
        self.catalog = catalog or CatalogStore()
        self.carts = carts or CartStore()

    def _active_product(self, product_id):
        product = self.catalog.find(product_id)
        if product is None:
            raise NotFound("Product not found", product_id=str(product_id))
        return product

    def _owned_line(self, principal: str, cart_line_id):
        line = self.carts.find(cart_line_id)
        if line is None:
            raise NotFound("Cart item not found", cart_line_id=str(cart_line_id))
        if line.clerk_id != principal:
            logger.warning(
                "Cart line ownership mismatch",
                extra={"cart_line_id": str(cart_line_id)},
            )
            raise Forbidden("Cart item belongs to another user", cart_line_id=str(cart_line_id))
        return line

    def add_item(self, principal: str, product_id, quantity=1):
        qty = _validate_quantity(quantity)
        product = self._active_product(product_id)

        available = int(product.stock_quantity or 0)
        if available < qty:
            raise InsufficientStock(
                product_id=product.id,
                product_name=product.name,
                requested=qty,
                available=available,
            )

        existing = self.carts.find_for_product(principal, product.id)
        if existing is not None:
            merged = int(existing.quantity) + qty
            if available < merged:
                raise InsufficientStock(
                    product_id=product.id,
                    product_name=product.name,
                    requested=merged,
                    available=available,
                    in_cart=int(existing.quantity),
                )
            line = self.carts.update_quantity(existing, merged)
        else:
            line = self.carts.insert(principal, product, qty)

        line.product = product
        logger.info(
            "Cart item added",
            extra={"product_id": str(product.id), "quantity": int(line.quantity)},
        )
        return line

    def remove_item(self, principal: str, cart_line_id) -> None:
        line = self._owned_line(principal, cart_line_id)
        self.carts.delete(line.id)

    def set_quantity(self, principal: str, cart_line_id, quantity):
        qty = _validate_quantity(quantity)
        line = self._owned_line(principal, cart_line_id)

        product = self._active_product(line.product_id)
        available = int(product.stock_quantity or 0)
        if available < qty:
            raise InsufficientStock(
                product_id=product.id,
                product_name=product.name,
                requested=qty,
                available=available,
            )

        line = self.carts.update_quantity(line, qty)
        line.product = product
        return line

    def list_items(self, principal: str) -> list:
        return self.carts.list_for(principal)

    def count(self, principal: str) -> int:
        return self.carts.count_for(principal)

    def clear(self, principal: str) -> int:
        removed = self.carts.delete_for(principal)
        if removed:
            logger.info("Cart cleared", extra={"removed": removed})
        return removed

    def summary(self, principal: str) -> CartSummary:
        items = self.list_items(principal)
        subtotal = Decimal("0.00")
        total_quantity = 0
        unavailable = False

        for line in items:
            subtotal += money(line.product.price) * int(line.quantity)
            total_quantity += int(line.quantity)
            if not line.is_available:
                unavailable = True

        return CartSummary(
            items=items,
            line_count=len(items),
            total_quantity=total_quantity,
            subtotal=money(subtotal),
            has_unavailable_items=unavailable,
        )
