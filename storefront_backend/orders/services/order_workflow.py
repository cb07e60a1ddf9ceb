# orders/services/order_workflow.py

"""
ORDER WORKFLOW (APPLICATION SERVICE)

Purpose:
- Convert a principal's cart into a pending Order with immutable lines.

Steps (sequential, no surrounding transaction):
1) Load cart                               -> EmptyCart
2) Re-validate + price every line          -> ProductUnavailable / InsufficientStock
3) Insert order header (pending)           -> PersistenceError, nothing else attempted
4) Bulk insert order lines                 -> on failure the header is deleted
5) Decrement stock, clear cart             -> never rolled back; failures reported

Hard rules:
- Money is computed here from live product prices; the client never sends totals.
- Steps 1-2 are fail-fast: nothing is written if any line is invalid.
- A header without lines is never left visible.

Concurrency:
- Stock writes are compare-and-set against the value read in step 2,
  retried once as a guarded decrement.
- One checkout per principal at a time (cache advisory lock).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from django.conf import settings
from django.core.cache import cache

from cart.services import CartService
from common.exceptions import (
    CheckoutInProgress,
    EmptyCart,
    InsufficientStock,
    PersistenceError,
    ProductUnavailable,
)
from common.money import money
from orders.services.compensation import CompensationStack
from orders.services.order_store import OrderStore
from products.services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT_SECONDS = 30


@dataclass
class PricedLine:
    product_id: object
    product_name: str
    quantity: int
    unit_price: Decimal
    stock_seen: int

    @property
    def line_total(self) -> Decimal:
        return money(self.unit_price * self.quantity)


@dataclass
class StockAdjustmentFailure:
    product_id: str
    product_name: str
    quantity: int
    reason: str


@dataclass
class OrderWithLines:
    order: object
    lines: list = field(default_factory=list)
    stock_failures: list = field(default_factory=list)
    cart_cleared: bool = True


class OrderWorkflow:
    def __init__(
        self,
        *,
        cart: CartService | None = None,
        catalog: CatalogStore | None = None,
        orders: OrderStore | None = None,
        lock_cache=None,
    ):
        self.catalog = catalog or CatalogStore()
        self.cart = cart or CartService(catalog=self.catalog)
        self.orders = orders or OrderStore()
        self.lock_cache = lock_cache or cache
        self.lock_timeout = int(
            getattr(settings, "CHECKOUT_LOCK_TIMEOUT_SECONDS", DEFAULT_LOCK_TIMEOUT_SECONDS)
        )

    # -------------------------------------------------
    # create
    # -------------------------------------------------

    def create_order(self, principal: str, shipping_address: dict, note: str | None = None) -> OrderWithLines:
        # Only serializes checkouts across workers when the cache is shared (see settings/prod.py).
        lock_key = f"checkout-lock:{principal}"
        if not self.lock_cache.add(lock_key, "1", timeout=self.lock_timeout):
            raise CheckoutInProgress()

        try:
            return self._create_order(principal, shipping_address, note)
        finally:
            self.lock_cache.delete(lock_key)

    def _create_order(self, principal: str, shipping_address: dict, note: str | None) -> OrderWithLines:
        cart_lines = self.cart.list_items(principal)
        if not cart_lines:
            raise EmptyCart()

        priced = self._price_lines(cart_lines)
        total = money(sum((p.line_total for p in priced), Decimal("0.00")))

        order = self.orders.insert_order(
            principal=principal,
            total_amount=total,
            shipping_address=shipping_address,
            order_note=(note or "").strip() or None,
        )

        compensations = CompensationStack()
        compensations.push("delete order header", lambda: self.orders.delete(order.id))
        try:
            lines = self.orders.insert_lines(order, priced)
        except Exception:
            failed = compensations.unwind()
            if failed:
                logger.error(
                    "Order header left behind after failed line insert",
                    extra={"order_id": str(order.id)},
                )
            raise
        compensations.discard()

        result = OrderWithLines(order=order, lines=lines)
        result.stock_failures = self._adjust_stock(priced)
        result.cart_cleared = self._clear_cart(principal, order)

        logger.info(
            "Order created",
            extra={
                "order_id": str(order.id),
                "total_amount": str(total),
                "line_count": len(lines),
                "stock_failures": len(result.stock_failures),
            },
        )
        return result

    def _price_lines(self, cart_lines) -> list[PricedLine]:
        priced = []
        for line in cart_lines:
            product = self.catalog.find(line.product_id)
            if product is None:
                name = getattr(getattr(line, "product", None), "name", None)
                raise ProductUnavailable(product_id=line.product_id, product_name=name)

            qty = int(line.quantity)
            available = int(product.stock_quantity or 0)
            if available < qty:
                raise InsufficientStock(
                    product_id=product.id,
                    product_name=product.name,
                    requested=qty,
                    available=available,
                )

            priced.append(
                PricedLine(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=qty,
                    unit_price=money(product.price),
                    stock_seen=available,
                )
            )
        return priced

    def _adjust_stock(self, priced: list[PricedLine]) -> list[StockAdjustmentFailure]:
        failures = []
        for line in priced:
            try:
                written = self.catalog.update_stock(
                    line.product_id,
                    stock_quantity=line.stock_seen - line.quantity,
                    expected=line.stock_seen,
                )
                if not written:
                    # stock moved since step 2
                    written = self.catalog.decrement_stock(line.product_id, quantity=line.quantity)
                reason = "" if written else "insufficient stock at decrement"
            except PersistenceError as exc:
                written = False
                reason = exc.message

            if not written:
                logger.error(
                    "Stock adjustment failed",
                    extra={"product_id": str(line.product_id), "quantity": line.quantity, "reason": reason},
                )
                failures.append(
                    StockAdjustmentFailure(
                        product_id=str(line.product_id),
                        product_name=line.product_name,
                        quantity=line.quantity,
                        reason=reason,
                    )
                )
        return failures

    def _clear_cart(self, principal: str, order) -> bool:
        try:
            self.cart.clear(principal)
        except PersistenceError:
            logger.exception("Cart clear failed after order creation", extra={"order_id": str(order.id)})
            return False
        return True

    # -------------------------------------------------
    # read
    # -------------------------------------------------

    def get_order_by_id(self, principal: str, order_id) -> OrderWithLines | None:
        order = self.orders.find(order_id, principal=principal)
        if order is None:
            return None
        return OrderWithLines(order=order, lines=self.orders.lines_for(order.id))

    def list_orders_for_principal(self, principal: str) -> list[OrderWithLines]:
        results = []
        for order in self.orders.list_for(principal):
            try:
                lines = self.orders.lines_for(order.id)
            except PersistenceError:
                logger.exception("Order lines unavailable", extra={"order_id": str(order.id)})
                lines = []
            results.append(OrderWithLines(order=order, lines=lines))
        return results
