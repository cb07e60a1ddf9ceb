# orders/services/order_store.py

"""
ORDER STORE (PERSISTENCE COLLABORATOR)

    insert_order(...)                 -> Order
    insert_lines(order, lines)        -> [OrderItem]    (one bulk insert)
    update_status(id, status, ...)    -> bool           (conditional write)
    delete(id)                        -> None
    find(id, principal=None)          -> Order | None
    list_for(principal)               -> [Order]        (newest first)
    lines_for(order_id)               -> [OrderItem]

Each call runs in its own transaction.atomic() block and translates
DatabaseError into PersistenceError. Callers get no cross-call transaction.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from common.exceptions import PersistenceError
from orders.models import Order, OrderItem

logger = logging.getLogger(__name__)


class OrderStore:
    def __init__(self, order_model=Order, item_model=OrderItem):
        self.Order = order_model
        self.OrderItem = item_model

    def insert_order(self, *, principal: str, total_amount, shipping_address: dict, order_note: str | None = None):
        try:
            with transaction.atomic():
                return self.Order.objects.create(
                    clerk_id=principal,
                    total_amount=total_amount,
                    status=self.Order.STATUS_PENDING,
                    shipping_address=shipping_address,
                    order_note=order_note,
                )
        except DatabaseError as exc:
            raise PersistenceError("Failed to create order") from exc

    def insert_lines(self, order, lines) -> list:
        """
        lines: iterable of objects exposing product_id, product_name, quantity, unit_price.
        """
        now = timezone.now()
        rows = [
            self.OrderItem(
                order=order,
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity,
                price=line.unit_price,
                created_at=now,
            )
            for line in lines
        ]
        try:
            with transaction.atomic():
                return self.OrderItem.objects.bulk_create(rows)
        except DatabaseError as exc:
            raise PersistenceError("Failed to create order items", order_id=str(order.id)) from exc

    def update_status(self, order_id, *, status: str, expected_status: str | None = None) -> bool:
        """
        Write a new status. With expected_status the write only lands if the
        row still holds that status. Returns True when a row was written.
        """
        fields = {"status": status, "updated_at": timezone.now()}
        if status == self.Order.STATUS_CONFIRMED:
            fields["confirmed_at"] = timezone.now()

        qs = self.Order.objects.filter(id=order_id)
        if expected_status is not None:
            qs = qs.filter(status=expected_status)

        try:
            with transaction.atomic():
                return qs.update(**fields) == 1
        except DatabaseError as exc:
            raise PersistenceError("Failed to update order status", order_id=str(order_id)) from exc

    def delete(self, order_id) -> None:
        try:
            with transaction.atomic():
                self.Order.objects.filter(id=order_id).delete()
        except DatabaseError as exc:
            raise PersistenceError("Failed to delete order", order_id=str(order_id)) from exc

    def find(self, order_id, *, principal: str | None = None):
        try:
            qs = self.Order.objects.filter(id=order_id)
            if principal is not None:
                qs = qs.filter(clerk_id=principal)
            return qs.first()
        except (ValueError, ValidationError):
            return None
        except DatabaseError as exc:
            raise PersistenceError("Order lookup failed", order_id=str(order_id)) from exc

    def list_for(self, principal: str) -> list:
        try:
            return list(self.Order.objects.filter(clerk_id=principal).order_by("-created_at"))
        except DatabaseError as exc:
            raise PersistenceError("Failed to load orders") from exc

    def lines_for(self, order_id) -> list:
        try:
            return list(self.OrderItem.objects.filter(order_id=order_id).order_by("created_at", "id"))
        except DatabaseError as exc:
            raise PersistenceError("Failed to load order items", order_id=str(order_id)) from exc
