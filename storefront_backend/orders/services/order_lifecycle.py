"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed status transitions
for Order entities.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- Single source of truth
"""

from common.exceptions import InvalidOrderTransition
from orders.models import Order

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_DELIVERED,
    Order.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_CONFIRMED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_CONFIRMED: {
        Order.STATUS_SHIPPED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_SHIPPED: {
        Order.STATUS_DELIVERED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if not can_transition(
        from_status=order.status,
        to_status=target_status,
    ):
        raise InvalidOrderTransition(
            f"Order {order.id} cannot transition from "
            f"'{order.status}' to '{target_status}'",
            order_id=str(order.id),
            status=order.status,
            target_status=target_status,
        )
