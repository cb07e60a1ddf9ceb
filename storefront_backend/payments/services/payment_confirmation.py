# payments/services/payment_confirmation.py

"""
PAYMENT CONFIRMATION (APPLICATION SERVICE)

Purpose:
- Confirm a client-initiated payment with the gateway and move the order
  pending -> confirmed when the settled amount equals the order total.

Flow (confirm_and_finalize):
1) Replay check: a payment_key already CONFIRMED returns the stored settlement
2) Payable check: ownership + status == pending
3) Requested amount must equal the order total (nothing is sent otherwise)
4) Gateway confirm                         -> PaymentGatewayError (retryable)
5) Settlement stored on the attempt before the order is touched
6) Settlement totalAmount == order total   -> AmountMismatch (operator escalation)
7) Conditional status write pending -> confirmed; any other failure here
   leaves the attempt UNRESOLVED for reconciliation

Every gateway call leaves a PaymentAttempt row for reconciliation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import DatabaseError, transaction

from common.exceptions import (
    AmountMismatch,
    Forbidden,
    NotFound,
    OrderNotPayable,
    PaymentGatewayError,
    PersistenceError,
    StorefrontError,
)
from common.money import money
from orders.models import Order
from orders.services import OrderStore, OrderWithLines
from orders.services.order_lifecycle import validate_transition
from payments.models import PaymentAttempt
from payments.services.toss import TossPaymentsClient, mask_payment_key

logger = logging.getLogger(__name__)


@dataclass
class PaymentResult:
    order: Order
    settlement: dict
    lines: list = field(default_factory=list)
    attempt: PaymentAttempt | None = None
    replayed: bool = False


class PaymentConfirmationService:
    def __init__(self, *, gateway=None, orders: OrderStore | None = None, attempt_model=PaymentAttempt):
        self.gateway = gateway or TossPaymentsClient()
        self.orders = orders or OrderStore()
        self.PaymentAttempt = attempt_model

    # -------------------------------------------------
    # ownership
    # -------------------------------------------------

    def _owned_order(self, principal: str, order_id) -> Order:
        order = self.orders.find(order_id)
        if order is None:
            raise NotFound("Order not found", order_id=str(order_id))
        if order.clerk_id != principal:
            logger.warning("Order ownership mismatch", extra={"order_id": str(order_id)})
            raise Forbidden(conceal_existence=True, order_id=str(order_id))
        return order

    # -------------------------------------------------
    # operations
    # -------------------------------------------------

    def get_order_for_payment(self, principal: str, order_id) -> OrderWithLines:
        order = self._owned_order(principal, order_id)
        if not order.is_payable:
            raise OrderNotPayable(order_id=order.id, status=order.status)
        return OrderWithLines(order=order, lines=self.orders.lines_for(order.id))

    def confirm_payment(self, payment_key: str, order_id, amount) -> dict:
        return self.gateway.confirm(payment_key, order_id, amount)

    def finalize_order(self, principal: str, order_id, settlement: dict) -> Order:
        order = self._owned_order(principal, order_id)

        expected = money(order.total_amount)
        try:
            settled = money(settlement.get("totalAmount"))
        except ValueError:
            settled = None

        if settled != expected:
            logger.error(
                "Settled amount does not match order total",
                extra={
                    "order_id": str(order.id),
                    "expected": str(expected),
                    "settled": str(settled),
                    "payment_key": mask_payment_key(settlement.get("paymentKey")),
                },
            )
            raise AmountMismatch(
                order_id=order.id,
                expected=expected,
                settled=settled,
                payment_key=mask_payment_key(settlement.get("paymentKey")),
            )

        if not order.is_payable:
            raise OrderNotPayable(order_id=order.id, status=order.status)
        validate_transition(order=order, target_status=Order.STATUS_CONFIRMED)

        written = self.orders.update_status(
            order.id,
            status=Order.STATUS_CONFIRMED,
            expected_status=Order.STATUS_PENDING,
        )
        if not written:
            current = self.orders.find(order.id)
            raise OrderNotPayable(order_id=order.id, status=getattr(current, "status", None))

        logger.info("Order confirmed", extra={"order_id": str(order.id), "total_amount": str(expected)})
        return self.orders.find(order.id)

    def confirm_and_finalize(self, principal: str, payment_key: str, order_id, amount) -> PaymentResult:
        payment_key = str(payment_key or "").strip()

        replay = self._confirmed_attempt(payment_key)
        if replay is not None:
            order = self._owned_order(principal, replay.order_id)
            if str(order.id) != str(order_id):
                raise NotFound("Order not found", order_id=str(order_id))
            logger.info(
                "Payment already confirmed; returning stored settlement",
                extra={"order_id": str(order.id), "payment_key": mask_payment_key(payment_key)},
            )
            return PaymentResult(
                order=order,
                settlement=replay.gateway_payload,
                lines=self.orders.lines_for(order.id),
                attempt=replay,
                replayed=True,
            )

        order = self.get_order_for_payment(principal, order_id).order

        requested = money(amount)
        if requested != money(order.total_amount):
            raise AmountMismatch(
                "Requested payment amount does not match the order total.",
                order_id=order.id,
                expected=money(order.total_amount),
                settled=requested,
            )

        attempt = self._open_attempt(order, payment_key, requested)

        try:
            settlement = self.confirm_payment(payment_key, order.id, requested)
        except PaymentGatewayError as exc:
            attempt.status = PaymentAttempt.STATUS_FAILED
            attempt.failure_message = exc.message[:500]
            self._save_attempt(attempt)
            raise

        attempt.gateway_payload = settlement
        attempt.gateway_status = str(settlement.get("status") or "")[:32]
        try:
            attempt.settled_amount = money(settlement.get("totalAmount"))
        except ValueError:
            attempt.settled_amount = None
        self._save_attempt(attempt)

        try:
            confirmed = self.finalize_order(principal, order.id, settlement)
        except AmountMismatch:
            attempt.status = PaymentAttempt.STATUS_AMOUNT_MISMATCH
            self._save_attempt(attempt)
            raise
        except StorefrontError as exc:
            logger.error(
                "Gateway settled but order was not confirmed",
                extra={
                    "order_id": str(order.id),
                    "payment_key": mask_payment_key(payment_key),
                    "error_code": exc.code,
                },
            )
            attempt.status = PaymentAttempt.STATUS_UNRESOLVED
            attempt.failure_message = exc.message[:500]
            self._save_attempt(attempt)
            raise

        attempt.mark_confirmed()
        self._save_attempt(attempt)
        return PaymentResult(
            order=confirmed,
            settlement=settlement,
            lines=self.orders.lines_for(confirmed.id),
            attempt=attempt,
        )

    # -------------------------------------------------
    # attempt bookkeeping
    # -------------------------------------------------

    def _confirmed_attempt(self, payment_key: str):
        try:
            return self.PaymentAttempt.objects.filter(
                payment_key=payment_key,
                status=PaymentAttempt.STATUS_CONFIRMED,
            ).first()
        except DatabaseError as exc:
            raise PersistenceError("Payment attempt lookup failed") from exc

    def _open_attempt(self, order: Order, payment_key: str, amount) -> PaymentAttempt:
        try:
            with transaction.atomic():
                attempt, created = self.PaymentAttempt.objects.get_or_create(
                    payment_key=payment_key,
                    defaults={"order": order, "requested_amount": amount},
                )
        except DatabaseError as exc:
            raise PersistenceError("Payment attempt could not be recorded") from exc

        if not created:
            if attempt.order_id != order.id:
                raise NotFound("Order not found", order_id=str(order.id))
            if attempt.status in PaymentAttempt.NEEDS_RECONCILIATION:
                raise OrderNotPayable(
                    "Payment is awaiting reconciliation.",
                    order_id=order.id,
                    status=order.status,
                )
            attempt.status = PaymentAttempt.STATUS_REQUESTED
            attempt.requested_amount = amount
            attempt.failure_message = ""
            self._save_attempt(attempt)
        return attempt

    def _save_attempt(self, attempt: PaymentAttempt) -> None:
        try:
            with transaction.atomic():
                attempt.save()
        except DatabaseError as exc:
            raise PersistenceError("Payment attempt could not be saved") from exc
