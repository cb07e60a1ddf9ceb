# payments/tests/test_payment_confirmation.py

"""
PAYMENT CONFIRMATION TESTS

Run with:
    python manage.py test payments -v 2

GUARANTEES:
- A settlement that differs from the order total leaves the order pending
- A confirmed order is not payable again
- Gateway failures leave the order pending and are retryable
- A confirmed payment key is never sent to the gateway twice
- Another principal's order looks exactly like a missing one
- A settled payment is stored even when the order cannot be confirmed
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from unittest import mock

from django.test import TestCase

from common.exceptions import (
    AmountMismatch,
    Forbidden,
    NotFound,
    OrderNotPayable,
    PaymentGatewayError,
    PersistenceError,
)
from orders.models import Order, OrderItem
from orders.services import OrderStore
from payments.models import PaymentAttempt
from payments.services import PaymentConfirmationService


class FakeGateway:
    def __init__(self, *, total_amount=None, error=None):
        self.total_amount = total_amount
        self.error = error
        self.calls = []

    def confirm(self, payment_key, order_id, amount):
        self.calls.append((payment_key, str(order_id), amount))
        if self.error is not None:
            raise self.error
        total = self.total_amount if self.total_amount is not None else amount
        return {
            "paymentKey": payment_key,
            "orderId": str(order_id),
            "status": "DONE",
            "totalAmount": int(total),
            "method": "CARD",
        }


def _make_order(*, principal="user_A", total="35000.00", status=Order.STATUS_PENDING):
    order = Order.objects.create(
        clerk_id=principal,
        total_amount=Decimal(total),
        status=status,
        shipping_address={"name": "Kim", "address": "Seoul"},
    )
    OrderItem.objects.create(order=order, product_name="Backpack", quantity=1, price=Decimal(total))
    return order


class GetOrderForPaymentTests(TestCase):
    def setUp(self):
        self.service = PaymentConfirmationService(gateway=FakeGateway())

    def test_pending_order_is_payable(self):
        order = _make_order()
        found = self.service.get_order_for_payment("user_A", order.id)
        self.assertEqual(found.order.id, order.id)
        self.assertEqual(len(found.lines), 1)

    def test_confirmed_order_is_not_payable(self):
        order = _make_order(status=Order.STATUS_CONFIRMED)

        with self.assertRaises(OrderNotPayable) as ctx:
            self.service.get_order_for_payment("user_A", order.id)

        self.assertIn("confirmed", ctx.exception.message)

    def test_other_principal_is_forbidden_and_concealed(self):
        order = _make_order(principal="user_B")

        with self.assertRaises(Forbidden) as ctx:
            self.service.get_order_for_payment("user_A", order.id)

        self.assertTrue(ctx.exception.conceal_existence)

    def test_missing_order_is_not_found(self):
        with self.assertRaises(NotFound):
            self.service.get_order_for_payment("user_A", uuid.uuid4())


class FinalizeOrderTests(TestCase):
    def setUp(self):
        self.service = PaymentConfirmationService(gateway=FakeGateway())
        self.order = _make_order(total="35000.00")

    def test_matching_settlement_confirms_order(self):
        confirmed = self.service.finalize_order("user_A", self.order.id, {"totalAmount": 35000})

        self.assertEqual(confirmed.status, Order.STATUS_CONFIRMED)
        self.assertIsNotNone(confirmed.confirmed_at)

    def test_mismatched_settlement_leaves_order_pending(self):
        with self.assertRaises(AmountMismatch) as ctx:
            self.service.finalize_order("user_A", self.order.id, {"totalAmount": 30000})

        self.assertEqual(ctx.exception.expected, Decimal("35000.00"))
        self.assertEqual(ctx.exception.settled, Decimal("30000.00"))
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)

    def test_finalize_by_other_principal_is_refused(self):
        with self.assertRaises(Forbidden):
            self.service.finalize_order("user_B", self.order.id, {"totalAmount": 35000})

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)

    def test_finalize_twice_is_not_payable(self):
        self.service.finalize_order("user_A", self.order.id, {"totalAmount": 35000})

        with self.assertRaises(OrderNotPayable):
            self.service.finalize_order("user_A", self.order.id, {"totalAmount": 35000})


class ConfirmAndFinalizeTests(TestCase):
    def setUp(self):
        self.order = _make_order(total="35000.00")

    def test_happy_path_records_confirmed_attempt(self):
        gateway = FakeGateway()
        service = PaymentConfirmationService(gateway=gateway)

        result = service.confirm_and_finalize("user_A", "pk_live_0001", self.order.id, Decimal("35000"))

        self.assertEqual(result.order.status, Order.STATUS_CONFIRMED)
        self.assertEqual(result.settlement["status"], "DONE")
        self.assertEqual(len(gateway.calls), 1)

        attempt = PaymentAttempt.objects.get(payment_key="pk_live_0001")
        self.assertEqual(attempt.status, PaymentAttempt.STATUS_CONFIRMED)
        self.assertEqual(attempt.settled_amount, Decimal("35000.00"))

    def test_replay_of_confirmed_key_skips_gateway(self):
        gateway = FakeGateway()
        service = PaymentConfirmationService(gateway=gateway)
        service.confirm_and_finalize("user_A", "pk_live_0002", self.order.id, Decimal("35000"))

        result = service.confirm_and_finalize("user_A", "pk_live_0002", self.order.id, Decimal("35000"))

        self.assertTrue(result.replayed)
        self.assertEqual(len(gateway.calls), 1)
        self.assertEqual(result.order.status, Order.STATUS_CONFIRMED)

    def test_requested_amount_mismatch_never_reaches_gateway(self):
        gateway = FakeGateway()
        service = PaymentConfirmationService(gateway=gateway)

        with self.assertRaises(AmountMismatch):
            service.confirm_and_finalize("user_A", "pk_live_0003", self.order.id, Decimal("100"))

        self.assertEqual(gateway.calls, [])
        self.assertFalse(PaymentAttempt.objects.exists())

    def test_settlement_mismatch_is_recorded_for_reconciliation(self):
        service = PaymentConfirmationService(gateway=FakeGateway(total_amount=30000))

        with self.assertRaises(AmountMismatch):
            service.confirm_and_finalize("user_A", "pk_live_0004", self.order.id, Decimal("35000"))

        attempt = PaymentAttempt.objects.get(payment_key="pk_live_0004")
        self.assertEqual(attempt.status, PaymentAttempt.STATUS_AMOUNT_MISMATCH)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)

    def test_gateway_failure_keeps_order_pending_and_allows_retry(self):
        failing = PaymentConfirmationService(
            gateway=FakeGateway(error=PaymentGatewayError("Card declined", gateway_code="REJECT_CARD_PAYMENT"))
        )

        with self.assertRaises(PaymentGatewayError):
            failing.confirm_and_finalize("user_A", "pk_live_0005", self.order.id, Decimal("35000"))

        attempt = PaymentAttempt.objects.get(payment_key="pk_live_0005")
        self.assertEqual(attempt.status, PaymentAttempt.STATUS_FAILED)
        self.assertEqual(attempt.failure_message, "Card declined")
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)

        retry = PaymentConfirmationService(gateway=FakeGateway())
        result = retry.confirm_and_finalize("user_A", "pk_live_0005", self.order.id, Decimal("35000"))
        self.assertEqual(result.order.status, Order.STATUS_CONFIRMED)

    def test_confirmed_order_cannot_be_paid_with_new_key(self):
        service = PaymentConfirmationService(gateway=FakeGateway())
        service.confirm_and_finalize("user_A", "pk_live_0006", self.order.id, Decimal("35000"))

        with self.assertRaises(OrderNotPayable):
            service.confirm_and_finalize("user_A", "pk_live_0007", self.order.id, Decimal("35000"))


class RacingGateway(FakeGateway):
    """Settles the payment after another request already confirmed the order."""

    def confirm(self, payment_key, order_id, amount):
        Order.objects.filter(id=order_id).update(status=Order.STATUS_CONFIRMED)
        return super().confirm(payment_key, order_id, amount)


class SettledButNotConfirmedTests(TestCase):
    def setUp(self):
        self.order = _make_order(total="35000.00")

    def test_settlement_survives_order_confirmed_elsewhere(self):
        service = PaymentConfirmationService(gateway=RacingGateway())

        with self.assertRaises(OrderNotPayable):
            service.confirm_and_finalize("user_A", "pk_live_0101", self.order.id, Decimal("35000"))

        attempt = PaymentAttempt.objects.get(payment_key="pk_live_0101")
        self.assertEqual(attempt.status, PaymentAttempt.STATUS_UNRESOLVED)
        self.assertEqual(attempt.gateway_status, "DONE")
        self.assertEqual(attempt.gateway_payload["totalAmount"], 35000)
        self.assertEqual(attempt.settled_amount, Decimal("35000.00"))
        self.assertNotEqual(attempt.failure_message, "")

    def test_store_failure_after_settlement_is_recorded(self):
        service = PaymentConfirmationService(gateway=FakeGateway())

        with mock.patch.object(OrderStore, "update_status", side_effect=PersistenceError("boom")):
            with self.assertRaises(PersistenceError):
                service.confirm_and_finalize("user_A", "pk_live_0102", self.order.id, Decimal("35000"))

        attempt = PaymentAttempt.objects.get(payment_key="pk_live_0102")
        self.assertEqual(attempt.status, PaymentAttempt.STATUS_UNRESOLVED)
        self.assertEqual(attempt.gateway_payload["paymentKey"], "pk_live_0102")
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)

    def test_unresolved_key_is_not_sent_again(self):
        service = PaymentConfirmationService(gateway=FakeGateway())
        with mock.patch.object(OrderStore, "update_status", side_effect=PersistenceError("boom")):
            with self.assertRaises(PersistenceError):
                service.confirm_and_finalize("user_A", "pk_live_0103", self.order.id, Decimal("35000"))

        gateway = FakeGateway()
        retry = PaymentConfirmationService(gateway=gateway)
        with self.assertRaises(OrderNotPayable):
            retry.confirm_and_finalize("user_A", "pk_live_0103", self.order.id, Decimal("35000"))

        self.assertEqual(gateway.calls, [])
        attempt = PaymentAttempt.objects.get(payment_key="pk_live_0103")
        self.assertEqual(attempt.status, PaymentAttempt.STATUS_UNRESOLVED)
