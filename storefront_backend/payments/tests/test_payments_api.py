# payments/tests/test_payments_api.py

from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.models import TokenUser

from orders.models import Order
from payments.tests.test_payment_confirmation import FakeGateway, _make_order


class PaymentsAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=TokenUser({"sub": "user_A"}))
        self.order = _make_order(total="35000.00")

    def test_get_order_for_payment(self):
        resp = self.client.get(reverse("payments:payment-order", args=[self.order.id]))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["total_amount"], "35000.00")

    def test_other_principals_order_renders_as_not_found(self):
        other = _make_order(principal="user_B")

        resp = self.client.get(reverse("payments:payment-order", args=[other.id]))

        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["code"], "NOT_FOUND")

    def test_confirm_payment(self):
        with mock.patch("payments.services.payment_confirmation.TossPaymentsClient", FakeGateway):
            resp = self.client.post(
                reverse("payments:payment-confirm"),
                {"paymentKey": "pk_api_0001", "orderId": str(self.order.id), "amount": 35000},
                format="json",
            )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["order"]["status"], "confirmed")
        self.assertEqual(resp.data["settlement"]["status"], "DONE")
        self.assertFalse(resp.data["replayed"])

    def test_gateway_error_is_502_and_order_stays_pending(self):
        from common.exceptions import PaymentGatewayError

        def failing_gateway():
            return FakeGateway(error=PaymentGatewayError("Card declined"))

        with mock.patch("payments.services.payment_confirmation.TossPaymentsClient", failing_gateway):
            resp = self.client.post(
                reverse("payments:payment-confirm"),
                {"paymentKey": "pk_api_0002", "orderId": str(self.order.id), "amount": 35000},
                format="json",
            )

        self.assertEqual(resp.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(resp.data["error"]["code"], "PAYMENT_GATEWAY_ERROR")
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)

    def test_already_confirmed_order_is_409(self):
        Order.objects.filter(id=self.order.id).update(status=Order.STATUS_CONFIRMED)

        resp = self.client.get(reverse("payments:payment-order", args=[self.order.id]))

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["error"]["code"], "ORDER_NOT_PAYABLE")
