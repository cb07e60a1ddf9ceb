# payments/tests/test_toss_client.py

import base64
import io
import json
from decimal import Decimal
from unittest import mock
from urllib.error import HTTPError, URLError

from django.test import SimpleTestCase, override_settings

from common.exceptions import PaymentConfigurationError, PaymentGatewayError
from payments.services.toss import TossPaymentsClient, mask_payment_key


class _FakeResponse:
    def __init__(self, body: dict):
        self._raw = json.dumps(body).encode("utf-8")

    def read(self):
        return self._raw

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@override_settings(PAYMENTS={"TOSS": {"SECRET_KEY": "test_sk_abc", "API_BASE": "https://api.tosspayments.com"}})
class TossClientTests(SimpleTestCase):
    def test_confirm_posts_basic_auth_and_payload(self):
        settlement = {"paymentKey": "pk_1", "orderId": "o-1", "status": "DONE", "totalAmount": 35000}

        with mock.patch("payments.services.toss.urlopen", return_value=_FakeResponse(settlement)) as m:
            result = TossPaymentsClient().confirm("pk_1", "o-1", Decimal("35000.00"))

        self.assertEqual(result, settlement)
        req = m.call_args.args[0]
        self.assertEqual(req.full_url, "https://api.tosspayments.com/v1/payments/confirm")
        self.assertEqual(req.get_method(), "POST")
        expected = "Basic " + base64.b64encode(b"test_sk_abc:").decode("ascii")
        self.assertEqual(req.get_header("Authorization"), expected)
        self.assertEqual(
            json.loads(req.data.decode("utf-8")),
            {"paymentKey": "pk_1", "orderId": "o-1", "amount": 35000},
        )
        self.assertEqual(m.call_args.kwargs["timeout"], 25)

    def test_http_error_carries_gateway_message(self):
        body = io.BytesIO(json.dumps({"code": "ALREADY_PROCESSED_PAYMENT", "message": "Already processed"}).encode())
        err = HTTPError("https://api.tosspayments.com/v1/payments/confirm", 400, "Bad Request", {}, body)

        with mock.patch("payments.services.toss.urlopen", side_effect=err):
            with self.assertRaises(PaymentGatewayError) as ctx:
                TossPaymentsClient().confirm("pk_1", "o-1", Decimal("35000"))

        self.assertEqual(ctx.exception.message, "Already processed")
        self.assertEqual(ctx.exception.gateway_code, "ALREADY_PROCESSED_PAYMENT")
        self.assertEqual(ctx.exception.gateway_http_status, 400)

    def test_network_error_is_gateway_error(self):
        with mock.patch("payments.services.toss.urlopen", side_effect=URLError("connection refused")):
            with self.assertRaises(PaymentGatewayError):
                TossPaymentsClient().confirm("pk_1", "o-1", Decimal("35000"))

    @override_settings(PAYMENTS={"TOSS": {}})
    def test_missing_secret_is_configuration_error(self):
        with mock.patch.dict("os.environ", {"TOSS_SECRET_KEY": ""}):
            with self.assertRaises(PaymentConfigurationError):
                TossPaymentsClient().confirm("pk_1", "o-1", Decimal("35000"))

    def test_mask_payment_key(self):
        self.assertEqual(mask_payment_key("tgen_20240101abcd"), "tgen...abcd")
        self.assertEqual(mask_payment_key("short"), "***")
