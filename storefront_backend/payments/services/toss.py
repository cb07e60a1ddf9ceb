# payments/services/toss.py
from __future__ import annotations

import base64
import json
import logging
import os
from decimal import Decimal
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings

from common.exceptions import PaymentConfigurationError, PaymentGatewayError
from common.money import money

logger = logging.getLogger(__name__)

TOSS_API_BASE = "https://api.tosspayments.com"
DEFAULT_TIMEOUT_SECONDS = 25


def _toss_cfg() -> dict:
    """
    Priority:
    1) settings.PAYMENTS["TOSS"]
    2) env vars (TOSS_SECRET_KEY / TOSS_API_BASE) as fallback
    """
    payments = getattr(settings, "PAYMENTS", {}) or {}
    cfg = (payments.get("TOSS") or {}) if isinstance(payments, dict) else {}
    return cfg if isinstance(cfg, dict) else {}


def _safe_preview(text: str, limit: int = 800) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _parse_json_or_text(raw: str) -> dict[str, Any]:
    raw = raw or ""
    try:
        parsed = json.loads(raw)
    except ValueError:
        return {"kind": "text", "raw": raw}
    if isinstance(parsed, dict):
        return {"kind": "json", "json": parsed, "raw": raw}
    return {"kind": "json_non_object", "json": parsed, "raw": raw}


def _amount_for_wire(amount) -> int | float:
    value = money(amount)
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def mask_payment_key(payment_key: str) -> str:
    key = str(payment_key or "")
    if len(key) <= 8:
        return "***"
    return f"{key[:4]}...{key[-4:]}"


class TossPaymentsClient:
    """
    Toss Payments confirm API over HTTPS (JSON, HTTP Basic with `secret:`).
    """

    def __init__(self, *, secret_key: str | None = None, api_base: str | None = None, timeout: int | None = None):
        cfg = _toss_cfg()
        self._secret_key = (secret_key or cfg.get("SECRET_KEY") or os.environ.get("TOSS_SECRET_KEY") or "").strip()
        self.api_base = (api_base or cfg.get("API_BASE") or os.environ.get("TOSS_API_BASE") or TOSS_API_BASE).rstrip("/")
        self.timeout = int(timeout or cfg.get("TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS)

    def _authorization(self) -> str:
        if not self._secret_key:
            raise PaymentConfigurationError(
                "TOSS SECRET_KEY is not configured. "
                "Expected settings.PAYMENTS['TOSS']['SECRET_KEY'] or env TOSS_SECRET_KEY."
            )
        token = base64.b64encode(f"{self._secret_key}:".encode("utf-8")).decode("ascii")
        return f"Basic {token}"

    def _request_json(self, method: str, path: str, *, body: dict | None = None) -> dict[str, Any]:
        data = None
        if body is not None:
            data = json.dumps(body, ensure_ascii=False).encode("utf-8")

        req = Request(
            f"{self.api_base}{path}",
            data=data,
            headers={
                "Authorization": self._authorization(),
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            method=method,
        )

        try:
            with urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read().decode("utf-8", errors="replace")
        except HTTPError as e:
            try:
                raw = e.read().decode("utf-8", errors="replace")
            except OSError:
                raw = ""
            parsed_any = _parse_json_or_text(raw)

            if parsed_any.get("kind") == "json":
                j = parsed_any.get("json") or {}
                msg = j.get("message") or j.get("code") or "Payment confirmation failed"
                raise PaymentGatewayError(str(msg), gateway_code=j.get("code"), http_status=e.code) from e

            preview = _safe_preview(parsed_any.get("raw") or str(e))
            raise PaymentGatewayError(
                f"Payment confirmation failed: {e.code} {preview}".strip(),
                http_status=e.code,
            ) from e
        except URLError as e:
            raise PaymentGatewayError(f"Payment gateway unreachable: {e.reason}") from e
        except TimeoutError as e:
            raise PaymentGatewayError("Payment gateway timed out") from e

        parsed_any = _parse_json_or_text(raw)
        if parsed_any.get("kind") != "json":
            raise PaymentGatewayError(f"Payment gateway returned non-JSON: {_safe_preview(raw)}")

        return parsed_any.get("json") or {}

    def confirm(self, payment_key: str, order_id, amount: Decimal) -> dict:
        """
        POST /v1/payments/confirm. Returns the settlement record verbatim.
        """
        payload = {
            "paymentKey": str(payment_key).strip(),
            "orderId": str(order_id),
            "amount": _amount_for_wire(amount),
        }

        logger.info(
            "Confirming payment",
            extra={"order_id": str(order_id), "payment_key": mask_payment_key(payment_key)},
        )
        settlement = self._request_json("POST", "/v1/payments/confirm", body=payload)

        logger.info(
            "Payment confirmed by gateway",
            extra={
                "order_id": str(order_id),
                "payment_key": mask_payment_key(payment_key),
                "gateway_status": settlement.get("status"),
                "total_amount": settlement.get("totalAmount"),
            },
        )
        return settlement
