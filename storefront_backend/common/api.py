# common/api.py

"""
API ERROR NORMALIZATION

Wired via REST_FRAMEWORK["EXCEPTION_HANDLER"].

Domain errors (common.exceptions.StorefrontError) render as:
    {"error": {"code": "...", "message": "...", "context": {...}}}

Everything else falls through to DRF's default handler.
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import exception_handler

from common.exceptions import Forbidden, NotFound, StorefrontError

logger = logging.getLogger(__name__)


class CheckoutThrottle(UserRateThrottle):
    scope = "checkout"


class PaymentThrottle(UserRateThrottle):
    scope = "payment"


def error_response(*, code: str, message: str, http_status: int, context: dict | None = None):
    return Response(
        {"error": {"code": code, "message": message, "context": context or {}}},
        status=http_status,
    )


def storefront_exception_handler(exc, context):
    if isinstance(exc, StorefrontError):
        if isinstance(exc, Forbidden) and exc.conceal_existence:
            # same outward signal as a missing order
            return error_response(
                code=NotFound.code,
                message=NotFound.default_message,
                http_status=status.HTTP_404_NOT_FOUND,
            )

        if exc.http_status >= 500:
            logger.error(
                "Storefront error",
                extra={"code": exc.code, "error_context": exc.context},
            )

        return error_response(
            code=exc.code,
            message=exc.message,
            http_status=exc.http_status,
            context=exc.context,
        )

    return exception_handler(exc, context)
