# payments/views/payments.py

"""
PAYMENT API VIEWS

GET  /api/payments/orders/<uuid>/  -> order summary for the payment widget (pending only)
POST /api/payments/confirm/        -> confirm with the gateway, then confirm the order

Security:
- Principal from the verified JWT only
- Order lookups for another principal's order answer 404
- Gateway secret never leaves the server
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.api import PaymentThrottle
from common.principal import get_principal
from orders.serializers import OrderSerializer
from payments.serializers import ConfirmPaymentInputSerializer, PaymentResultSerializer
from payments.services import PaymentConfirmationService


class PaymentOrderView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(
        tags=["Payments"],
        responses={
            200: OrderSerializer,
            404: OpenApiResponse(description="Order not found"),
            409: OpenApiResponse(description="Order already processed"),
        },
    )
    def get(self, request, order_id):
        principal = get_principal(request)
        found = PaymentConfirmationService().get_order_for_payment(principal, order_id)
        return Response(OrderSerializer(found).data, status=status.HTTP_200_OK)


class ConfirmPaymentView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [PaymentThrottle]
    serializer_class = PaymentResultSerializer

    @extend_schema(
        tags=["Payments"],
        request=ConfirmPaymentInputSerializer,
        responses={
            200: PaymentResultSerializer,
            409: OpenApiResponse(description="Amount mismatch or order not payable"),
            502: OpenApiResponse(description="Gateway rejected or unreachable (retryable)"),
        },
        examples=[
            OpenApiExample(
                "Success redirect parameters",
                value={
                    "paymentKey": "tgen_20240101abcd",
                    "orderId": "07d0722f-92fd-4a83-b84e-6e25f034a647",
                    "amount": 35000,
                },
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = ConfirmPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        principal = get_principal(request)
        result = PaymentConfirmationService().confirm_and_finalize(
            principal,
            serializer.validated_data["paymentKey"],
            serializer.validated_data["orderId"],
            serializer.validated_data["amount"],
        )
        return Response(PaymentResultSerializer(result).data, status=status.HTTP_200_OK)
