"""
PATH: payments/serializers/payment.py

- ConfirmPaymentInputSerializer: the gateway's success redirect parameters
- PaymentResultSerializer: confirmed order + the settlement summary
"""

from rest_framework import serializers

from orders.serializers import OrderSerializer


class ConfirmPaymentInputSerializer(serializers.Serializer):
    paymentKey = serializers.CharField(max_length=200)
    orderId = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=1)


class PaymentResultSerializer(serializers.Serializer):
    order = OrderSerializer(source="*", read_only=True)
    settlement = serializers.SerializerMethodField()
    replayed = serializers.BooleanField(read_only=True)

    def get_settlement(self, obj) -> dict:
        s = obj.settlement or {}
        return {
            "payment_key": s.get("paymentKey"),
            "status": s.get("status"),
            "total_amount": s.get("totalAmount"),
            "method": s.get("method"),
            "approved_at": s.get("approvedAt"),
        }
