from .payment import ConfirmPaymentInputSerializer, PaymentResultSerializer

__all__ = [
    "ConfirmPaymentInputSerializer",
    "PaymentResultSerializer",
]
