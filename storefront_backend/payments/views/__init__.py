from .payments import ConfirmPaymentView, PaymentOrderView

__all__ = [
    "ConfirmPaymentView",
    "PaymentOrderView",
]
