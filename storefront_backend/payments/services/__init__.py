from .payment_confirmation import PaymentConfirmationService, PaymentResult
from .toss import TossPaymentsClient

__all__ = [
    "PaymentConfirmationService",
    "PaymentResult",
    "TossPaymentsClient",
]
