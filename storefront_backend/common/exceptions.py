# common/exceptions.py

"""
STOREFRONT DOMAIN ERRORS

Centralized error taxonomy shared by cart, orders and payments.

Every error carries:
- code:        stable machine-readable identifier (rendered to clients)
- http_status: status used by the API exception handler
- context:     structured ids / quantities / amounts for user-facing messages

Services raise these; views never catch them one by one.
The DRF exception handler in common/api.py renders them.
"""

from __future__ import annotations


class StorefrontError(Exception):
    """Base exception for all storefront service failures."""

    code = "STOREFRONT_ERROR"
    http_status = 400
    default_message = "Request could not be processed."

    def __init__(self, message: str | None = None, **context):
        self.message = message or self.default_message
        self.context = {k: v for k, v in context.items() if v is not None}
        super().__init__(self.message)


class Unauthenticated(StorefrontError):
    code = "UNAUTHENTICATED"
    http_status = 401
    default_message = "Authentication required. Please sign in."


class NotFound(StorefrontError):
    code = "NOT_FOUND"
    http_status = 404
    default_message = "Resource not found."


class Forbidden(StorefrontError):
    """
    Ownership mismatch.

    For order lookups the handler renders this exactly like NotFound
    (see `conceal_existence`).
    """

    code = "FORBIDDEN"
    http_status = 403
    default_message = "You do not have access to this resource."

    def __init__(self, message: str | None = None, *, conceal_existence: bool = False, **context):
        self.conceal_existence = conceal_existence
        super().__init__(message, **context)


class InvalidQuantity(StorefrontError):
    code = "INVALID_QUANTITY"
    http_status = 400
    default_message = "Quantity must be a whole number of at least 1."


class InsufficientStock(StorefrontError):
    code = "INSUFFICIENT_STOCK"
    http_status = 409
    default_message = "Insufficient stock."

    def __init__(
        self,
        message: str | None = None,
        *,
        product_id=None,
        product_name: str | None = None,
        requested: int | None = None,
        available: int | None = None,
        in_cart: int | None = None,
    ):
        if message is None and requested is not None and available is not None:
            label = product_name or "product"
            message = f"Insufficient stock for {label}. Available: {available}, Requested: {requested}"
        super().__init__(
            message,
            product_id=str(product_id) if product_id is not None else None,
            product_name=product_name,
            requested=requested,
            available=available,
            in_cart=in_cart,
        )
        self.requested = requested
        self.available = available


class EmptyCart(StorefrontError):
    code = "EMPTY_CART"
    http_status = 400
    default_message = "Cart is empty."


class ProductUnavailable(StorefrontError):
    code = "PRODUCT_UNAVAILABLE"
    http_status = 409
    default_message = "Product is no longer available."

    def __init__(self, message: str | None = None, *, product_id=None, product_name: str | None = None):
        if message is None:
            message = f"Product is no longer available: {product_name or product_id}"
        super().__init__(
            message,
            product_id=str(product_id) if product_id is not None else None,
            product_name=product_name,
        )


class PersistenceError(StorefrontError):
    code = "PERSISTENCE_ERROR"
    http_status = 500
    default_message = "A storage operation failed."


class CheckoutInProgress(StorefrontError):
    code = "CHECKOUT_IN_PROGRESS"
    http_status = 409
    default_message = "A checkout for this cart is already in progress."


class InvalidOrderTransition(StorefrontError):
    code = "INVALID_TRANSITION"
    http_status = 409
    default_message = "Order status change is not allowed."


class OrderNotPayable(StorefrontError):
    code = "ORDER_NOT_PAYABLE"
    http_status = 409
    default_message = "Order has already been processed."

    def __init__(self, message: str | None = None, *, order_id=None, status: str | None = None):
        if message is None and status:
            message = f"Order has already been processed (current status: {status})."
        super().__init__(
            message,
            order_id=str(order_id) if order_id is not None else None,
            status=status,
        )


class AmountMismatch(StorefrontError):
    """
    Gateway settled an amount different from the order total.

    Non-retryable: the payment exists at the gateway but the order stays
    pending. Requires manual reconciliation.
    """

    code = "AMOUNT_MISMATCH"
    http_status = 409
    default_message = "Payment amount does not match the order total. Please contact support."

    def __init__(self, message: str | None = None, *, order_id=None, expected=None, settled=None, payment_key=None):
        super().__init__(
            message,
            order_id=str(order_id) if order_id is not None else None,
            expected=str(expected) if expected is not None else None,
            settled=str(settled) if settled is not None else None,
            payment_key=payment_key,
        )
        self.expected = expected
        self.settled = settled


class PaymentGatewayError(StorefrontError):
    """Network/HTTP failure from the payment gateway. Retryable by the user."""

    code = "PAYMENT_GATEWAY_ERROR"
    http_status = 502
    default_message = "Payment confirmation failed. Please try again."

    def __init__(self, message: str | None = None, *, gateway_code: str | None = None, http_status: int | None = None):
        super().__init__(message, gateway_code=gateway_code, gateway_http_status=http_status)
        self.gateway_code = gateway_code
        self.gateway_http_status = http_status


class PaymentConfigurationError(StorefrontError):
    code = "PAYMENT_CONFIGURATION_ERROR"
    http_status = 503
    default_message = "Payment service is not configured. Please contact an administrator."
