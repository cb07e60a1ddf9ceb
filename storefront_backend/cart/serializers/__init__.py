from .cart_item import (
    AddCartItemInputSerializer,
    CartItemSerializer,
    CartSummarySerializer,
    UpdateCartItemInputSerializer,
)

__all__ = [
    "AddCartItemInputSerializer",
    "CartItemSerializer",
    "CartSummarySerializer",
    "UpdateCartItemInputSerializer",
]
