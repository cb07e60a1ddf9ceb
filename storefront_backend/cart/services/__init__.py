from .cart_service import CartService, CartSummary
from .cart_store import CartStore

__all__ = [
    "CartService",
    "CartStore",
    "CartSummary",
]
