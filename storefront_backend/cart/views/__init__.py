from .api import AddCartItemView, CartCountView, CartItemDetailView, CartView

__all__ = [
    "AddCartItemView",
    "CartCountView",
    "CartItemDetailView",
    "CartView",
]
