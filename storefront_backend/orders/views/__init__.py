from .orders import OrderDetailView, OrderListCreateView

__all__ = [
    "OrderDetailView",
    "OrderListCreateView",
]
