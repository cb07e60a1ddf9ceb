from .order import (
    CreateOrderInputSerializer,
    OrderItemSerializer,
    OrderSerializer,
    PlacedOrderSerializer,
    ShippingAddressSerializer,
)

__all__ = [
    "CreateOrderInputSerializer",
    "OrderItemSerializer",
    "OrderSerializer",
    "PlacedOrderSerializer",
    "ShippingAddressSerializer",
]
