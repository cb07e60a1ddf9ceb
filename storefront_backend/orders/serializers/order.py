"""
PATH: orders/serializers/order.py

ORDER SERIALIZERS

- ShippingAddressSerializer: validated shape of Order.shipping_address
- CreateOrderInputSerializer: checkout request body
- OrderItemSerializer: immutable line snapshot
- OrderSerializer: an order together with its lines (OrderWithLines)
"""

from rest_framework import serializers

from orders.models import Order, OrderItem


class ShippingAddressSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120)
    phone = serializers.CharField(max_length=40)
    postcode = serializers.CharField(max_length=16)
    address = serializers.CharField(max_length=255)
    detailAddress = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class CreateOrderInputSerializer(serializers.Serializer):
    shipping_address = ShippingAddressSerializer()
    order_note = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)


class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True, allow_null=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "quantity",
            "price",
            "line_total",
            "created_at",
        ]
        read_only_fields = ["id", "product_name", "quantity", "price", "created_at"]


class StockAdjustmentFailureSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    product_name = serializers.CharField()
    quantity = serializers.IntegerField()
    reason = serializers.CharField()


class OrderSerializer(serializers.Serializer):
    id = serializers.UUIDField(source="order.id", read_only=True)
    status = serializers.ChoiceField(source="order.status", choices=Order.STATUS_CHOICES, read_only=True)
    total_amount = serializers.DecimalField(
        source="order.total_amount",
        max_digits=12,
        decimal_places=2,
        read_only=True,
    )
    shipping_address = serializers.JSONField(source="order.shipping_address", read_only=True)
    order_note = serializers.CharField(source="order.order_note", read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(source="order.created_at", read_only=True)
    updated_at = serializers.DateTimeField(source="order.updated_at", read_only=True)
    confirmed_at = serializers.DateTimeField(source="order.confirmed_at", read_only=True, allow_null=True)
    items = OrderItemSerializer(source="lines", many=True, read_only=True)


class PlacedOrderSerializer(OrderSerializer):
    stock_failures = StockAdjustmentFailureSerializer(many=True, read_only=True)
    cart_cleared = serializers.BooleanField(read_only=True)
