"""
PATH: cart/serializers/cart_item.py

CART ITEM SERIALIZERS

- CartItemSerializer: a line joined with its live product data.
- CartSummarySerializer: lines + server-computed subtotal.
- Input serializers for add / set-quantity (docs + shape validation only;
  business rules live in CartService).
"""

from rest_framework import serializers

from cart.models import CartItem


class CartItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(source="product.id", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    category = serializers.CharField(source="product.category", read_only=True, allow_null=True)

    unit_price = serializers.DecimalField(
        source="product.price",
        max_digits=10,
        decimal_places=2,
        read_only=True,
    )

    line_total = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        read_only=True,
    )

    stock_quantity = serializers.IntegerField(source="product.stock_quantity", read_only=True)
    is_available = serializers.BooleanField(read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "category",
            "quantity",
            "unit_price",
            "line_total",
            "stock_quantity",
            "is_available",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "quantity", "created_at", "updated_at"]


class CartSummarySerializer(serializers.Serializer):
    items = CartItemSerializer(many=True, read_only=True)
    line_count = serializers.IntegerField(read_only=True)
    total_quantity = serializers.IntegerField(read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    has_unavailable_items = serializers.BooleanField(read_only=True)


class AddCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class UpdateCartItemInputSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
