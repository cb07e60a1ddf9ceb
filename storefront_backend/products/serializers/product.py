# products/serializers/product.py

"""
PRODUCT SERIALIZER (PUBLIC CATALOG)

Purpose:
- Read-only product shape for the storefront and for cart/order joins.
- Stock is exposed as a number plus a derived availability flag.
"""

from rest_framework import serializers

from products.models import Product

LOW_STOCK_THRESHOLD = 10


class ProductSerializer(serializers.ModelSerializer):
    in_stock = serializers.SerializerMethodField(read_only=True)
    is_low_stock = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "category",
            "stock_quantity",
            "in_stock",
            "is_low_stock",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [f for f in fields if f not in ("in_stock", "is_low_stock")]

    def get_in_stock(self, obj) -> bool:
        return int(obj.stock_quantity or 0) > 0

    def get_is_low_stock(self, obj) -> bool:
        qty = int(obj.stock_quantity or 0)
        return 0 < qty < LOW_STOCK_THRESHOLD
