# cart/admin.py

from django.contrib import admin

from cart.models import CartItem


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("clerk_id", "product", "quantity", "created_at", "updated_at")
    search_fields = ("clerk_id", "product__name")
    readonly_fields = ("id", "created_at", "updated_at")
