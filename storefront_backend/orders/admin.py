# orders/admin.py

from django.contrib import admin

from orders.models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ("product", "product_name", "quantity", "price", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "clerk_id", "total_amount", "status", "created_at", "confirmed_at")
    list_filter = ("status",)
    search_fields = ("id", "clerk_id")
    readonly_fields = (
        "id",
        "clerk_id",
        "total_amount",
        "shipping_address",
        "order_note",
        "created_at",
        "updated_at",
        "confirmed_at",
    )
    inlines = [OrderItemInline]
