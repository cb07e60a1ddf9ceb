# payments/admin.py

from django.contrib import admin

from payments.models import PaymentAttempt


@admin.register(PaymentAttempt)
class PaymentAttemptAdmin(admin.ModelAdmin):
    list_display = (
        "payment_key",
        "order",
        "status",
        "requested_amount",
        "settled_amount",
        "requested_at",
        "confirmed_at",
    )
    list_filter = ("status", "provider")
    search_fields = ("payment_key", "order__id")
    readonly_fields = ("id", "gateway_payload", "requested_at", "confirmed_at")
