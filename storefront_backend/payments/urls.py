# payments/urls.py

from django.urls import path

from payments.views import ConfirmPaymentView, PaymentOrderView

app_name = "payments"

urlpatterns = [
    path("orders/<uuid:order_id>/", PaymentOrderView.as_view(), name="payment-order"),
    path("confirm/", ConfirmPaymentView.as_view(), name="payment-confirm"),
]
