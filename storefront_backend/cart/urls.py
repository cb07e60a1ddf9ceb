# cart/urls.py

from django.urls import path

from cart.views import AddCartItemView, CartCountView, CartItemDetailView, CartView

app_name = "cart"

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("count/", CartCountView.as_view(), name="cart-count"),
    path("items/", AddCartItemView.as_view(), name="cart-item-add"),
    path("items/<uuid:item_id>/", CartItemDetailView.as_view(), name="cart-item-detail"),
]
