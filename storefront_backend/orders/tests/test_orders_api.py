# orders/tests/test_orders_api.py

from __future__ import annotations

from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.models import TokenUser

from cart.models import CartItem
from orders.models import Order
from products.models import Product

ADDRESS = {
    "name": "Kim",
    "phone": "010-1111-2222",
    "postcode": "12345",
    "address": "Seoul",
    "detailAddress": "",
}


class OrdersAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.client.force_authenticate(user=TokenUser({"sub": "user_A"}))
        self.product = Product.objects.create(
            name="Backpack",
            price=Decimal("35000.00"),
            stock_quantity=5,
        )

    def _checkout(self):
        return self.client.post(
            reverse("orders:order-list"),
            {"shipping_address": ADDRESS, "order_note": "call first"},
            format="json",
        )

    def test_checkout_creates_pending_order(self):
        CartItem.objects.create(clerk_id="user_A", product=self.product, quantity=1)

        resp = self._checkout()

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["status"], "pending")
        self.assertEqual(resp.data["total_amount"], "35000.00")
        self.assertEqual(len(resp.data["items"]), 1)
        self.assertEqual(resp.data["order_note"], "call first")
        self.assertEqual(resp.data["stock_failures"], [])

    def test_empty_cart_checkout_is_400(self):
        resp = self._checkout()

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["error"]["code"], "EMPTY_CART")
        self.assertFalse(Order.objects.exists())

    def test_missing_shipping_fields_are_rejected(self):
        CartItem.objects.create(clerk_id="user_A", product=self.product, quantity=1)

        resp = self.client.post(
            reverse("orders:order-list"),
            {"shipping_address": {"name": "Kim"}},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Order.objects.exists())

    def test_other_principals_order_is_404(self):
        order = Order.objects.create(
            clerk_id="user_B",
            total_amount=Decimal("1000.00"),
            shipping_address=ADDRESS,
        )

        resp = self.client.get(reverse("orders:order-detail", args=[order.id]))

        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["code"], "NOT_FOUND")

    def test_list_orders(self):
        CartItem.objects.create(clerk_id="user_A", product=self.product, quantity=1)
        self._checkout()

        resp = self.client.get(reverse("orders:order-list"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]["items"][0]["product_name"], "Backpack")
