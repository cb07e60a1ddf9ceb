# cart/tests/test_cart_api.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.models import TokenUser

from cart.models import CartItem
from products.models import Product


def _principal(sub: str) -> TokenUser:
    return TokenUser({"sub": sub})


class CartAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=_principal("user_A"))
        self.product = Product.objects.create(
            name="Wireless Mouse",
            price=Decimal("25000.00"),
            stock_quantity=5,
            category="electronics",
        )

    def test_anonymous_request_is_rejected(self):
        anon = APIClient()
        resp = anon.get(reverse("cart:cart"))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_add_item_then_view_cart(self):
        resp = self.client.post(
            reverse("cart:cart-item-add"),
            {"product_id": str(self.product.id), "quantity": 2},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["quantity"], 2)
        self.assertEqual(resp.data["line_total"], "50000.00")

        resp = self.client.get(reverse("cart:cart"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["line_count"], 1)
        self.assertEqual(resp.data["subtotal"], "50000.00")

    def test_insufficient_stock_renders_error_envelope(self):
        resp = self.client.post(
            reverse("cart:cart-item-add"),
            {"product_id": str(self.product.id), "quantity": 9},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["error"]["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(resp.data["error"]["context"]["available"], 5)
        self.assertFalse(CartItem.objects.exists())

    def test_count_endpoint(self):
        CartItem.objects.create(clerk_id="user_A", product=self.product, quantity=3)
        resp = self.client.get(reverse("cart:cart-count"))
        self.assertEqual(resp.data, {"count": 1})

    def test_other_principal_cannot_delete_line(self):
        line = CartItem.objects.create(clerk_id="user_B", product=self.product, quantity=1)

        resp = self.client.delete(reverse("cart:cart-item-detail", args=[line.id]))

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data["error"]["code"], "FORBIDDEN")
        self.assertTrue(CartItem.objects.filter(id=line.id).exists())

    def test_patch_quantity(self):
        line = CartItem.objects.create(clerk_id="user_A", product=self.product, quantity=1)

        resp = self.client.patch(
            reverse("cart:cart-item-detail", args=[line.id]),
            {"quantity": 4},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        line.refresh_from_db()
        self.assertEqual(line.quantity, 4)

    def test_patch_quantity_zero_is_validation_error(self):
        line = CartItem.objects.create(clerk_id="user_A", product=self.product, quantity=1)

        resp = self.client.patch(
            reverse("cart:cart-item-detail", args=[line.id]),
            {"quantity": 0},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_clear_cart(self):
        CartItem.objects.create(clerk_id="user_A", product=self.product, quantity=1)

        resp = self.client.delete(reverse("cart:cart"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data, {"removed": 1})
        self.assertFalse(CartItem.objects.filter(clerk_id="user_A").exists())
