# cart/tests/test_cart_service.py

"""
CART SERVICE TESTS

Run with:
    python manage.py test cart -v 2

GUARANTEES:
- Insufficient stock never creates a line
- Repeated add merges into ONE line and re-checks stock on the merged total
- Lines owned by another principal are never touched
- Inactive products cannot be added
"""

from __future__ import annotations

import uuid
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from cart.models import CartItem
from cart.services import CartService
from common.exceptions import Forbidden, InsufficientStock, InvalidQuantity, NotFound
from products.models import Product


def _make_product(*, name="Desk Lamp", price="15000.00", stock=10, is_active=True, category="home"):
    return Product.objects.create(
        name=name,
        price=Decimal(price),
        stock_quantity=stock,
        category=category,
        is_active=is_active,
    )


class AddItemTests(TestCase):
    def setUp(self):
        self.service = CartService()
        self.product = _make_product(stock=3)

    def test_add_creates_line(self):
        line = self.service.add_item("user_A", self.product.id, 2)

        self.assertEqual(line.quantity, 2)
        self.assertEqual(line.clerk_id, "user_A")
        self.assertEqual(CartItem.objects.filter(clerk_id="user_A").count(), 1)

    def test_insufficient_stock_creates_no_line(self):
        with self.assertRaises(InsufficientStock) as ctx:
            self.service.add_item("user_A", self.product.id, 5)

        self.assertEqual(ctx.exception.requested, 5)
        self.assertEqual(ctx.exception.available, 3)
        self.assertIn("Available: 3, Requested: 5", ctx.exception.message)
        self.assertFalse(CartItem.objects.filter(clerk_id="user_A").exists())

    def test_add_malformed_product_id_is_not_found(self):
        with self.assertRaises(NotFound):
            self.service.add_item("user_A", "not-a-uuid", 1)

    def test_double_add_merges_into_single_line(self):
        product = _make_product(name="Notebook", stock=10)

        self.service.add_item("user_A", product.id, 2)
        line = self.service.add_item("user_A", product.id, 2)

        self.assertEqual(line.quantity, 4)
        self.assertEqual(CartItem.objects.filter(clerk_id="user_A", product=product).count(), 1)

    def test_merge_rechecks_stock_against_merged_total(self):
        self.service.add_item("user_A", self.product.id, 2)

        with self.assertRaises(InsufficientStock) as ctx:
            self.service.add_item("user_A", self.product.id, 2)

        self.assertEqual(ctx.exception.requested, 4)
        self.assertEqual(ctx.exception.context["in_cart"], 2)
        self.assertEqual(CartItem.objects.get(clerk_id="user_A").quantity, 2)

    def test_inactive_product_is_not_found(self):
        hidden = _make_product(name="Retired", is_active=False)

        with self.assertRaises(NotFound):
            self.service.add_item("user_A", hidden.id, 1)

    def test_unknown_product_is_not_found(self):
        with self.assertRaises(NotFound):
            self.service.add_item("user_A", uuid.uuid4(), 1)

    def test_quantity_must_be_positive_whole_number(self):
        for bad in (0, -1, "abc", True):
            with self.assertRaises(InvalidQuantity):
                self.service.add_item("user_A", self.product.id, bad)

        self.assertFalse(CartItem.objects.exists())


class OwnershipTests(TestCase):
    def setUp(self):
        self.service = CartService()
        self.product = _make_product(stock=10)
        self.line = self.service.add_item("user_A", self.product.id, 1)

    def test_remove_by_other_principal_is_forbidden_and_line_survives(self):
        with self.assertRaises(Forbidden):
            self.service.remove_item("user_B", self.line.id)

        self.assertTrue(CartItem.objects.filter(id=self.line.id).exists())

    def test_remove_missing_line_is_not_found(self):
        with self.assertRaises(NotFound):
            self.service.remove_item("user_A", uuid.uuid4())

    def test_remove_malformed_line_id_is_not_found(self):
        with self.assertRaises(NotFound):
            self.service.remove_item("user_A", "not-a-uuid")

    def test_owner_can_remove(self):
        self.service.remove_item("user_A", self.line.id)
        self.assertFalse(CartItem.objects.filter(id=self.line.id).exists())

    def test_set_quantity_by_other_principal_is_forbidden(self):
        with self.assertRaises(Forbidden):
            self.service.set_quantity("user_B", self.line.id, 3)

        self.line.refresh_from_db()
        self.assertEqual(self.line.quantity, 1)


class SetQuantityTests(TestCase):
    def setUp(self):
        self.service = CartService()
        self.product = _make_product(stock=4)
        self.line = self.service.add_item("user_A", self.product.id, 1)

    def test_set_quantity_updates_line(self):
        line = self.service.set_quantity("user_A", self.line.id, 4)
        self.assertEqual(line.quantity, 4)

    def test_set_quantity_above_stock_is_rejected(self):
        with self.assertRaises(InsufficientStock):
            self.service.set_quantity("user_A", self.line.id, 5)

        self.line.refresh_from_db()
        self.assertEqual(self.line.quantity, 1)

    def test_set_quantity_on_deactivated_product_is_not_found(self):
        Product.objects.filter(id=self.product.id).update(is_active=False)

        with self.assertRaises(NotFound):
            self.service.set_quantity("user_A", self.line.id, 2)

    def test_set_quantity_zero_is_invalid(self):
        with self.assertRaises(InvalidQuantity):
            self.service.set_quantity("user_A", self.line.id, 0)


class ListCountClearTests(TestCase):
    def setUp(self):
        self.service = CartService()
        self.lamp = _make_product(name="Lamp", price="10000.00", stock=10)
        self.mug = _make_product(name="Mug", price="5000.00", stock=10)

    def test_count_is_number_of_lines_not_units(self):
        self.service.add_item("user_A", self.lamp.id, 3)
        self.service.add_item("user_A", self.mug.id, 2)
        self.service.add_item("user_B", self.mug.id, 1)

        self.assertEqual(self.service.count("user_A"), 2)
        self.assertEqual(self.service.count("user_B"), 1)

    def test_list_items_only_returns_own_lines_newest_first(self):
        first = self.service.add_item("user_A", self.lamp.id, 1)
        second = self.service.add_item("user_A", self.mug.id, 1)
        self.service.add_item("user_B", self.lamp.id, 1)
        CartItem.objects.filter(id=first.id).update(created_at=timezone.now() - timedelta(minutes=5))

        items = self.service.list_items("user_A")

        self.assertEqual([i.id for i in items], [second.id, first.id])

    def test_clear_returns_pre_deletion_count(self):
        self.service.add_item("user_A", self.lamp.id, 1)
        self.service.add_item("user_A", self.mug.id, 1)
        self.service.add_item("user_B", self.mug.id, 1)

        self.assertEqual(self.service.clear("user_A"), 2)
        self.assertEqual(self.service.count("user_A"), 0)
        self.assertEqual(self.service.count("user_B"), 1)

    def test_summary_computes_subtotal_from_live_prices(self):
        self.service.add_item("user_A", self.lamp.id, 2)
        self.service.add_item("user_A", self.mug.id, 3)

        summary = self.service.summary("user_A")

        self.assertEqual(summary.line_count, 2)
        self.assertEqual(summary.total_quantity, 5)
        self.assertEqual(summary.subtotal, Decimal("35000.00"))
        self.assertFalse(summary.has_unavailable_items)

    def test_summary_flags_lines_of_deactivated_products(self):
        self.service.add_item("user_A", self.lamp.id, 1)
        Product.objects.filter(id=self.lamp.id).update(is_active=False)

        summary = self.service.summary("user_A")

        self.assertTrue(summary.has_unavailable_items)
        self.assertFalse(summary.items[0].is_available)

    def test_deleting_product_removes_its_cart_lines(self):
        self.service.add_item("user_A", self.lamp.id, 1)
        self.lamp.delete()

        self.assertEqual(self.service.count("user_A"), 0)
