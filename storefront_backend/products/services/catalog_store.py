# products/services/catalog_store.py

"""
CATALOG STORE (PERSISTENCE COLLABORATOR)

Purpose:
- Single choke-point for product reads/writes used by cart + order services.
- Mirrors the hosted table-store contract the services were designed against:
    find(id)                      -> Product | None   (active only)
    list(filter, sort, range)     -> [Product]
    count(filter)                 -> int
    update_stock(id, ...)         -> bool

Rules:
- Customer-facing reads ALWAYS apply is_active=True.
- Each call is one round trip with row-level atomicity (no caller transaction).
- DatabaseError is translated into PersistenceError.

Services receive an instance through __init__ so tests can swap in fakes.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import F

from common.exceptions import PersistenceError
from products.models import Product

logger = logging.getLogger(__name__)

SORT_ORDERINGS = {
    "latest": ("-created_at",),
    "name": ("name", "-created_at"),
    "price-asc": ("price", "-created_at"),
    "price-desc": ("-price", "-created_at"),
    # no sales ranking yet; popular falls back to newest first
    "popular": ("-created_at",),
}

DEFAULT_SORT = "latest"


def resolve_ordering(sort: str | None) -> tuple[str, ...]:
    return SORT_ORDERINGS.get((sort or "").strip(), SORT_ORDERINGS[DEFAULT_SORT])


class CatalogStore:
    def __init__(self, product_model=Product):
        self.Product = product_model

    def active(self):
        return self.Product.objects.filter(is_active=True)

    def find(self, product_id):
        try:
            return self.active().filter(id=product_id).first()
        except (ValueError, ValidationError):
            return None
        except DatabaseError as exc:
            raise PersistenceError("Product lookup failed", product_id=str(product_id)) from exc

    def list(self, *, category: str | None = None, sort: str | None = None, offset: int = 0, limit: int = 12):
        qs = self.active()
        if category:
            qs = qs.filter(category=category)
        qs = qs.order_by(*resolve_ordering(sort))
        try:
            return list(qs[offset : offset + limit])
        except DatabaseError as exc:
            raise PersistenceError("Product list failed") from exc

    def count(self, *, category: str | None = None) -> int:
        qs = self.active()
        if category:
            qs = qs.filter(category=category)
        try:
            return qs.count()
        except DatabaseError as exc:
            raise PersistenceError("Product count failed") from exc

    def update_stock(self, product_id, *, stock_quantity: int, expected: int | None = None) -> bool:
        """
        Write stock_quantity.

        expected=None  -> blind overwrite
        expected=N     -> compare-and-set: only writes if the row still holds N

        Returns True when a row was written.
        """
        if stock_quantity < 0:
            return False

        qs = self.Product.objects.filter(id=product_id)
        if expected is not None:
            qs = qs.filter(stock_quantity=expected)

        try:
            with transaction.atomic():
                return qs.update(stock_quantity=stock_quantity) == 1
        except DatabaseError as exc:
            raise PersistenceError("Stock update failed", product_id=str(product_id)) from exc

    def decrement_stock(self, product_id, *, quantity: int) -> bool:
        """
        Guarded atomic decrement: never drives stock below zero.
        Returns True when a row was written.
        """
        try:
            with transaction.atomic():
                updated = self.Product.objects.filter(
                    id=product_id,
                    stock_quantity__gte=quantity,
                ).update(stock_quantity=F("stock_quantity") - quantity)
        except DatabaseError as exc:
            raise PersistenceError("Stock decrement failed", product_id=str(product_id)) from exc
        return updated == 1
