# products/services/catalog.py

"""
CATALOG READ SERVICE

Customer-facing product reads (AllowAny):
- featured(limit)          newest active products, optionally one category
- get_product(product_id)  active product or NotFound
"""

from __future__ import annotations

import logging

from common.exceptions import NotFound
from products.services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)

FEATURED_DEFAULT_LIMIT = 8
CATEGORY_DEFAULT_LIMIT = 4
MAX_LIMIT = 100


def _clamp_limit(limit, default: int) -> int:
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return default
    return max(1, min(value, MAX_LIMIT))


class CatalogService:
    def __init__(self, *, catalog: CatalogStore | None = None):
        self.catalog = catalog or CatalogStore()

    def featured(self, *, limit=None, category: str | None = None):
        default = CATEGORY_DEFAULT_LIMIT if category else FEATURED_DEFAULT_LIMIT
        limit = _clamp_limit(limit, default) if limit is not None else default
        products = self.catalog.list(category=category, sort="latest", offset=0, limit=limit)
        logger.info(
            "Featured products loaded",
            extra={"category": category, "count": len(products)},
        )
        return products

    def get_product(self, product_id):
        product = self.catalog.find(product_id)
        if product is None:
            raise NotFound("Product not found.", product_id=str(product_id))
        return product
