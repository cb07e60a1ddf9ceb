# products/views/__init__.py

from .catalog import FeaturedProductsView, ProductDetailView, ProductListView

__all__ = [
    "FeaturedProductsView",
    "ProductDetailView",
    "ProductListView",
]
