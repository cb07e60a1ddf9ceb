# products/urls.py

"""
PRODUCTS URLS

Public catalog routes under /api/products/
"""

from django.urls import path

from products.views import FeaturedProductsView, ProductDetailView, ProductListView

app_name = "products"

urlpatterns = [
    path("", ProductListView.as_view(), name="product-list"),
    path("featured/", FeaturedProductsView.as_view(), name="product-featured"),
    path("<uuid:product_id>/", ProductDetailView.as_view(), name="product-detail"),
]
