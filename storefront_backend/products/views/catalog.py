# products/views/catalog.py
"""
PUBLIC CATALOG (ONLINE STORE)

GET /api/products/?category=<code>&sort=<latest|name|popular|price-asc|price-desc>&limit=12&offset=0
GET /api/products/featured/?limit=8&category=<code>
GET /api/products/<uuid>/

Rules:
- AllowAny (public)
- Active products only
- Paginated list returns {"count", "next", "previous", "results"}

Security hardening:
- Throttle to reduce scraping/abuse
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from products.filters import ProductFilter
from products.serializers import ProductSerializer
from products.services import CatalogService, CatalogStore


class PublicCatalogThrottle(AnonRateThrottle):
    scope = "catalog"


class CatalogPagination(LimitOffsetPagination):
    default_limit = 12
    max_limit = 100


class ProductListView(generics.ListAPIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [PublicCatalogThrottle]
    serializer_class = ProductSerializer
    pagination_class = CatalogPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductFilter

    def get_queryset(self):
        return CatalogStore().active()

    @extend_schema(
        tags=["Catalog"],
        description="Active products with optional category filter, sort and limit/offset pagination.",
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class FeaturedProductsView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [PublicCatalogThrottle]

    @extend_schema(
        tags=["Catalog"],
        parameters=[
            OpenApiParameter(name="limit", type=int, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="category", type=str, location=OpenApiParameter.QUERY, required=False),
        ],
        responses={200: ProductSerializer(many=True)},
        description="Newest active products (home page sections).",
    )
    def get(self, request, *args, **kwargs):
        category = (request.query_params.get("category") or "").strip() or None
        products = CatalogService().featured(
            limit=request.query_params.get("limit"),
            category=category,
        )
        return Response(ProductSerializer(products, many=True).data, status=status.HTTP_200_OK)


class ProductDetailView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [PublicCatalogThrottle]

    @extend_schema(
        tags=["Catalog"],
        responses={
            200: ProductSerializer,
            404: OpenApiResponse(description="Product not found or inactive"),
        },
    )
    def get(self, request, product_id, *args, **kwargs):
        product = CatalogService().get_product(product_id)
        return Response(ProductSerializer(product).data, status=status.HTTP_200_OK)
