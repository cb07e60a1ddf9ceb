# cart/views/api.py

"""
CART API VIEWS

Purpose:
- Principal-scoped cart: view, count, add, set quantity, remove, clear.

Hard rules:
- The principal comes from the verified JWT only (never from the body).
- Views validate request SHAPE; CartService owns every business rule.
- Domain errors propagate to common.api.storefront_exception_handler.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cart.serializers import (
    AddCartItemInputSerializer,
    CartItemSerializer,
    CartSummarySerializer,
    UpdateCartItemInputSerializer,
)
from cart.services import CartService
from common.principal import get_principal


class CartView(APIView):
    """
    GET    -> cart summary (lines newest first + subtotal)
    DELETE -> clear every line
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartSummarySerializer

    @extend_schema(
        tags=["Cart"],
        responses={200: CartSummarySerializer},
        description="Current principal's cart joined with live product data.",
    )
    def get(self, request):
        principal = get_principal(request)
        summary = CartService().summary(principal)
        return Response(CartSummarySerializer(summary).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Cart"],
        responses={200: dict},
        description="Remove every line from the cart. Returns how many lines were removed.",
    )
    def delete(self, request):
        principal = get_principal(request)
        removed = CartService().clear(principal)
        return Response({"removed": removed}, status=status.HTTP_200_OK)


class CartCountView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Cart"],
        responses={200: dict},
        description="Number of distinct lines in the cart (header badge).",
    )
    def get(self, request):
        principal = get_principal(request)
        return Response({"count": CartService().count(principal)}, status=status.HTTP_200_OK)


class AddCartItemView(APIView):
    """
    Add a product to the cart.
    Repeated adds of the same product merge into one line.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartItemSerializer

    @extend_schema(
        tags=["Cart"],
        request=AddCartItemInputSerializer,
        responses={201: CartItemSerializer},
        examples=[
            OpenApiExample(
                "Add two units",
                value={"product_id": "07d0722f-92fd-4a83-b84e-6e25f034a647", "quantity": 2},
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        principal = get_principal(request)
        line = CartService().add_item(
            principal,
            serializer.validated_data["product_id"],
            serializer.validated_data["quantity"],
        )
        return Response(CartItemSerializer(line).data, status=status.HTTP_201_CREATED)


class CartItemDetailView(APIView):
    """
    PATCH  -> set quantity
    DELETE -> remove line
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartItemSerializer

    @extend_schema(
        tags=["Cart"],
        request=UpdateCartItemInputSerializer,
        responses={200: CartItemSerializer},
    )
    def patch(self, request, item_id):
        serializer = UpdateCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        principal = get_principal(request)
        line = CartService().set_quantity(principal, item_id, serializer.validated_data["quantity"])
        return Response(CartItemSerializer(line).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Cart"], responses={204: None})
    def delete(self, request, item_id):
        principal = get_principal(request)
        CartService().remove_item(principal, item_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
