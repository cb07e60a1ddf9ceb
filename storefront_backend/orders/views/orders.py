# orders/views/orders.py

"""
ORDER API VIEWS

POST /api/orders/          -> checkout current cart into a pending order
GET  /api/orders/          -> principal's orders, newest first, with lines
GET  /api/orders/<uuid>/   -> one order (404 when missing OR owned by someone else)
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.api import CheckoutThrottle, error_response
from common.exceptions import NotFound
from common.principal import get_principal
from orders.serializers import CreateOrderInputSerializer, OrderSerializer, PlacedOrderSerializer
from orders.services import OrderWorkflow

logger = logging.getLogger(__name__)


class OrderListCreateView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    def get_throttles(self):
        if self.request.method == "POST":
            return [CheckoutThrottle()]
        return super().get_throttles()

    @extend_schema(
        tags=["Orders"],
        responses={200: OrderSerializer(many=True)},
        description="Orders of the authenticated principal, newest first.",
    )
    def get(self, request):
        principal = get_principal(request)
        orders = OrderWorkflow().list_orders_for_principal(principal)
        return Response(OrderSerializer(orders, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Orders"],
        request=CreateOrderInputSerializer,
        responses={
            201: PlacedOrderSerializer,
            400: OpenApiResponse(description="Empty cart or invalid shipping address"),
            409: OpenApiResponse(description="Product unavailable, insufficient stock or checkout in progress"),
        },
        examples=[
            OpenApiExample(
                "Checkout",
                value={
                    "shipping_address": {
                        "name": "Kim",
                        "phone": "010-0000-0000",
                        "postcode": "04524",
                        "address": "Seoul",
                        "detailAddress": "101",
                    },
                    "order_note": "Leave at the door",
                },
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = CreateOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        principal = get_principal(request)
        placed = OrderWorkflow().create_order(
            principal,
            dict(serializer.validated_data["shipping_address"]),
            serializer.validated_data.get("order_note"),
        )
        return Response(PlacedOrderSerializer(placed).data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(
        tags=["Orders"],
        responses={200: OrderSerializer, 404: OpenApiResponse(description="Order not found")},
    )
    def get(self, request, order_id):
        principal = get_principal(request)
        found = OrderWorkflow().get_order_by_id(principal, order_id)
        if found is None:
            return error_response(
                code=NotFound.code,
                message="Order not found.",
                http_status=status.HTTP_404_NOT_FOUND,
            )
        return Response(OrderSerializer(found).data, status=status.HTTP_200_OK)
