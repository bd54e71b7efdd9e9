"""
Customer order endpoints. Lookups are scoped to the caller and another
user's order answers 404; admins changing a status reach any order.
"""
import logging

from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.orders import services as orders
from ..permissions import CanChangeOrderStatus
from ..serializers import (
    InvoiceSerializer,
    OrderCancelSerializer,
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatusSerializer,
)
from .base import success

logger = logging.getLogger(__name__)


class OrderListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: OrderSerializer(many=True)}, description="Caller's orders, newest first")
    def get(self, request):
        user_orders = list(orders.orders_for(request.user))
        return success(count=len(user_orders), orders=OrderSerializer(user_orders, many=True).data)

    @extend_schema(
        request=OrderCreateSerializer,
        responses={201: OrderSerializer},
        description="Place an order. Prices and the total are computed from the catalog.",
        examples=[
            OpenApiExample(
                "Two products",
                value={
                    "items": [
                        {"product_id": "3f1c2b7e-8a4d-4c1e-9f1a-0b6d2e5c7a91", "quantity": 2},
                        {"product_id": "a9e4d0c2-5b3f-4e8a-8c7d-1f2e3a4b5c6d", "quantity": 1},
                    ],
                    "payment_method": "card",
                    "shipping_address": {"street": "12 Rue des Orangers", "city": "Marrakech",
                                         "postal_code": "40000", "country": "Morocco"},
                },
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = orders.place_order(
            request.user,
            items=data['items'],
            payment_method=data['payment_method'],
            shipping_address=data.get('shipping_address'),
            billing_address=data.get('billing_address'),
            notes=data['notes'],
            delivery_instructions=data['delivery_instructions'],
            declared_total=data.get('total'),
        )
        return success(
            "Order placed",
            status.HTTP_201_CREATED,
            order=OrderSerializer(order).data,
            points_earned=orders.loyalty_points_for(order.total),
        )


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: OrderSerializer}, description="One of the caller's orders")
    def get(self, request, order_id):
        order = orders.get_order_for(request.user, order_id)
        return success(order=OrderSerializer(order).data)


class OrderInvoiceView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: InvoiceSerializer}, description="Invoice data for one order")
    def get(self, request, order_id):
        order = orders.get_order_for(request.user, order_id)
        return success(order=InvoiceSerializer(order).data)


class OrderInvoicesView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: InvoiceSerializer(many=True)}, description="Invoice data for every order")
    def get(self, request):
        user_orders = list(orders.orders_for(request.user).select_related('user'))
        return success(count=len(user_orders), orders=InvoiceSerializer(user_orders, many=True).data)


class OrderCancelView(APIView):
    """
    Owner cancellation. Delivered or already cancelled orders are rejected.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(request=OrderCancelSerializer, responses={200: OrderSerializer}, description="Cancel an order")
    def post(self, request, order_id):
        serializer = OrderCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = orders.cancel_order(request.user, order_id, reason=serializer.validated_data['reason'])
        return success("Order cancelled", order=OrderSerializer(order).data)


class OrderStatusView(APIView):
    """
    Status change on an order. Admins reach any order; everyone else only
    their own, and only when ORDER_STATUS_REQUIRES_ADMIN is turned off.
    """
    permission_classes = [IsAuthenticated, CanChangeOrderStatus]

    @extend_schema(request=OrderStatusSerializer, responses={200: OrderSerializer}, description="Change status")
    def put(self, request, order_id):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if request.user.is_admin:
            order = orders.get_order(order_id)
        else:
            order = orders.get_order_for(request.user, order_id)
        order = orders.change_status(order, data['status'], actor=request.user, reason=data['reason'])
        return success("Order status updated", order=OrderSerializer(order).data)
