"""Orders API endpoints."""

from common.exceptions import OrderingError, error_response
from common.owners import GUEST_ID_HEADER, resolve_owner
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import generics, status
from rest_framework import serializers as rf_serializers
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Order
from .serializers import OrderSerializer, OrderStatusUpdateSerializer, PlaceOrderSerializer
from .services import get_order, list_orders, place_order, update_order_status

GUEST_HEADER_PARAM = OpenApiParameter(
    name=GUEST_ID_HEADER,
    location=OpenApiParameter.HEADER,
    required=False,
    description="Guest token for anonymous callers",
    type=str,
)

ERROR_RESPONSE = inline_serializer(
    name="OrderError",
    fields={"detail": rf_serializers.CharField(), "code": rf_serializers.CharField()},
)

ORDER_EXAMPLE = OpenApiExample(
    "Order",
    value={
        "id": 123,
        "number": "ORD-000123",
        "status": "pending",
        "payment_status": "unpaid",
        "user_id": None,
        "guest_id": "2f6c1b7e",
        "name": "Sam",
        "email": "sam@example.com",
        "phone": "+14155550100",
        "address_id": None,
        "city_id": 4,
        "city_name": "Springfield",
        "state": "IL",
        "zip_code": "62701",
        "street_address": "742 Evergreen Terrace",
        "notes": "Ring twice",
        "created_at": "2025-01-01T12:00:00Z",
        "items": [
            {
                "id": 10,
                "item_id": 7,
                "price_id": 12,
                "title": "Margherita",
                "size": "Large",
                "quantity": 2,
                "unit_price": "10.00",
                "line_total": "20.00",
            }
        ],
        "items_price": "20.00",
        "discount": {"coupon": "", "amount": "0.00"},
        "charges": {"tax": "10.00", "tax_price": "2.00", "delivery_charges": "3.00"},
        "payable_price": "25.00",
    },
    response_only=True,
)


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"


class OrderListCreateView(generics.ListAPIView):
    """List the caller's orders or place a new one from their cart.

    Filters: `status`, `payment_status`, `number`.
    """

    permission_classes = [AllowAny]
    serializer_class = OrderSerializer
    pagination_class = DefaultPagination
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "payment_status", "number"]
    throttle_scope = "orders"

    def get_queryset(self):
        return list_orders(resolve_owner(self.request))

    @extend_schema(
        tags=["Orders"],
        summary="List orders",
        description="List the caller's orders with optional filters and pagination.",
        parameters=[GUEST_HEADER_PARAM],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Orders"],
        summary="Place order",
        description=(
            "Creates an order from the caller's cart, priced with the restaurant's tax and delivery charge, "
            "and clears the cart. Provide `address_id` or the inline address fields."
        ),
        parameters=[GUEST_HEADER_PARAM],
        request=PlaceOrderSerializer,
        responses={201: OrderSerializer, 403: ERROR_RESPONSE, 404: ERROR_RESPONSE},
        examples=[
            OpenApiExample(
                "Inline address",
                value={
                    "name": "Sam",
                    "phone": "+14155550100",
                    "city_id": 4,
                    "state": "IL",
                    "zip_code": "62701",
                    "street_address": "742 Evergreen Terrace",
                    "notes": "Ring twice",
                },
                request_only=True,
            ),
            ORDER_EXAMPLE,
        ],
    )
    def post(self, request):
        owner = resolve_owner(request)
        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = place_order(
                owner=owner,
                delivery=serializer.delivery_info(),
                contact=serializer.contact_info(),
            )
        except OrderingError as exc:
            return error_response(exc)
        order = get_order(order.id)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    """Retrieve a single order; callers only see their own, admins see all."""

    permission_classes = [AllowAny]
    throttle_scope = "orders"

    @extend_schema(
        tags=["Orders"],
        summary="Get order detail",
        description="Returns the order as stored at placement. Totals are never recomputed.",
        parameters=[GUEST_HEADER_PARAM],
        responses={200: OrderSerializer, 403: ERROR_RESPONSE, 404: ERROR_RESPONSE},
        examples=[ORDER_EXAMPLE],
    )
    def get(self, request, order_id: int):
        requester = None if request.user.is_staff else resolve_owner(request)
        try:
            order = get_order(order_id, requesting_owner=requester)
        except OrderingError as exc:
            return error_response(exc)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class AdminOrderListView(generics.ListAPIView):
    """Admin listing of every order."""

    permission_classes = [IsAdminUser]
    serializer_class = OrderSerializer
    pagination_class = DefaultPagination
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "payment_status", "number", "user", "guest_id"]

    def get_queryset(self):
        return Order.objects.select_related("city").prefetch_related("items").order_by("-id")

    @extend_schema(tags=["Admin Order Endpoints"], summary="List all orders")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class AdminOrderStatusView(APIView):
    """Move an order's status and/or payment status forward."""

    permission_classes = [IsAdminUser]

    @extend_schema(
        tags=["Admin Order Endpoints"],
        summary="Update order status",
        description="Statuses only move forward: pending, cooking, on_the_way, delivered; unpaid, paid.",
        request=OrderStatusUpdateSerializer,
        responses={200: OrderSerializer, 400: ERROR_RESPONSE, 404: ERROR_RESPONSE},
        examples=[OpenApiExample("Cooking", value={"status": "cooking"}, request_only=True)],
    )
    def patch(self, request, order_id: int):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = get_order(order_id)
            order = update_order_status(order, **serializer.validated_data)
        except OrderingError as exc:
            return error_response(exc)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)
