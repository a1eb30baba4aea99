"""DRF views for cart operations.

Every cart route serves both registered users and guests; the owner is
resolved from the request (authenticated user, else the `X-Guest-Id`
header or a `guest_id` field).
"""

from common.exceptions import OrderingError, error_response
from common.owners import GUEST_ID_HEADER, resolve_owner
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import get_cart_summary, list_all_carts
from .serializers import (
    AddItemsSerializer,
    AdminCartSummarySerializer,
    ApplyDiscountSerializer,
    CartSummarySerializer,
    ClearCartResponseSerializer,
    RemoveItemSerializer,
    SetQuantitySerializer,
)
from .services import (
    add_items,
    apply_discount,
    clear_cart,
    delete_cart_containing,
    remove_discount,
    remove_item,
    set_quantity,
)

GUEST_HEADER_PARAM = OpenApiParameter(
    name=GUEST_ID_HEADER,
    location=OpenApiParameter.HEADER,
    required=False,
    description="Guest cart token (required for anonymous callers unless guest_id is sent in the body or query)",
    type=str,
)

ERROR_RESPONSE = inline_serializer(
    name="CartError",
    fields={"detail": rf_serializers.CharField(), "code": rf_serializers.CharField()},
)

CART_EXAMPLE = OpenApiExample(
    "Cart",
    value={
        "id": 41,
        "user_id": None,
        "guest_id": "2f6c1b7e",
        "items": [
            {
                "id": 7,
                "title": "Margherita",
                "quantity": 3,
                "price": {"id": 12, "price": "10.00", "size": "Large"},
            }
        ],
        "items_price": "30.00",
        "discount": {"coupon": "", "amount": "0.00"},
        "charges": {"tax": "8.00", "tax_price": "2.40", "delivery_charges": "5.00"},
        "payable_price": "37.40",
        "warnings": [],
    },
)


def _summary_response(summary: dict, code: int = status.HTTP_200_OK) -> Response:
    return Response(CartSummarySerializer(summary).data, status=code)


class CartView(APIView):
    """Return the caller's cart or add items to it."""

    permission_classes = [AllowAny]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns the caller's aggregated cart with its price quote. An empty cart prices to zero.",
        parameters=[GUEST_HEADER_PARAM],
        responses={200: CartSummarySerializer, 404: ERROR_RESPONSE},
        examples=[CART_EXAMPLE],
    )
    def get(self, request):
        owner = resolve_owner(request)
        try:
            summary = get_cart_summary(owner)
        except OrderingError as exc:
            return error_response(exc)
        return _summary_response(summary)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add items to cart",
        description="Adds one cart line per requested unit. Quantity defaults to 1.",
        request=AddItemsSerializer,
        parameters=[GUEST_HEADER_PARAM],
        responses={201: CartSummarySerializer, 404: ERROR_RESPONSE, 422: ERROR_RESPONSE},
        examples=[
            OpenApiExample(
                "Add",
                value={"items": [{"item_id": 7, "item_price_id": 12, "quantity": 3}]},
                request_only=True,
            )
        ],
    )
    def post(self, request):
        owner = resolve_owner(request)
        serializer = AddItemsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            summary = add_items(owner=owner, items=serializer.validated_data["items"])
        except OrderingError as exc:
            return error_response(exc)
        return _summary_response(summary, status.HTTP_201_CREATED)


class CartItemView(APIView):
    """Set the quantity of, or remove, one item variant."""

    permission_classes = [AllowAny]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Set cart item quantity",
        description="Sets the exact quantity of an item variant. Zero removes it.",
        request=SetQuantitySerializer,
        parameters=[GUEST_HEADER_PARAM],
        responses={200: CartSummarySerializer, 404: ERROR_RESPONSE, 422: ERROR_RESPONSE},
    )
    def patch(self, request):
        owner = resolve_owner(request)
        serializer = SetQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            summary = set_quantity(owner=owner, **serializer.validated_data)
        except OrderingError as exc:
            return error_response(exc)
        return _summary_response(summary)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Remove cart item",
        description="Removes every unit of an item variant from the cart.",
        request=RemoveItemSerializer,
        parameters=[GUEST_HEADER_PARAM],
        responses={200: CartSummarySerializer, 404: ERROR_RESPONSE},
    )
    def delete(self, request):
        owner = resolve_owner(request)
        serializer = RemoveItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            summary = remove_item(owner=owner, **serializer.validated_data)
        except OrderingError as exc:
            return error_response(exc)
        return _summary_response(summary)


class CartDiscountView(APIView):
    """Apply or remove the cart-wide discount code."""

    permission_classes = [AllowAny]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Apply discount",
        description="Applies a published discount code to every line of the cart.",
        request=ApplyDiscountSerializer,
        parameters=[GUEST_HEADER_PARAM],
        responses={200: CartSummarySerializer, 404: ERROR_RESPONSE},
        examples=[OpenApiExample("Apply", value={"code": "WELCOME5"}, request_only=True)],
    )
    def post(self, request):
        owner = resolve_owner(request)
        serializer = ApplyDiscountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            summary = apply_discount(owner=owner, code=serializer.validated_data["code"])
        except OrderingError as exc:
            return error_response(exc)
        return _summary_response(summary)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Remove discount",
        parameters=[GUEST_HEADER_PARAM],
        responses={200: CartSummarySerializer, 404: ERROR_RESPONSE},
    )
    def delete(self, request):
        owner = resolve_owner(request)
        try:
            summary = remove_discount(owner=owner)
        except OrderingError as exc:
            return error_response(exc)
        return _summary_response(summary)


class CartClearView(APIView):
    """Delete every line of the caller's cart."""

    permission_classes = [AllowAny]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Clear cart",
        parameters=[GUEST_HEADER_PARAM],
        responses={200: ClearCartResponseSerializer},
        examples=[OpenApiExample("Cleared", value={"deleted_count": 3})],
    )
    def post(self, request):
        owner = resolve_owner(request)
        deleted = clear_cart(owner=owner)
        return Response({"deleted_count": deleted}, status=status.HTTP_200_OK)


class CartDeleteView(APIView):
    """Delete the whole cart that a cart line belongs to.

    Admins may delete any cart; other callers only their own.
    """

    permission_classes = [AllowAny]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Delete cart",
        parameters=[GUEST_HEADER_PARAM],
        responses={200: ClearCartResponseSerializer, 403: ERROR_RESPONSE, 404: ERROR_RESPONSE},
    )
    def delete(self, request, line_id: int):
        requester = None if request.user.is_staff else resolve_owner(request)
        try:
            deleted = delete_cart_containing(line_id=line_id, requester=requester)
        except OrderingError as exc:
            return error_response(exc)
        return Response({"deleted_count": deleted}, status=status.HTTP_200_OK)


class AdminCartListView(APIView):
    """Admin listing of every open cart, grouped by owner."""

    permission_classes = [IsAdminUser]

    @extend_schema(
        tags=["Admin Cart Endpoints"],
        summary="List all carts",
        description="Every non-empty cart, priced with the current restaurant charges.",
        responses={200: AdminCartSummarySerializer(many=True)},
    )
    def get(self, request):
        carts = list_all_carts()
        return Response(AdminCartSummarySerializer(carts, many=True).data, status=status.HTTP_200_OK)
