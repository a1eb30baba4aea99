"""DRF serializers for Orders.

Order totals are rendered from the quote stored at placement, never
recomputed from live menu prices.
"""

from decimal import Decimal

from common.choices import OrderStatus, PaymentStatus
from customer.models import City
from pricing.serializers import PriceQuoteSerializer
from rest_framework import serializers

from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """API representation of an order line item with computed line_total."""

    line_total = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "item_id",
            "price_id",
            "title",
            "size",
            "quantity",
            "unit_price",
            "line_total",
        ]
        read_only_fields = fields

    def get_line_total(self, obj: OrderItem) -> str:
        return f"{obj.line_total.quantize(Decimal('0.01'))}"


class OrderSerializer(serializers.ModelSerializer):
    """API representation for an order with its stored price quote."""

    items = OrderItemSerializer(many=True, read_only=True)
    city_name = serializers.CharField(source="city.name", read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            "id",
            "number",
            "status",
            "payment_status",
            "user_id",
            "guest_id",
            "name",
            "email",
            "phone",
            "address_id",
            "city_id",
            "city_name",
            "state",
            "zip_code",
            "street_address",
            "notes",
            "created_at",
            "items",
        ]
        read_only_fields = fields

    def to_representation(self, instance: Order) -> dict:
        data = super().to_representation(instance)
        data.update(PriceQuoteSerializer(instance.price_quote().as_api()).data)
        return data


class PlaceOrderSerializer(serializers.Serializer):
    """Write serializer for placing an order from the caller's cart.

    Either `address_id` (a saved address) or the inline address fields are
    required.
    """

    name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True, default=None)
    phone = serializers.CharField(max_length=32)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    address_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    city_id = serializers.PrimaryKeyRelatedField(
        queryset=City.objects.all(), source="city", required=False, allow_null=True
    )
    state = serializers.CharField(max_length=255, required=False, allow_blank=True)
    zip_code = serializers.CharField(max_length=50, required=False, allow_blank=True)
    street_address = serializers.CharField(required=False, allow_blank=True)

    INLINE_ADDRESS_FIELDS = {"city": "city_id", "state": "state", "zip_code": "zip_code", "street_address": "street_address"}

    def validate(self, attrs):
        if attrs.get("address_id"):
            return attrs
        missing = {
            field: ["This field is required when address_id is not provided."]
            for source, field in self.INLINE_ADDRESS_FIELDS.items()
            if not attrs.get(source)
        }
        if missing:
            raise serializers.ValidationError(missing)
        return attrs

    def delivery_info(self) -> dict:
        data = self.validated_data
        return {
            "address_id": data.get("address_id"),
            "city": data.get("city"),
            "state": data.get("state", ""),
            "zip_code": data.get("zip_code", ""),
            "street_address": data.get("street_address", ""),
        }

    def contact_info(self) -> dict:
        data = self.validated_data
        return {
            "name": data.get("name", ""),
            "email": data.get("email") or None,
            "phone": data["phone"],
            "notes": data.get("notes", ""),
        }


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide status and/or payment_status.")
        return attrs
