"""Cart serializers for read and write operations."""

from pricing.serializers import PriceQuoteSerializer
from rest_framework import serializers


class CartLinePriceSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    size = serializers.CharField(allow_null=True, required=False)


class CartLineItemSerializer(serializers.Serializer):
    """Read serializer for one aggregated (item, price variant) line."""

    id = serializers.IntegerField()
    title = serializers.CharField()
    quantity = serializers.IntegerField()
    price = CartLinePriceSerializer()


class CartSummarySerializer(PriceQuoteSerializer):
    """Read serializer for the cart summary and items."""

    id = serializers.IntegerField(allow_null=True)
    user_id = serializers.IntegerField(allow_null=True)
    guest_id = serializers.CharField(allow_null=True)
    items = CartLineItemSerializer(many=True)
    warnings = serializers.ListField(child=serializers.CharField())


class AdminCartSummarySerializer(CartSummarySerializer):
    line_ids = serializers.ListField(child=serializers.IntegerField())
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class CartItemInputSerializer(serializers.Serializer):
    """One requested item variant; quantity defaults to 1."""

    item_id = serializers.IntegerField(min_value=1)
    item_price_id = serializers.IntegerField(min_value=1, source="price_id")
    quantity = serializers.IntegerField(required=False, allow_null=True, max_value=999)


class AddItemsSerializer(serializers.Serializer):
    """Write serializer for adding one or more items to the cart."""

    items = CartItemInputSerializer(many=True, allow_empty=False)


class CartItemReferenceSerializer(serializers.Serializer):
    item_id = serializers.IntegerField(min_value=1)
    item_price_id = serializers.IntegerField(min_value=1, source="price_id")


class SetQuantitySerializer(CartItemReferenceSerializer):
    """Write serializer for setting an item variant's quantity."""

    quantity = serializers.IntegerField(min_value=0, max_value=999)


class RemoveItemSerializer(CartItemReferenceSerializer):
    pass


class ApplyDiscountSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=255, trim_whitespace=True)


class ClearCartResponseSerializer(serializers.Serializer):
    deleted_count = serializers.IntegerField()
