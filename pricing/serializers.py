"""Read serializers for the public price quote shape.

Shared by cart summaries and order details so both render money the same
way (two-place decimal strings).
"""

from rest_framework import serializers


class DiscountSummarySerializer(serializers.Serializer):
    coupon = serializers.CharField(allow_blank=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class ChargesSerializer(serializers.Serializer):
    tax = serializers.DecimalField(max_digits=5, decimal_places=2)
    tax_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    delivery_charges = serializers.DecimalField(max_digits=12, decimal_places=2)


class PriceQuoteSerializer(serializers.Serializer):
    """`{items_price, discount{coupon, amount}, charges{...}, payable_price}`."""

    items_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount = DiscountSummarySerializer()
    charges = ChargesSerializer()
    payable_price = serializers.DecimalField(max_digits=12, decimal_places=2)
