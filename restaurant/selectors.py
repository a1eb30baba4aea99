"""Settings store: read the pricing configuration from the restaurant row."""

from typing import Optional

from pricing.calculator import PricingContext

from .models import Restaurant


def get_restaurant() -> Optional[Restaurant]:
    return Restaurant.objects.order_by("id").first()


def get_restaurant_settings() -> Optional[PricingContext]:
    """Return the configured tax/delivery charges, or None when unset."""

    restaurant = get_restaurant()
    if restaurant is None:
        return None
    return PricingContext(tax_percent=restaurant.tax, delivery_charge=restaurant.delivery_charge)


def get_preview_pricing_context() -> PricingContext:
    """Pricing context for cart previews; a missing row prices as zero charges."""

    return get_restaurant_settings() or PricingContext()
