from decimal import Decimal

import pytest
from django.urls import reverse
from pricing.calculator import PricingContext
from restaurant.selectors import get_preview_pricing_context, get_restaurant_settings
from restaurant.tests.factories import RestaurantFactory
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


def test_settings_missing_until_configured():
    assert get_restaurant_settings() is None
    assert get_preview_pricing_context() == PricingContext()


def test_settings_read_from_first_row():
    RestaurantFactory(tax=Decimal("8.00"), delivery_charge=Decimal("5.00"))
    RestaurantFactory(tax=Decimal("20.00"), delivery_charge=Decimal("0.00"))

    ctx = get_restaurant_settings()

    assert ctx == PricingContext(tax_percent=Decimal("8.00"), delivery_charge=Decimal("5.00"))


def test_health_reports_configuration():
    client = APIClient()

    before = client.get(reverse("health"))
    RestaurantFactory()
    after = client.get(reverse("health"))

    assert before.status_code == 200
    assert before.data == {"status": "ok", "database": "ok", "restaurant_configured": False}
    assert after.data["restaurant_configured"] is True
