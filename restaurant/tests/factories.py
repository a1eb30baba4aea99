from decimal import Decimal

from factory import Faker
from factory.django import DjangoModelFactory
from restaurant.models import Restaurant


class RestaurantFactory(DjangoModelFactory):
    class Meta:
        model = Restaurant

    shop_name = Faker("company")
    shop_phone = "+14155550100"
    is_shop_open = True
    tax = Decimal("10.00")
    delivery_charge = Decimal("3.00")
