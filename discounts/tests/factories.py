from decimal import Decimal

import factory
from discounts.models import Discount
from factory.django import DjangoModelFactory


class DiscountFactory(DjangoModelFactory):
    class Meta:
        model = Discount

    code = factory.Sequence(lambda n: f"SAVE{n}")
    status = Discount.STATUS_PUBLISHED
    amount_off = Decimal("5.00")
