import factory
from cart.models import CartLine
from django.contrib.auth import get_user_model
from factory.django import DjangoModelFactory


class UserFactory(DjangoModelFactory):
    class Meta:
        model = get_user_model()

    username = factory.Sequence(lambda n: f"diner{n}")
    email = factory.Sequence(lambda n: f"diner{n}@example.com")
    password = factory.PostGenerationMethodCall("set_password", "pass")


class CartLineFactory(DjangoModelFactory):
    """One unit in a guest cart unless a user is given."""

    class Meta:
        model = CartLine

    user = None
    guest_id = factory.Maybe("user", yes_declaration=None, no_declaration="guest-1")
    price = factory.SubFactory("catalog.tests.factories.ItemPriceFactory")
    item = factory.SelfAttribute("price.item")
    unit_price = factory.SelfAttribute("price.price")
    discount_code = None
