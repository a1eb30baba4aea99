import factory
from customer.models import Address, City
from factory import Faker
from factory.django import DjangoModelFactory


class CityFactory(DjangoModelFactory):
    class Meta:
        model = City
        django_get_or_create = ("name",)

    name = Faker("city")
    is_active = True


class AddressFactory(DjangoModelFactory):
    class Meta:
        model = Address

    user = factory.SubFactory("cart.tests.factories.UserFactory")
    city = factory.SubFactory(CityFactory)
    state = Faker("state")
    zip_code = Faker("postcode")
    street_address = Faker("street_address")
