import pytest
from cart.tests.factories import UserFactory
from customer.selectors import find_address
from customer.services import create_address
from customer.tests.factories import AddressFactory, CityFactory

pytestmark = pytest.mark.django_db


def test_create_address_strips_fields():
    user = UserFactory()
    city = CityFactory(name="Springfield")

    address = create_address(
        user_id=user.id, city=city, state=" IL ", zip_code=" 62701", street_address="1 Main St "
    )

    assert address.user_id == user.id
    assert (address.state, address.zip_code, address.street_address) == ("IL", "62701", "1 Main St")


def test_find_address():
    address = AddressFactory()

    found = find_address(address.id)

    assert found == address
    assert found.user_id == address.user_id
    assert find_address(999) is None
