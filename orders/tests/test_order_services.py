from decimal import Decimal
from unittest.mock import patch

import pytest
from cart.models import CartLine
from cart.selectors import aggregate_lines, get_cart_summary
from cart.services import add_items, apply_discount
from cart.tests.factories import CartLineFactory, UserFactory
from catalog.tests.factories import ItemPriceFactory
from common.exceptions import ConfigurationMissing, ConflictError, EmptyCart, Forbidden, NotFound, NoValidItems
from common.owners import Guest, Registered
from customer.models import Address
from customer.tests.factories import AddressFactory, CityFactory
from discounts.tests.factories import DiscountFactory
from orders.models import Order, OrderItem
from orders.services import get_order, list_orders, place_order
from orders.tests.factories import OrderFactory
from restaurant.tests.factories import RestaurantFactory
from rest_framework.exceptions import ValidationError

GUEST = Guest(guest_id="guest-abc")
CONTACT = {"name": "Sam", "phone": "+14155550100", "email": "sam@example.com", "notes": "Ring twice"}


def _inline_delivery(city=None):
    return {
        "address_id": None,
        "city": city or CityFactory(name="Springfield"),
        "state": "IL",
        "zip_code": "62701",
        "street_address": "742 Evergreen Terrace",
    }


def _add(owner, price, quantity=1):
    add_items(owner=owner, items=[{"item_id": price.item_id, "price_id": price.id, "quantity": quantity}])


@pytest.mark.django_db
def test_place_order_freezes_quote_and_clears_cart():
    RestaurantFactory(tax=Decimal("10.00"), delivery_charge=Decimal("3.00"))
    pizza = ItemPriceFactory(price=Decimal("10.00"))
    soda = ItemPriceFactory(price=Decimal("4.50"))
    _add(GUEST, pizza, 2)
    _add(GUEST, soda, 1)
    expected = get_cart_summary(GUEST)

    order = place_order(owner=GUEST, delivery=_inline_delivery(), contact=CONTACT)

    assert order.number == f"ORD-{order.id:06d}"
    assert order.status == Order.STATUS_PENDING
    assert order.payment_status == Order.PAYMENT_UNPAID
    assert order.guest_id == "guest-abc"
    assert order.user_id is None
    assert order.items_price == expected["items_price"] == Decimal("24.50")
    assert order.tax_amount == expected["charges"]["tax_price"] == Decimal("2.45")
    assert order.delivery_charge == Decimal("3.00")
    assert order.total_amount == expected["payable_price"] == Decimal("29.95")
    assert not CartLine.objects.exists()
    items = list(OrderItem.objects.filter(order=order).order_by("id"))
    assert [(i.price_id, i.quantity, i.unit_price) for i in items] == [
        (pizza.id, 2, Decimal("10.00")),
        (soda.id, 1, Decimal("4.50")),
    ]

    pizza.price = Decimal("99.00")
    pizza.save()
    stored = get_order(order.id, requesting_owner=GUEST)
    quote = stored.price_quote()
    assert quote.items_subtotal == Decimal("24.50")
    assert quote.payable_total == Decimal("29.95")
    assert quote.as_api() == {k: expected[k] for k in ("items_price", "discount", "charges", "payable_price")}


@pytest.mark.django_db
def test_place_order_carries_discount():
    RestaurantFactory(tax=Decimal("0.00"), delivery_charge=Decimal("0.00"))
    DiscountFactory(code="SAVE5", amount_off=Decimal("5.00"))
    _add(GUEST, ItemPriceFactory(price=Decimal("20.00")))
    apply_discount(owner=GUEST, code="SAVE5")

    order = place_order(owner=GUEST, delivery=_inline_delivery(), contact=CONTACT)

    assert order.discount_coupon == "SAVE5"
    assert order.discount_amount == Decimal("5.00")
    assert order.total_amount == Decimal("15.00")


@pytest.mark.django_db
def test_guest_inline_address_is_not_saved():
    RestaurantFactory()
    _add(GUEST, ItemPriceFactory())

    order = place_order(owner=GUEST, delivery=_inline_delivery(), contact=CONTACT)

    assert order.address_id is None
    assert order.street_address == "742 Evergreen Terrace"
    assert order.city.name == "Springfield"
    assert not Address.objects.exists()


@pytest.mark.django_db
def test_registered_inline_address_is_saved_and_email_falls_back():
    RestaurantFactory()
    user = UserFactory(email="member@example.com")
    owner = Registered(user_id=user.id)
    _add(owner, ItemPriceFactory())

    order = place_order(owner=owner, delivery=_inline_delivery(), contact={"phone": "+14155550100"})

    assert order.user_id == user.id
    assert order.guest_id is None
    assert order.email == "member@example.com"
    assert order.address.user_id == user.id
    assert order.address.street_address == "742 Evergreen Terrace"


@pytest.mark.django_db
def test_saved_address_must_belong_to_owner():
    RestaurantFactory()
    user = UserFactory()
    owner = Registered(user_id=user.id)
    _add(owner, ItemPriceFactory())
    foreign = AddressFactory()

    with pytest.raises(Forbidden):
        place_order(owner=owner, delivery={"address_id": foreign.id}, contact=CONTACT)

    assert Order.objects.count() == 0
    assert CartLine.objects.count() == 1


@pytest.mark.django_db
def test_saved_address_copies_fields_onto_order():
    RestaurantFactory()
    user = UserFactory()
    owner = Registered(user_id=user.id)
    address = AddressFactory(user=user, street_address="1 Main St")
    _add(owner, ItemPriceFactory())

    order = place_order(owner=owner, delivery={"address_id": address.id}, contact=CONTACT)

    assert order.address_id == address.id
    assert order.street_address == "1 Main St"
    assert order.city_id == address.city_id


@pytest.mark.django_db
def test_guest_cannot_use_saved_address():
    RestaurantFactory()
    _add(GUEST, ItemPriceFactory())

    with pytest.raises(Forbidden):
        place_order(owner=GUEST, delivery={"address_id": AddressFactory().id}, contact=CONTACT)


@pytest.mark.django_db
def test_unknown_saved_address_is_not_found():
    RestaurantFactory()
    _add(GUEST, ItemPriceFactory())

    with pytest.raises(NotFound):
        place_order(owner=GUEST, delivery={"address_id": 424242}, contact=CONTACT)


@pytest.mark.django_db
def test_missing_inline_fields_are_validation_errors():
    RestaurantFactory()
    _add(GUEST, ItemPriceFactory())

    with pytest.raises(ValidationError) as exc:
        place_order(owner=GUEST, delivery={"city": CityFactory(), "state": "IL"}, contact=CONTACT)

    assert set(exc.value.detail) == {"zip_code", "street_address"}


@pytest.mark.django_db
def test_empty_cart_cannot_be_ordered():
    RestaurantFactory()

    with pytest.raises(EmptyCart):
        place_order(owner=GUEST, delivery=_inline_delivery(), contact=CONTACT)


@pytest.mark.django_db
def test_missing_restaurant_settings_rolls_back():
    _add(GUEST, ItemPriceFactory())

    with pytest.raises(ConfigurationMissing):
        place_order(owner=GUEST, delivery=_inline_delivery(), contact=CONTACT)

    assert CartLine.objects.count() == 1
    assert not Order.objects.exists()


@pytest.mark.django_db
def test_taken_order_number_is_a_conflict():
    RestaurantFactory()
    _add(GUEST, ItemPriceFactory())
    existing = OrderFactory()
    existing.number = f"ORD-{existing.id + 1:06d}"
    existing.save(update_fields=["number"])

    with pytest.raises(ConflictError):
        place_order(owner=GUEST, delivery=_inline_delivery(), contact=CONTACT)

    assert CartLine.objects.count() == 1
    assert Order.objects.count() == 1


@pytest.mark.django_db
def test_only_dangling_lines_cannot_be_ordered():
    RestaurantFactory()
    price = ItemPriceFactory()
    _add(GUEST, price)
    price.delete()

    with pytest.raises(NoValidItems):
        place_order(owner=GUEST, delivery=_inline_delivery(), contact=CONTACT)


@pytest.mark.django_db
def test_dangling_lines_are_left_out_of_the_order():
    RestaurantFactory(tax=Decimal("0.00"), delivery_charge=Decimal("0.00"))
    keep = ItemPriceFactory(price=Decimal("7.00"))
    gone = ItemPriceFactory()
    _add(GUEST, keep)
    _add(GUEST, gone)
    gone.delete()

    order = place_order(owner=GUEST, delivery=_inline_delivery(), contact=CONTACT)

    assert order.total_amount == Decimal("7.00")
    assert order.items.count() == 1
    assert not CartLine.objects.exists()


@pytest.mark.django_db
def test_failure_while_clearing_cart_rolls_back_order():
    RestaurantFactory()
    _add(GUEST, ItemPriceFactory(), 2)

    with patch("orders.services.clear_cart", side_effect=RuntimeError("boom")):
        with pytest.raises(RuntimeError):
            place_order(owner=GUEST, delivery=_inline_delivery(), contact=CONTACT)

    assert not Order.objects.exists()
    assert not OrderItem.objects.exists()
    assert CartLine.objects.count() == 2


@pytest.mark.django_db
def test_lines_added_after_pricing_stay_in_cart():
    RestaurantFactory()
    priced = ItemPriceFactory()
    late = ItemPriceFactory()
    _add(GUEST, priced)

    def add_late_line(owner, lines):
        CartLineFactory(guest_id=GUEST.guest_id, price=late)
        return aggregate_lines(owner, lines)

    with patch("orders.services.aggregate_lines", side_effect=add_late_line):
        order = place_order(owner=GUEST, delivery=_inline_delivery(), contact=CONTACT)

    assert [i.price_id for i in order.items.all()] == [priced.id]
    assert list(CartLine.objects.values_list("price_id", flat=True)) == [late.id]


@pytest.mark.django_db
def test_get_order_enforces_owner():
    RestaurantFactory()
    _add(GUEST, ItemPriceFactory())
    order = place_order(owner=GUEST, delivery=_inline_delivery(), contact=CONTACT)

    assert get_order(order.id).id == order.id
    with pytest.raises(Forbidden):
        get_order(order.id, requesting_owner=Guest(guest_id="someone-else"))
    with pytest.raises(NotFound):
        get_order(order.id + 100)


@pytest.mark.django_db
def test_list_orders_is_owner_scoped():
    RestaurantFactory()
    other = Guest(guest_id="other")
    for owner in (GUEST, other, GUEST):
        _add(owner, ItemPriceFactory())
        place_order(owner=owner, delivery=_inline_delivery(), contact=CONTACT)

    assert list_orders(GUEST).count() == 2
    assert list_orders(other).count() == 1
