import base64
import json
from decimal import Decimal
from unittest.mock import MagicMock, patch
from urllib.parse import unquote

import pytest
import requests
from cart.services import add_items
from catalog.tests.factories import ItemPriceFactory
from common.owners import Guest
from customer.tests.factories import CityFactory
from orders.emails import track_order_url
from orders.messaging import format_order_message
from orders.models import Order
from orders.notifications import build_order_payload, dispatch_order_notifications
from orders.services import place_order
from orders.tests.factories import OrderFactory, OrderItemFactory
from restaurant.tests.factories import RestaurantFactory

GUEST = Guest(guest_id="guest-abc")


@pytest.fixture
def twilio(settings):
    settings.TWILIO_ACCOUNT_SID = "AC123"
    settings.TWILIO_AUTH_TOKEN = "secret"
    settings.TWILIO_WHATSAPP_FROM = "+14155550000"
    settings.TWILIO_WHATSAPP_TO = "whatsapp:+14155559999"
    settings.TWILIO_API_BASE_URL = "https://api.twilio.test"
    return settings


def _place(email="sam@example.com"):
    RestaurantFactory(tax=Decimal("10.00"), delivery_charge=Decimal("3.00"))
    price = ItemPriceFactory(price=Decimal("10.00"))
    add_items(owner=GUEST, items=[{"item_id": price.item_id, "price_id": price.id, "quantity": 2}])
    return place_order(
        owner=GUEST,
        delivery={"city": CityFactory(name="Springfield"), "state": "IL", "zip_code": "62701", "street_address": "1 Main St"},
        contact={"name": "Sam", "phone": "+14155550100", "email": email, "notes": "No onions"},
    )


@pytest.mark.django_db
def test_notifications_run_after_commit_and_email_is_sent(django_capture_on_commit_callbacks, mailoutbox):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        order = _place()

    assert len(callbacks) == 1
    assert len(mailoutbox) == 1
    message = mailoutbox[0]
    assert message.to == ["sam@example.com"]
    assert order.number in message.subject
    assert "Total: 25.00" in message.body


@pytest.mark.django_db
def test_no_notifications_when_placement_fails(django_capture_on_commit_callbacks, mailoutbox):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(Exception):
            place_order(owner=GUEST, delivery={}, contact={"phone": "+1"})

    assert callbacks == []
    assert mailoutbox == []


@pytest.mark.django_db
def test_sink_failures_do_not_fail_the_order(django_capture_on_commit_callbacks, twilio):
    with patch("orders.notifications.emails.send_email", side_effect=OSError("smtp down")):
        with patch("orders.messaging.requests.post", side_effect=requests.ConnectionError("offline")):
            with django_capture_on_commit_callbacks(execute=True):
                order = _place()

    assert Order.objects.filter(id=order.id).exists()


@pytest.mark.django_db
def test_dispatch_reports_each_outcome(twilio, mailoutbox):
    order = _place()
    response = MagicMock()
    response.json.return_value = {"sid": "SM1"}

    with patch("orders.messaging.requests.post", return_value=response) as post:
        outcomes = dispatch_order_notifications(order.id)

    assert outcomes == {"order_confirmation_email": "sent", "order_whatsapp_summary": "sent"}
    args, kwargs = post.call_args
    assert args[0] == "https://api.twilio.test/2010-04-01/Accounts/AC123/Messages.json"
    assert kwargs["auth"] == ("AC123", "secret")
    assert kwargs["data"]["From"] == "whatsapp:+14155550000"
    assert kwargs["data"]["To"] == "whatsapp:+14155559999"
    assert f"Order #: {order.number}" in kwargs["data"]["Body"]


@pytest.mark.django_db
def test_dispatch_skips_unconfigured_or_disabled_sinks(settings, mailoutbox):
    settings.ORDER_NOTIFICATION_EMAIL_ENABLED = False
    order = _place()

    with patch("orders.messaging.requests.post") as post:
        outcomes = dispatch_order_notifications(order.id)

    assert outcomes == {"order_confirmation_email": "skipped", "order_whatsapp_summary": "skipped"}
    post.assert_not_called()
    assert mailoutbox == []


@pytest.mark.django_db
def test_dispatch_records_failures(twilio):
    order = _place()

    with patch("orders.messaging.requests.post", side_effect=requests.Timeout("slow")):
        with patch("orders.notifications.emails.send_email", side_effect=OSError("smtp down")):
            outcomes = dispatch_order_notifications(order.id)

    assert outcomes == {"order_confirmation_email": "failed", "order_whatsapp_summary": "failed"}


@pytest.mark.django_db
def test_order_without_email_skips_confirmation(mailoutbox):
    order = _place(email=None)

    outcomes = dispatch_order_notifications(order.id)

    assert outcomes["order_confirmation_email"] == "skipped"
    assert mailoutbox == []


@pytest.mark.django_db
def test_track_order_url_encodes_payload(settings):
    settings.FRONTEND_URL = "https://shop.example/"
    order = OrderFactory()
    payload = build_order_payload(order)

    url = track_order_url(payload)

    prefix = "https://shop.example/track?order_details="
    assert url.startswith(prefix)
    decoded = json.loads(base64.urlsafe_b64decode(unquote(url[len(prefix):])))
    assert decoded["number"] == order.number
    assert decoded["payable_price"] == "14.00"


def test_track_order_url_without_frontend(settings):
    settings.FRONTEND_URL = ""

    assert track_order_url({"id": 1}) == "#"


@pytest.mark.django_db
def test_whatsapp_message_layout():
    order = OrderFactory(
        name="Sam",
        notes="No onions",
        discount_coupon="SAVE5",
        discount_amount=Decimal("5.00"),
        total_amount=Decimal("9.00"),
        street_address="1 Main St",
    )
    OrderItemFactory(order=order, title="Margherita", quantity=2, unit_price=Decimal("5.00"))

    text = format_order_message(build_order_payload(order))

    assert f"Order #: {order.number}" in text
    assert "Customer: Sam" in text
    assert "- Margherita x2 @ $5.00 = $10.00" in text
    assert "Discount (SAVE5): -$5.00" in text
    assert "*Total: $9.00*" in text
    assert "1 Main St" in text
    assert "IL 62701" in text
    assert "*Special Instructions:*\nNo onions" in text
