"""WhatsApp order summaries through the Twilio REST API."""

import logging
from decimal import Decimal

import requests
from django.conf import settings

logger = logging.getLogger("restaurant.notifications")


class MessagingNotConfigured(Exception):
    """Twilio credentials or numbers are missing."""


def _money(value) -> str:
    return f"${Decimal(str(value or '0')):.2f}"


def format_order_message(payload: dict) -> str:
    """Plain-text order summary for the restaurant's WhatsApp number."""

    lines = [
        "*New Order Received*",
        "",
        f"Order #: {payload.get('number') or payload.get('id')}",
        f"Customer: {payload.get('name') or 'Guest'}",
    ]
    if payload.get("phone"):
        lines.append(f"Phone: {payload['phone']}")
    lines += [f"Time: {payload.get('created_at')}", ""]

    items = payload.get("items") or []
    if items:
        lines.append("*Items:*")
        for item in items:
            lines.append(
                f"- {item['title']} x{item['quantity']} @ {_money(item['unit_price'])} = {_money(item['line_total'])}"
            )
        lines.append("")

    discount = payload.get("discount") or {}
    charges = payload.get("charges") or {}
    lines += ["*Price Summary:*", f"Items: {_money(payload.get('items_price'))}"]
    if Decimal(str(discount.get("amount") or "0")) > 0:
        label = f"Discount ({discount['coupon']})" if discount.get("coupon") else "Discount"
        lines.append(f"{label}: -{_money(discount['amount'])}")
    lines += [
        f"Tax: {_money(charges.get('tax_price'))}",
        f"Delivery: {_money(charges.get('delivery_charges'))}",
        "-------------------------",
        f"*Total: {_money(payload.get('payable_price'))}*",
        "",
    ]

    if payload.get("street_address"):
        lines += ["*Delivery Address:*", payload["street_address"]]
        if payload.get("city_name"):
            lines.append(payload["city_name"])
        lines += [f"{payload.get('state') or ''} {payload.get('zip_code') or ''}".strip(), ""]

    if payload.get("notes"):
        lines += ["*Special Instructions:*", payload["notes"]]

    return "\n".join(lines) + "\n"


def _whatsapp(number: str) -> str:
    return number if number.startswith("whatsapp:") else f"whatsapp:{number}"


def send_message(payload: dict) -> bool:
    """Send the order summary to the configured WhatsApp number.

    Raises MessagingNotConfigured when credentials or numbers are unset and
    `requests.RequestException` on delivery failures.
    """

    sid = settings.TWILIO_ACCOUNT_SID
    token = settings.TWILIO_AUTH_TOKEN
    from_number = settings.TWILIO_WHATSAPP_FROM
    to_number = settings.TWILIO_WHATSAPP_TO
    if not (sid and token and from_number and to_number):
        raise MessagingNotConfigured("Twilio credentials or WhatsApp numbers are not configured")

    url = f"{settings.TWILIO_API_BASE_URL.rstrip('/')}/2010-04-01/Accounts/{sid}/Messages.json"
    resp = requests.post(
        url,
        data={"From": _whatsapp(from_number), "To": _whatsapp(to_number), "Body": format_order_message(payload)},
        auth=(sid, token),
        timeout=settings.TWILIO_TIMEOUT_SECONDS,
    )
    resp.raise_for_status()
    logger.debug("twilio message accepted: %s", resp.json().get("sid"))
    return True
