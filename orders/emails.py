"""Email utilities for the orders app.

Uses Django's email backend, with links composed from FRONTEND_URL.
Templates are looked up by name in `TEMPLATES`; each one turns the order
payload into a subject and a plain-text body.
"""

import base64
import json
from urllib.parse import quote

from django.conf import settings
from django.core.mail import send_mail


def track_order_url(payload: dict) -> str:
    """Frontend link carrying the order payload as urlsafe base64 JSON.

    Returns "#" when FRONTEND_URL is not configured.
    """

    frontend = getattr(settings, "FRONTEND_URL", "")
    if not frontend:
        return "#"
    encoded = base64.urlsafe_b64encode(json.dumps(payload, sort_keys=True).encode("utf-8")).decode("ascii")
    return f"{frontend.rstrip('/')}/track?order_details={quote(encoded)}"


def _order_confirmation(payload: dict) -> tuple[str, str]:
    number = payload.get("number") or payload.get("id")
    lines = [
        f"Hi {payload.get('name') or 'there'},",
        "",
        "Thank you for your order!",
        "",
        f"Order: {number}",
        f"Status: {payload.get('status')}",
        "",
    ]
    for item in payload.get("items", []):
        size = f" ({item['size']})" if item.get("size") else ""
        lines.append(f"{item['title']}{size} x{item['quantity']} @ {item['unit_price']} = {item['line_total']}")
    discount = payload.get("discount") or {}
    charges = payload.get("charges") or {}
    lines += [
        "",
        f"Items: {payload.get('items_price')}",
        f"Discount: -{discount.get('amount', '0.00')}",
        f"Tax ({charges.get('tax', '0.00')}%): {charges.get('tax_price', '0.00')}",
        f"Delivery: {charges.get('delivery_charges', '0.00')}",
        f"Total: {payload.get('payable_price')}",
        "",
        f"Track your order here: {track_order_url(payload)}",
    ]
    return f"Order Confirmation - Order {number}", "\n".join(lines) + "\n"


TEMPLATES = {
    "order_confirmation": _order_confirmation,
}


def send_email(to: str, template: str, payload: dict) -> bool:
    """Render `template` with the payload and send it to `to`.

    Raises KeyError for an unknown template; delivery errors propagate to
    the caller.
    """

    subject, body = TEMPLATES[template](payload)
    sent = send_mail(
        subject,
        body,
        getattr(settings, "DEFAULT_FROM_EMAIL", None),
        [to],
        fail_silently=False,
    )
    return bool(sent)
