"""Order notification dispatch.

Each notification type maps to the serializer that builds its payload and
the sink that delivers it. Dispatch runs after the order transaction has
committed; sink failures are logged and never reach the caller.
"""

import logging
from typing import Callable, NamedTuple, Optional

from django.conf import settings

from . import emails, messaging
from .models import Order
from .serializers import OrderSerializer

logger = logging.getLogger("restaurant.notifications")


class Notification(NamedTuple):
    payload_serializer: type
    send: Callable[[Order, dict], bool]
    # Returns a reason to skip, or None to send
    skip_reason: Callable[[Order], Optional[str]]


def _send_confirmation_email(order: Order, payload: dict) -> bool:
    return emails.send_email(order.email, "order_confirmation", payload)


def _email_skip_reason(order: Order) -> Optional[str]:
    if not settings.ORDER_NOTIFICATION_EMAIL_ENABLED:
        return "disabled"
    if not order.email:
        return "no_recipient"
    return None


def _send_whatsapp_summary(order: Order, payload: dict) -> bool:
    return messaging.send_message(payload)


def _whatsapp_skip_reason(order: Order) -> Optional[str]:
    return None


NOTIFICATIONS: dict[str, Notification] = {
    "order_confirmation_email": Notification(OrderSerializer, _send_confirmation_email, _email_skip_reason),
    "order_whatsapp_summary": Notification(OrderSerializer, _send_whatsapp_summary, _whatsapp_skip_reason),
}


def build_order_payload(order: Order, serializer_class: type = OrderSerializer) -> dict:
    """Full order plus its price quote, as JSON-safe primitives."""

    return dict(serializer_class(order).data)


def dispatch_order_notifications(order_id: int) -> dict[str, str]:
    """Send every order notification and return each one's outcome."""

    order = Order.objects.select_related("city").prefetch_related("items").filter(id=order_id).first()
    if order is None:
        logger.warning("notification.skipped", extra={"event": "notification.skipped", "order_id": order_id})
        return {}

    outcomes: dict[str, str] = {}
    for kind, notification in NOTIFICATIONS.items():
        reason = notification.skip_reason(order)
        if reason:
            outcomes[kind] = "skipped"
            logger.info(
                "notification.skipped",
                extra={"event": "notification.skipped", "order_id": order.id, "kind": kind, "reason": reason},
            )
            continue
        try:
            payload = build_order_payload(order, notification.payload_serializer)
            delivered = notification.send(order, payload)
        except messaging.MessagingNotConfigured as exc:
            outcomes[kind] = "skipped"
            logger.warning(
                "notification.skipped",
                extra={"event": "notification.skipped", "order_id": order.id, "kind": kind, "reason": str(exc)},
            )
            continue
        except Exception:
            outcomes[kind] = "failed"
            logger.exception(
                "notification.failed",
                extra={"event": "notification.failed", "order_id": order.id, "kind": kind},
            )
            continue
        outcomes[kind] = "sent" if delivered else "failed"
        log = logger.info if delivered else logger.error
        log(
            f"notification.{outcomes[kind]}",
            extra={"event": f"notification.{outcomes[kind]}", "order_id": order.id, "kind": kind},
        )
    return outcomes
