import logging
from functools import partial
from typing import Optional

from cart.selectors import aggregate_lines, owner_lines, price_snapshot
from cart.services import clear_cart
from common.choices import ORDER_STATUS_SEQUENCE, PAYMENT_STATUS_SEQUENCE
from common.exceptions import (
    ConfigurationMissing,
    ConflictError,
    EmptyCart,
    Forbidden,
    InvalidTransition,
    NotFound,
)
from common.owners import Guest, Owner, Registered, owner_of
from customer.selectors import find_address
from customer.services import create_address
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from restaurant.selectors import get_restaurant_settings
from rest_framework import serializers

from .models import Order, OrderItem
from .notifications import dispatch_order_notifications

logger = logging.getLogger("restaurant.orders")


def _resolve_delivery(owner: Owner, delivery: dict) -> dict:
    """Return the address columns for a new order.

    A saved address must belong to the registered owner. Inline fields are
    saved as a new address for registered owners and kept on the order only
    for guests.
    """

    address_id = delivery.get("address_id")
    if address_id:
        address = find_address(address_id)
        if address is None:
            raise NotFound("Address not found.")
        if not isinstance(owner, Registered) or address.user_id != owner.user_id:
            raise Forbidden("You do not have permission to use this address.")
        return {
            "address": address,
            "city": address.city,
            "state": address.state,
            "zip_code": address.zip_code,
            "street_address": address.street_address,
        }

    fields = {name: delivery.get(name) for name in ("city", "state", "zip_code", "street_address")}
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise serializers.ValidationError({name: ["This field is required."] for name in missing})
    address = None
    if isinstance(owner, Registered):
        address = create_address(user_id=owner.user_id, **fields)
    return {"address": address, **fields}


def _owner_email(owner: Owner) -> Optional[str]:
    if isinstance(owner, Guest):
        return None
    return get_user_model().objects.filter(id=owner.user_id).values_list("email", flat=True).first() or None


def place_order(*, owner: Owner, delivery: dict, contact: dict) -> Order:
    """Turn the owner's cart into an order and clear the priced lines.

    The cart lines are locked for the duration of the transaction and only
    the lines read here are deleted, so items added concurrently stay in the
    cart. Notifications are queued to run after commit.
    """

    with transaction.atomic():
        lines = list(owner_lines(owner).select_for_update())
        if not lines:
            raise EmptyCart("Cart is empty. Please add items to cart before placing an order.")
        snapshot = aggregate_lines(owner, lines)
        ctx = get_restaurant_settings()
        if ctx is None:
            raise ConfigurationMissing("Restaurant configuration not found. Please contact administrator.")
        priced = price_snapshot(snapshot, ctx)
        address_fields = _resolve_delivery(owner, delivery)

        order = Order.objects.create(
            **owner.row_fields(),
            name=contact.get("name") or "",
            email=contact.get("email") or _owner_email(owner),
            phone=contact["phone"],
            notes=contact.get("notes") or "",
            **address_fields,
            items_price=priced.items_subtotal,
            discount_coupon=priced.discount_code,
            discount_amount=priced.discount_amount,
            tax_percent=priced.tax_percent,
            tax_amount=priced.tax_amount,
            delivery_charge=priced.delivery_charge,
            total_amount=priced.payable_total,
        )
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    item_id=li.item_id,
                    price_id=li.price_id,
                    title=li.title,
                    size=li.size,
                    quantity=li.quantity,
                    unit_price=li.unit_price,
                )
                for li in priced.line_items
            ]
        )
        # Generate user-friendly order number (unique)
        order.number = f"ORD-{int(order.id):06d}"
        try:
            with transaction.atomic():
                order.save(update_fields=["number"])
        except IntegrityError as exc:
            raise ConflictError(f"Order number {order.number} is already in use.") from exc

        clear_cart(owner=owner, line_ids=snapshot.line_ids)
        transaction.on_commit(partial(dispatch_order_notifications, order.id))

    logger.info(
        "order.placed",
        extra={
            "event": "order.placed",
            "order_id": order.id,
            "owner": owner.key,
            "guest": owner.kind == "guest",
            "lines": len(priced.line_items),
            "skipped_lines": len(snapshot.warnings),
            "total": str(order.total_amount),
        },
    )
    return order


def get_order(order_id: int, requesting_owner: Optional[Owner] = None) -> Order:
    """Return the stored order; a given requester must be its owner."""

    order = Order.objects.select_related("city").prefetch_related("items").filter(id=order_id).first()
    if order is None:
        raise NotFound(f"Order with ID {order_id} not found.")
    if requesting_owner is not None and owner_of(order) != requesting_owner:
        raise Forbidden("You do not have permission to view this order.")
    return order


def list_orders(owner: Owner) -> QuerySet[Order]:
    return Order.objects.filter(**owner.lookup()).select_related("city").prefetch_related("items").order_by("-id")


def _advance(current: str, target: Optional[str], sequence: list, field: str) -> bool:
    """Validate a forward-only move; return True when the value changes."""

    if target is None or target == current:
        return False
    if sequence.index(target) < sequence.index(current):
        raise InvalidTransition(f"Cannot move {field} from '{current}' back to '{target}'.")
    return True


def update_order_status(order: Order, *, status: Optional[str] = None, payment_status: Optional[str] = None) -> Order:
    """Move an order's status and/or payment status forward.

    The row is locked and its stored statuses copied onto ``order`` before
    the check, so a stale instance cannot move the order backward.
    Setting the current value is a no-op; skipping ahead is allowed; any
    backward move raises InvalidTransition and changes nothing.
    """

    with transaction.atomic():
        locked = Order.objects.select_for_update().only("status", "payment_status").get(id=order.id)
        order.status, order.payment_status = locked.status, locked.payment_status
        status_changed = _advance(order.status, status, ORDER_STATUS_SEQUENCE, "status")
        payment_changed = _advance(order.payment_status, payment_status, PAYMENT_STATUS_SEQUENCE, "payment_status")
        if not (status_changed or payment_changed):
            return order

        prev_status, prev_payment = order.status, order.payment_status
        update_fields = ["updated_at"]
        if status_changed:
            order.status = status
            update_fields.append("status")
        if payment_changed:
            order.payment_status = payment_status
            update_fields.append("payment_status")
        order.save(update_fields=update_fields)
    logger.info(
        "order_status_changed",
        extra={
            "event": "order_status_changed",
            "order_id": order.id,
            "user_id": order.user_id,
            "status_from": prev_status,
            "status_to": order.status,
            "payment_status_from": prev_payment,
            "payment_status_to": order.payment_status,
        },
    )
    return order
