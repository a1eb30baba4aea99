"""Cart services: mutations over an owner's cart lines.

Every mutation runs in a single transaction so a failure part-way through
(e.g. on the third of five requested items) leaves the cart untouched.
The refreshed cart returned by a mutation is built inside the same
transaction, so a cart left with nothing priceable rolls the change back.
"""

import logging

from catalog.models import ItemPrice
from catalog.selectors import get_item, get_price_variant, get_price_variant_for_item
from common.exceptions import EmptyCart, Forbidden, InvalidCode, InvalidReference, NotFound
from common.owners import Owner, owner_of
from discounts.selectors import find_published_discount
from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from .models import CartLine
from .selectors import get_cart_summary, matching_lines, owner_lines

logger = logging.getLogger("restaurant.cart")


def _resolve_variant(*, item_id: int, price_id: int, index: int | None = None) -> ItemPrice:
    """Return the price variant after checking it belongs to the item."""

    where = f" (at index {index})" if index is not None else ""
    if get_item(item_id) is None:
        raise NotFound(f"Item with ID {item_id} does not exist{where}")
    price = get_price_variant_for_item(item_id=item_id, price_id=price_id)
    if price is not None:
        return price
    if get_price_variant(price_id) is None:
        raise NotFound(f"Price with ID {price_id} does not exist{where}")
    raise InvalidReference(f"Price with ID {price_id} does not belong to item with ID {item_id}{where}")


def _cart_discount_code(owner: Owner) -> str | None:
    return (
        owner_lines(owner)
        .exclude(discount_code__isnull=True)
        .exclude(discount_code="")
        .values_list("discount_code", flat=True)
        .first()
    )


def _create_lines(owner: Owner, price: ItemPrice, count: int, discount_code: str | None) -> list[CartLine]:
    fields = owner.row_fields()
    return CartLine.objects.bulk_create(
        [
            CartLine(
                item_id=price.item_id,
                price_id=price.id,
                discount_code=discount_code,
                unit_price=price.price,
                **fields,
            )
            for _ in range(count)
        ]
    )


def add_items(*, owner: Owner, items: list[dict]) -> dict:
    """Add one cart line per requested unit.

    Each entry is `{item_id, price_id, quantity}`; a missing or non-positive
    quantity counts as 1. New lines inherit the discount code already carried
    by the same item variant in this cart.
    """

    added = 0
    with transaction.atomic():
        for index, entry in enumerate(items):
            item_id = int(entry["item_id"])
            price_id = int(entry["price_id"])
            quantity = int(entry.get("quantity") or 0)
            if quantity <= 0:
                quantity = 1
            price = _resolve_variant(item_id=item_id, price_id=price_id, index=index)
            inherited = (
                matching_lines(owner, item_id=item_id, price_id=price_id)
                .exclude(discount_code__isnull=True)
                .values_list("discount_code", flat=True)
                .first()
            )
            _create_lines(owner, price, quantity, inherited)
            added += quantity
        summary = get_cart_summary(owner)
    logger.info(
        "cart.items_added",
        extra={"event": "cart.items_added", "owner": owner.key, "guest": owner.kind == "guest", "units": added},
    )
    return summary


def set_quantity(*, owner: Owner, item_id: int, price_id: int, quantity: int) -> dict:
    """Make the cart hold exactly `quantity` units of the item variant.

    Zero removes the variant (NotFound if it was not in the cart). Growing
    adds lines at the variant's current price; shrinking drops the newest
    lines, since lines of one variant are interchangeable. Only growing
    needs the variant to still exist in the catalog.
    """

    if quantity < 0:
        raise serializers.ValidationError({"quantity": ["Ensure this value is greater than or equal to 0."]})
    with transaction.atomic():
        lines = list(matching_lines(owner, item_id=item_id, price_id=price_id).select_for_update())
        current = len(lines)
        if quantity == 0:
            if not lines:
                raise NotFound("Item not found in cart")
            CartLine.objects.filter(id__in=[line.id for line in lines]).delete()
        elif quantity > current:
            price = _resolve_variant(item_id=item_id, price_id=price_id)
            _create_lines(owner, price, quantity - current, _cart_discount_code(owner))
        elif quantity < current:
            surplus = [line.id for line in lines[quantity:]]
            CartLine.objects.filter(id__in=surplus).delete()
        summary = get_cart_summary(owner)
    logger.info(
        "cart.quantity_set",
        extra={
            "event": "cart.quantity_set",
            "owner": owner.key,
            "item_id": item_id,
            "price_id": price_id,
            "quantity_from": current,
            "quantity_to": quantity,
        },
    )
    return summary


def remove_item(*, owner: Owner, item_id: int, price_id: int) -> dict:
    """Drop every unit of the item variant from the cart."""

    with transaction.atomic():
        deleted, _ = matching_lines(owner, item_id=item_id, price_id=price_id).delete()
        if not deleted:
            raise NotFound("Item not found in cart")
        summary = get_cart_summary(owner)
    logger.info(
        "cart.item_removed",
        extra={"event": "cart.item_removed", "owner": owner.key, "item_id": item_id, "price_id": price_id},
    )
    return summary


def apply_discount(*, owner: Owner, code: str) -> dict:
    """Attach a published discount code to every line of the cart."""

    code = (code or "").strip()
    with transaction.atomic():
        lines = owner_lines(owner).select_for_update()
        if not lines.exists():
            raise EmptyCart("Cart is empty. Please add items to cart first.")
        if find_published_discount(code) is None:
            raise InvalidCode()
        lines.update(discount_code=code, updated_at=timezone.now())
        summary = get_cart_summary(owner)
    logger.info(
        "cart.discount_applied",
        extra={"event": "cart.discount_applied", "owner": owner.key, "code": code},
    )
    return summary


def remove_discount(*, owner: Owner) -> dict:
    with transaction.atomic():
        lines = owner_lines(owner).select_for_update()
        if not lines.exists():
            raise EmptyCart()
        lines.update(discount_code=None, updated_at=timezone.now())
        summary = get_cart_summary(owner)
    logger.info("cart.discount_removed", extra={"event": "cart.discount_removed", "owner": owner.key})
    return summary




@transaction.atomic
def clear_cart(*, owner: Owner, line_ids: list[int] | None = None) -> int:
    """Delete the owner's cart lines and return how many were removed.

    With `line_ids`, only those lines are deleted, so lines added after a
    snapshot was taken survive.
    """

    qs = owner_lines(owner)
    if line_ids is not None:
        qs = qs.filter(id__in=line_ids)
    deleted, _ = qs.delete()
    logger.info(
        "cart.cleared",
        extra={"event": "cart.cleared", "owner": owner.key, "guest": owner.kind == "guest", "deleted": deleted},
    )
    return deleted


@transaction.atomic
def delete_cart_containing(*, line_id: int, requester: Owner | None = None) -> int:
    """Delete the whole cart that the given cart line belongs to.

    When a requester is given it must own that cart.
    """

    line = CartLine.objects.filter(id=line_id).first()
    if line is None:
        raise NotFound(f"Cart with ID {line_id} not found.")
    owner = owner_of(line)
    if requester is not None and requester != owner:
        raise Forbidden("You can only delete your own cart.")
    return clear_cart(owner=owner)
