"""Selectors for read-only cart queries.

Groups an owner's one-row-per-unit cart lines into quantity-bearing line
items and prices them.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from catalog.selectors import items_in_bulk, price_variants_in_bulk
from common.exceptions import NoValidItems
from common.owners import Guest, Owner, Registered, owner_of
from django.db.models import QuerySet
from pricing.calculator import LineItem, PriceQuote, PricingContext, empty_quote, quote
from restaurant.selectors import get_preview_pricing_context

from .models import CartLine

logger = logging.getLogger("restaurant.cart")


@dataclass
class CartSnapshot:
    """Aggregated view of an owner's cart at one point in time."""

    owner: Owner
    line_items: list = field(default_factory=list)
    # Every line read for this snapshot, dangling ones included
    line_ids: list = field(default_factory=list)
    discount_code: Optional[str] = None
    warnings: list = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.line_ids

    @property
    def first_line_id(self) -> Optional[int]:
        return self.line_ids[0] if self.line_ids else None


def owner_lines(owner: Owner) -> QuerySet[CartLine]:
    """All cart lines held by the owner, oldest first."""

    return CartLine.objects.filter(**owner.lookup()).order_by("id")


def matching_lines(owner: Owner, *, item_id: int, price_id: int) -> QuerySet[CartLine]:
    return owner_lines(owner).filter(item_id=item_id, price_id=price_id)


def aggregate_lines(owner: Owner, lines: Iterable[CartLine]) -> CartSnapshot:
    """Group lines by (item, price variant) in first-seen order.

    Lines whose item or price variant no longer exists, or whose variant now
    belongs to a different item, are left out and reported in `warnings`.
    Raises NoValidItems when lines exist but none of them can be priced.
    """

    lines = list(lines)
    snapshot = CartSnapshot(owner=owner, line_ids=[line.id for line in lines])
    if not lines:
        return snapshot

    items = items_in_bulk(line.item_id for line in lines)
    prices = price_variants_in_bulk(line.price_id for line in lines)

    groups: dict[tuple[int, int], dict] = {}
    for line in lines:
        if snapshot.discount_code is None and line.discount_code:
            snapshot.discount_code = line.discount_code
        item = items.get(line.item_id)
        price = prices.get(line.price_id)
        if item is None:
            snapshot.warnings.append(f"Cart line {line.id} has an invalid item (item {line.item_id} may have been deleted)")
            continue
        if price is None or price.item_id != line.item_id:
            snapshot.warnings.append(
                f"Cart line {line.id} has an invalid price (price {line.price_id} may have been deleted)"
            )
            continue
        key = (line.item_id, line.price_id)
        if key not in groups:
            groups[key] = {"item": item, "price": price, "quantity": 0}
        groups[key]["quantity"] += 1

    if snapshot.warnings:
        logger.warning(
            "cart.dangling_lines_skipped",
            extra={
                "event": "cart.dangling_lines_skipped",
                "owner": owner.key,
                "skipped": len(snapshot.warnings),
            },
        )
    if not groups:
        raise NoValidItems("No valid items found in cart. " + " ".join(snapshot.warnings))

    snapshot.line_items = [
        LineItem(
            item_id=group["item"].id,
            title=group["item"].name,
            price_id=group["price"].id,
            unit_price=group["price"].price,
            quantity=group["quantity"],
            size=group["price"].size,
        )
        for group in groups.values()
    ]
    return snapshot


def get_cart(owner: Owner) -> CartSnapshot:
    """Aggregate the owner's current cart."""

    return aggregate_lines(owner, owner_lines(owner))


def price_snapshot(snapshot: CartSnapshot, ctx: Optional[PricingContext] = None) -> PriceQuote:
    ctx = ctx or get_preview_pricing_context()
    if not snapshot.line_items:
        return empty_quote(ctx)
    return quote(snapshot.line_items, snapshot.discount_code, ctx)


def build_cart_summary(snapshot: CartSnapshot, ctx: Optional[PricingContext] = None) -> dict:
    """Render a priced snapshot in the public cart shape."""

    priced = price_snapshot(snapshot, ctx)
    owner = snapshot.owner
    return {
        "id": snapshot.first_line_id,
        "user_id": owner.user_id if isinstance(owner, Registered) else None,
        "guest_id": owner.guest_id if isinstance(owner, Guest) else None,
        "items": [li.as_api() for li in snapshot.line_items],
        **priced.as_api(),
        "warnings": list(snapshot.warnings),
    }


def get_cart_summary(owner: Owner) -> dict:
    return build_cart_summary(get_cart(owner))


def list_all_carts() -> list[dict]:
    """Every non-empty cart grouped by owner, newest activity first.

    Carts whose lines are all dangling are still listed, with no items.
    """

    ctx = get_preview_pricing_context()
    by_owner: dict[str, list[CartLine]] = {}
    owners: dict[str, Owner] = {}
    for line in CartLine.objects.order_by("-created_at", "-id"):
        owner = owner_of(line)
        by_owner.setdefault(owner.key, []).append(line)
        owners[owner.key] = owner

    carts = []
    for key, lines in by_owner.items():
        lines.sort(key=lambda line: line.id)
        try:
            snapshot = aggregate_lines(owners[key], lines)
        except NoValidItems:
            snapshot = CartSnapshot(owner=owners[key], line_ids=[line.id for line in lines])
            snapshot.discount_code = next((line.discount_code for line in lines if line.discount_code), None)
            snapshot.warnings.append("No valid items found in cart.")
        summary = build_cart_summary(snapshot, ctx)
        summary["line_ids"] = snapshot.line_ids
        summary["created_at"] = min(line.created_at for line in lines)
        summary["updated_at"] = max(line.updated_at for line in lines)
        carts.append(summary)
    return carts
