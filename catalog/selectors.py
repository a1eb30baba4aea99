"""Selectors for the catalog domain.

Read-only lookups used by the cart aggregator and the order materializer
to validate references and read current prices. They return model
instances or None and never raise for missing rows.
"""

from typing import Iterable, Optional

from .models import Item, ItemPrice


def get_item(item_id: int) -> Optional[Item]:
    """Return the item with the given id, or None."""

    return Item.objects.filter(id=item_id).first()


def get_price_variant(price_id: int) -> Optional[ItemPrice]:
    """Return the price variant with the given id, or None."""

    return ItemPrice.objects.filter(id=price_id).first()


def get_price_variant_for_item(*, item_id: int, price_id: int) -> Optional[ItemPrice]:
    """Return the price variant only if it belongs to the given item."""

    return ItemPrice.objects.filter(id=price_id, item_id=item_id).first()


def items_in_bulk(item_ids: Iterable[int]) -> dict[int, Item]:
    return Item.objects.in_bulk(set(item_ids))


def price_variants_in_bulk(price_ids: Iterable[int]) -> dict[int, ItemPrice]:
    return ItemPrice.objects.in_bulk(set(price_ids))
