"""Discount store lookups."""

from decimal import Decimal
from typing import Optional

from .models import Discount


def find_discount_by_code(code: str) -> Optional[Discount]:
    """Exact, case-sensitive lookup regardless of status."""

    if not code:
        return None
    return Discount.objects.filter(code=code).first()


def find_published_discount(code: str) -> Optional[Discount]:
    discount = find_discount_by_code(code)
    if discount is None or not discount.is_redeemable:
        return None
    return discount


def published_amount_off(code: str) -> Optional[Decimal]:
    """Flat amount for a redeemable code, or None."""

    discount = find_published_discount(code)
    return discount.amount_off if discount is not None else None
