"""Read-only data access helpers for the customer app."""

from typing import Optional

from .models import Address


def find_address(address_id: int) -> Optional[Address]:
    """Return an address by id, or None."""

    return Address.objects.select_related("city").filter(id=address_id).first()
