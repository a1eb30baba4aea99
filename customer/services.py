"""Customer domain services for mutations.

Keep business rules here and keep views thin.
"""

from typing import Optional

from .models import Address, City


def create_address(
    *,
    user_id: int,
    city: Optional[City],
    state: str,
    zip_code: str,
    street_address: str,
) -> Address:
    """Persist a new delivery address for a registered user."""

    return Address.objects.create(
        user_id=user_id,
        city=city,
        state=state.strip(),
        zip_code=zip_code.strip(),
        street_address=street_address.strip(),
    )
