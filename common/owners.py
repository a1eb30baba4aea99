"""Cart and order ownership.

An owner is either a registered user or an anonymous guest token, never
both. Rows keep two nullable columns (`user_id`, `guest_id`); the owner
types below are the only way services build queries against them, so a
guest-scoped query can never match a user row and vice versa.
"""

from dataclasses import dataclass
from typing import Union

from rest_framework import serializers

GUEST_ID_HEADER = "X-Guest-Id"


@dataclass(frozen=True)
class Registered:
    user_id: int

    kind = "user"

    @property
    def key(self) -> str:
        return f"user:{self.user_id}"

    def lookup(self, prefix: str = "") -> dict:
        return {f"{prefix}user_id": self.user_id, f"{prefix}guest_id__isnull": True}

    def row_fields(self) -> dict:
        return {"user_id": self.user_id, "guest_id": None}


@dataclass(frozen=True)
class Guest:
    guest_id: str

    kind = "guest"

    @property
    def key(self) -> str:
        return f"guest:{self.guest_id}"

    def lookup(self, prefix: str = "") -> dict:
        return {f"{prefix}guest_id": self.guest_id, f"{prefix}user_id__isnull": True}

    def row_fields(self) -> dict:
        return {"user_id": None, "guest_id": self.guest_id}


Owner = Union[Registered, Guest]


def owner_of(row) -> Owner:
    """Rebuild the owner of a persisted cart line or order."""

    if row.user_id is not None:
        return Registered(user_id=row.user_id)
    return Guest(guest_id=row.guest_id)


def resolve_owner(request) -> Owner:
    """Determine who a request acts for.

    Authenticated users always act as themselves. Anonymous callers must send
    a guest token in the `X-Guest-Id` header, or as `guest_id` in the body or
    query string.
    """

    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return Registered(user_id=user.id)
    guest_id = request.headers.get(GUEST_ID_HEADER)
    if not guest_id:
        data = getattr(request, "data", None) or {}
        guest_id = data.get("guest_id") if hasattr(data, "get") else None
    if not guest_id:
        guest_id = request.query_params.get("guest_id")
    guest_id = (guest_id or "").strip()
    if not guest_id:
        raise serializers.ValidationError({"guest_id": ["Either an authenticated user or guest_id is required."]})
    if len(guest_id) > 255:
        raise serializers.ValidationError({"guest_id": ["Guest ID cannot exceed 255 characters."]})
    return Guest(guest_id=guest_id)
