"""Cart app models.

A cart is not a row of its own: it is the set of `CartLine` rows held by one
owner (a registered user or a guest token). Each line is one unit of an
item's price variant, so quantity is the number of matching lines.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class CartLine(TimeStampedModel):
    """One unit of an item variant held in a pending cart.

    Item and price references are not enforced by the database: menu entries
    can be removed while carts still point at them. Aggregation skips such
    dangling lines and reports them as warnings.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        related_name="cart_lines",
        on_delete=models.CASCADE,
    )
    guest_id = models.CharField(max_length=255, null=True, blank=True, db_index=True)
    item = models.ForeignKey(
        "catalog.Item",
        related_name="+",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
    )
    price = models.ForeignKey(
        "catalog.ItemPrice",
        related_name="+",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
    )
    # Shared by every line of the owner; stored per line for schema reasons
    discount_code = models.CharField(max_length=255, null=True, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                name="cartline_single_owner",
                condition=(
                    models.Q(user__isnull=False, guest_id__isnull=True)
                    | models.Q(user__isnull=True, guest_id__isnull=False)
                ),
            ),
        ]
        indexes = [
            models.Index(fields=["user", "item", "price"], name="cartline_user_ref_idx"),
            models.Index(fields=["guest_id", "item", "price"], name="cartline_guest_ref_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        owner = f"user={self.user_id}" if self.user_id else f"guest={self.guest_id}"
        return f"CartLine#{self.id} {owner} item={self.item_id} price={self.price_id}"
