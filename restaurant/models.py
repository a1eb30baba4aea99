"""Restaurant settings.

A single row holds the shop profile and the charges applied to every
cart and order quote (tax percent and flat delivery charge).
"""

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Restaurant(TimeStampedModel):
    """Shop profile and pricing configuration (one row expected)."""

    shop_name = models.CharField(max_length=200, blank=True)
    shop_address = models.TextField(blank=True)
    shop_details = models.TextField(blank=True)
    shop_phone = models.CharField(max_length=32, blank=True)
    is_shop_open = models.BooleanField(default=True)
    tax = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        help_text="Tax percentage applied to the items subtotal",
    )
    delivery_charge = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                name="restaurant_tax_percent_range",
                condition=models.Q(tax__gte=0, tax__lte=100),
            ),
            models.CheckConstraint(
                name="restaurant_delivery_charge_non_negative",
                condition=models.Q(delivery_charge__gte=0),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.shop_name or f"Restaurant#{self.id}"
