"""Discount codes redeemable against a cart.

`amount_off` is a flat currency amount, not a percentage.
"""

from decimal import Decimal

from common.choices import PublishStatus
from django.core.validators import MinValueValidator
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Discount(TimeStampedModel):
    STATUS_PUBLISHED = PublishStatus.PUBLISHED
    STATUS_UNPUBLISHED = PublishStatus.UNPUBLISHED
    STATUS_CHOICES = PublishStatus.choices

    # Case-sensitive as stored
    code = models.CharField(max_length=255, unique=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_UNPUBLISHED, db_index=True)
    amount_off = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )

    class Meta:
        ordering = ["code"]
        constraints = [
            models.CheckConstraint(name="discount_amount_non_negative", condition=models.Q(amount_off__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code} (-{self.amount_off}, {self.status})"

    @property
    def is_redeemable(self) -> bool:
        return self.status == self.STATUS_PUBLISHED
