"""Catalog app models.

Menu entities for the restaurant: categories, items, and the priced
variants (sizes) of each item. Carts and orders reference items and price
variants by id only; see `catalog.selectors` for the lookups they use.
"""

from common.choices import PublishStatus
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Category(TimeStampedModel):
    """Menu section (e.g., Starters, Pizzas)."""

    name = models.CharField(max_length=120)
    is_active = models.BooleanField(default=True, db_index=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class Item(TimeStampedModel):
    """A dish or product on the menu."""

    STATUS_PUBLISHED = PublishStatus.PUBLISHED
    STATUS_UNPUBLISHED = PublishStatus.UNPUBLISHED
    STATUS_CHOICES = PublishStatus.choices

    name = models.CharField(max_length=200)
    details = models.TextField(blank=True)
    thumbnail = models.URLField(blank=True)
    category = models.ForeignKey(
        Category,
        null=True,
        blank=True,
        related_name="items",
        on_delete=models.SET_NULL,
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PUBLISHED, db_index=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class ItemPrice(TimeStampedModel):
    """Priced variant of an item (e.g., a size)."""

    item = models.ForeignKey(Item, related_name="prices", on_delete=models.CASCADE)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    size = models.CharField(max_length=64, blank=True, null=True)

    class Meta:
        ordering = ["item_id", "price"]
        constraints = [
            models.CheckConstraint(
                name="item_price_non_negative",
                condition=models.Q(price__gte=0),
            ),
        ]
        indexes = [
            models.Index(fields=["item", "price"], name="itemprice_item_price_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        label = f" ({self.size})" if self.size else ""
        return f"{self.item_id}{label} @ {self.price}"
