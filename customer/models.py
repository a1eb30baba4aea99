"""Customer domain models.

Delivery cities and saved delivery addresses for registered users.
Guest orders keep their address inline on the order instead.
"""

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class City(TimeStampedModel):
    """City the restaurant delivers to."""

    name = models.CharField(max_length=120, unique=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "cities"

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class Address(TimeStampedModel):
    """Saved delivery address tied to a registered user."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="addresses")
    city = models.ForeignKey(City, null=True, blank=True, on_delete=models.SET_NULL, related_name="addresses")
    state = models.CharField(max_length=255)
    zip_code = models.CharField(max_length=50)
    street_address = models.TextField()

    class Meta:
        indexes = [
            models.Index(fields=["user", "city"], name="address_user_city_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        parts = [self.street_address, self.city.name if self.city_id else "", self.state, self.zip_code]
        return ", ".join(p for p in parts if p)
