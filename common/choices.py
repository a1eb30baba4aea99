"""Shared enumerations and choices used across apps."""

from django.db import models


class PublishStatus(models.TextChoices):
    """Visibility for catalog items and discount codes."""

    PUBLISHED = "published", "Published"
    UNPUBLISHED = "unpublished", "Unpublished"


class OrderStatus(models.TextChoices):
    """Kitchen-to-door lifecycle of an order."""

    PENDING = "pending", "Pending"
    COOKING = "cooking", "Cooking"
    ON_THE_WAY = "on_the_way", "On the way"
    DELIVERED = "delivered", "Delivered"


class PaymentStatus(models.TextChoices):
    UNPAID = "unpaid", "Unpaid"
    PAID = "paid", "Paid"


# Forward-only ordering used to validate admin status updates
ORDER_STATUS_SEQUENCE = [
    OrderStatus.PENDING,
    OrderStatus.COOKING,
    OrderStatus.ON_THE_WAY,
    OrderStatus.DELIVERED,
]
PAYMENT_STATUS_SEQUENCE = [PaymentStatus.UNPAID, PaymentStatus.PAID]
