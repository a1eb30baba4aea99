from decimal import Decimal

from common.choices import OrderStatus, PaymentStatus
from django.conf import settings
from django.db import models
from pricing.calculator import LineItem, PriceQuote


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Order(TimeStampedModel):
    """Immutable snapshot of a cart at the moment it was ordered.

    The quote columns are stored as computed at placement and are the only
    source for totals afterwards; orders are never re-priced.
    """

    STATUS_PENDING = OrderStatus.PENDING
    STATUS_COOKING = OrderStatus.COOKING
    STATUS_ON_THE_WAY = OrderStatus.ON_THE_WAY
    STATUS_DELIVERED = OrderStatus.DELIVERED
    STATUS_CHOICES = OrderStatus.choices

    PAYMENT_UNPAID = PaymentStatus.UNPAID
    PAYMENT_PAID = PaymentStatus.PAID
    PAYMENT_CHOICES = PaymentStatus.choices

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        related_name="orders",
        on_delete=models.SET_NULL,
    )
    guest_id = models.CharField(max_length=255, null=True, blank=True, db_index=True)
    number = models.CharField(max_length=32, unique=True, null=True, blank=True, db_index=True)

    # Contact and delivery
    name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(null=True, blank=True)
    phone = models.CharField(max_length=32)
    address = models.ForeignKey(
        "customer.Address",
        null=True,
        blank=True,
        related_name="orders",
        on_delete=models.SET_NULL,
    )
    city = models.ForeignKey("customer.City", null=True, blank=True, related_name="orders", on_delete=models.SET_NULL)
    state = models.CharField(max_length=255, blank=True)
    zip_code = models.CharField(max_length=50, blank=True)
    street_address = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    # Price quote at placement
    items_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_coupon = models.CharField(max_length=255, blank=True)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    tax_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    delivery_charge = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    payment_status = models.CharField(max_length=16, choices=PAYMENT_CHOICES, default=PAYMENT_UNPAID, db_index=True)

    class Meta:
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["user", "status", "created_at"], name="order_user_status_idx"),
            models.Index(fields=["guest_id", "created_at"], name="order_guest_created_idx"),
        ]
        constraints = [
            # A deleted user leaves neither owner column set
            models.CheckConstraint(
                name="order_single_owner",
                condition=~models.Q(user__isnull=False, guest_id__isnull=False),
            ),
            models.CheckConstraint(name="order_total_non_negative", condition=models.Q(total_amount__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        owner = f"user={self.user_id}" if self.user_id else f"guest={self.guest_id}"
        return f"Order#{self.id} {owner} status={self.status}"

    @property
    def display_number(self) -> str:
        return self.number or f"#{self.id}"

    def price_quote(self) -> PriceQuote:
        """Rebuild the placement-time quote from the stored columns."""

        return PriceQuote(
            items_subtotal=self.items_price,
            discount_code=self.discount_coupon,
            discount_amount=self.discount_amount,
            tax_percent=self.tax_percent,
            tax_amount=self.tax_amount,
            delivery_charge=self.delivery_charge,
            payable_total=self.total_amount,
            line_items=tuple(item.as_line_item() for item in self.items.all()),
        )


class OrderItem(TimeStampedModel):
    """Line item within an order.

    Snapshots the item title, size label and unit price so the order reads
    the same after the menu changes.
    """

    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    # Plain ids: menu entries may be deleted after the order is placed
    item_id = models.PositiveBigIntegerField()
    price_id = models.PositiveBigIntegerField()
    title = models.CharField(max_length=255, blank=True)
    size = models.CharField(max_length=100, null=True, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["order", "item_id", "price_id"], name="orderitem_order_ref_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="orderitem_price_non_negative", condition=models.Q(unit_price__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"OrderItem#{self.id} order={self.order_id} item={self.item_id} qty={self.quantity}"

    @property
    def line_total(self) -> Decimal:
        return (self.unit_price or Decimal("0.00")) * Decimal(int(self.quantity))

    def as_line_item(self) -> LineItem:
        return LineItem(
            item_id=self.item_id,
            title=self.title,
            price_id=self.price_id,
            unit_price=self.unit_price,
            quantity=self.quantity,
            size=self.size,
        )
