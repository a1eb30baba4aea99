"""Cart and order pricing.

`quote` turns aggregated line items, the cart's discount code and the
restaurant's tax/delivery configuration into a `PriceQuote`. It performs
no writes and is deterministic for the same inputs. Intermediate values
keep full `Decimal` precision; every monetary field is rounded half-up to
two places only when the quote is built.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable, Optional

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")

# Resolves a coupon code to its flat amount off, or None when the code is
# unknown or unpublished.
DiscountLookup = Callable[[str], Optional[Decimal]]


def money(value) -> Decimal:
    """Round a monetary value to two places using half-up rounding."""

    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PricingContext:
    """Restaurant-wide charges applied to every quote."""

    tax_percent: Decimal = ZERO
    delivery_charge: Decimal = ZERO

    def __post_init__(self):
        tax = Decimal(str(self.tax_percent))
        delivery = Decimal(str(self.delivery_charge))
        if tax < 0 or tax > 100:
            raise ValueError("tax_percent must be between 0 and 100")
        if delivery < 0:
            raise ValueError("delivery_charge must be non-negative")
        object.__setattr__(self, "tax_percent", tax)
        object.__setattr__(self, "delivery_charge", delivery)


@dataclass(frozen=True)
class LineItem:
    """One (item, price variant) pairing with its quantity."""

    item_id: int
    title: str
    price_id: int
    unit_price: Decimal
    quantity: int
    size: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return Decimal(str(self.unit_price)) * int(self.quantity)

    def as_api(self) -> dict:
        return {
            "id": self.item_id,
            "title": self.title,
            "quantity": self.quantity,
            "price": {
                "id": self.price_id,
                "price": money(self.unit_price),
                "size": self.size,
            },
        }


@dataclass(frozen=True)
class PriceQuote:
    items_subtotal: Decimal = ZERO
    discount_code: str = ""
    discount_amount: Decimal = ZERO
    tax_percent: Decimal = ZERO
    tax_amount: Decimal = ZERO
    delivery_charge: Decimal = ZERO
    payable_total: Decimal = ZERO
    line_items: tuple = field(default_factory=tuple)

    def as_api(self) -> dict:
        """Render the public quote shape shared by carts and orders."""

        return {
            "items_price": self.items_subtotal,
            "discount": {"coupon": self.discount_code, "amount": self.discount_amount},
            "charges": {
                "tax": self.tax_percent,
                "tax_price": self.tax_amount,
                "delivery_charges": self.delivery_charge,
            },
            "payable_price": self.payable_total,
        }


def empty_quote(ctx: Optional[PricingContext] = None) -> PriceQuote:
    """Zero-valued quote for an empty cart.

    Every monetary field is zero; only the configured tax rate is reported.
    """

    ctx = ctx or PricingContext()
    return PriceQuote(tax_percent=money(ctx.tax_percent))


def _default_lookup(code: str) -> Optional[Decimal]:
    from discounts.selectors import published_amount_off

    return published_amount_off(code)


def quote(
    line_items: Iterable[LineItem],
    discount_code: Optional[str],
    ctx: PricingContext,
    *,
    lookup_discount: Optional[DiscountLookup] = None,
) -> PriceQuote:
    """Price a set of line items.

    The discount is a flat amount clamped to the pre-discount total, so the
    payable total never goes negative. Unknown or unpublished codes price as
    no discount; rejecting them is the job of the apply-discount action.
    """

    items = tuple(line_items)
    subtotal = sum((li.line_total for li in items), Decimal("0"))
    tax = subtotal * ctx.tax_percent / Decimal("100")
    delivery = ctx.delivery_charge

    code = (discount_code or "").strip()
    discount = Decimal("0")
    if code:
        amount_off = (lookup_discount or _default_lookup)(code)
        if amount_off is not None:
            discount = min(max(Decimal(str(amount_off)), Decimal("0")), subtotal + tax + delivery)

    payable = max(Decimal("0"), subtotal + tax + delivery - discount)
    return PriceQuote(
        items_subtotal=money(subtotal),
        discount_code=discount_code or "",
        discount_amount=money(discount),
        tax_percent=money(ctx.tax_percent),
        tax_amount=money(tax),
        delivery_charge=money(delivery),
        payable_total=money(payable),
        line_items=items,
    )
