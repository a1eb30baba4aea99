from decimal import Decimal

import pytest
from discounts.tests.factories import DiscountFactory
from pricing.calculator import LineItem, PricingContext, empty_quote, money, quote


def _line(unit_price, quantity, item_id=1, price_id=1):
    return LineItem(item_id=item_id, title="Pizza", price_id=price_id, unit_price=Decimal(unit_price), quantity=quantity)


def _codes(**amounts):
    return lambda code: amounts.get(code)


def test_discount_is_clamped_to_pre_discount_total():
    ctx = PricingContext(tax_percent=Decimal("8"), delivery_charge=Decimal("5.00"))

    result = quote([_line("10.00", 3)], "BIG50", ctx, lookup_discount=_codes(BIG50=Decimal("50.00")))

    assert result.items_subtotal == Decimal("30.00")
    assert result.tax_amount == Decimal("2.40")
    assert result.delivery_charge == Decimal("5.00")
    assert result.discount_amount == Decimal("37.40")
    assert result.payable_total == Decimal("0.00")
    assert result.discount_code == "BIG50"


def test_quote_sums_line_totals_and_applies_charges():
    ctx = PricingContext(tax_percent=Decimal("10"), delivery_charge=Decimal("3.00"))

    result = quote(
        [_line("12.50", 2, item_id=1, price_id=1), _line("4.00", 1, item_id=2, price_id=5)],
        None,
        ctx,
        lookup_discount=_codes(),
    )

    assert result.items_subtotal == Decimal("29.00")
    assert result.tax_percent == Decimal("10.00")
    assert result.tax_amount == Decimal("2.90")
    assert result.discount_amount == Decimal("0.00")
    assert result.payable_total == Decimal("34.90")
    assert len(result.line_items) == 2


def test_unknown_code_prices_as_no_discount():
    ctx = PricingContext(tax_percent=Decimal("0"), delivery_charge=Decimal("0"))

    result = quote([_line("10.00", 1)], "NOPE", ctx, lookup_discount=_codes())

    assert result.discount_amount == Decimal("0.00")
    assert result.payable_total == Decimal("10.00")
    assert result.discount_code == "NOPE"


def test_rounding_is_half_up_at_output_only():
    ctx = PricingContext(tax_percent=Decimal("10"))

    # 0.25 * 10% = 0.025 rounds up, not to even
    result = quote([_line("0.05", 5)], None, ctx, lookup_discount=_codes())

    assert result.tax_amount == Decimal("0.03")
    assert result.payable_total == Decimal("0.28")


def test_payable_uses_unrounded_intermediates():
    ctx = PricingContext(tax_percent=Decimal("0.5"))

    result = quote([_line("1.00", 1)], None, ctx, lookup_discount=_codes())

    # tax 0.005 and total 1.005 are rounded independently
    assert result.tax_amount == Decimal("0.01")
    assert result.payable_total == Decimal("1.01")


def test_quote_is_deterministic():
    ctx = PricingContext(tax_percent=Decimal("7.25"), delivery_charge=Decimal("2.00"))
    lines = [_line("9.99", 3)]
    lookup = _codes(SAVE=Decimal("1.00"))

    assert quote(lines, "SAVE", ctx, lookup_discount=lookup) == quote(lines, "SAVE", ctx, lookup_discount=lookup)


def test_negative_lookup_amount_counts_as_zero():
    result = quote([_line("5.00", 1)], "ODD", PricingContext(), lookup_discount=_codes(ODD=Decimal("-3")))

    assert result.discount_amount == Decimal("0.00")
    assert result.payable_total == Decimal("5.00")


def test_empty_quote_reports_only_tax_rate():
    result = empty_quote(PricingContext(tax_percent=Decimal("8"), delivery_charge=Decimal("5")))

    assert result.items_subtotal == Decimal("0")
    assert result.delivery_charge == Decimal("0")
    assert result.payable_total == Decimal("0")
    assert result.tax_percent == Decimal("8.00")
    assert result.line_items == ()


def test_quote_api_shape():
    ctx = PricingContext(tax_percent=Decimal("10"), delivery_charge=Decimal("3"))
    result = quote([_line("10.00", 1)], "SAVE1", ctx, lookup_discount=_codes(SAVE1=Decimal("1")))

    body = result.as_api()

    assert body == {
        "items_price": Decimal("10.00"),
        "discount": {"coupon": "SAVE1", "amount": Decimal("1.00")},
        "charges": {"tax": Decimal("10.00"), "tax_price": Decimal("1.00"), "delivery_charges": Decimal("3.00")},
        "payable_price": Decimal("13.00"),
    }


@pytest.mark.parametrize(
    "tax, delivery",
    [(Decimal("-1"), Decimal("0")), (Decimal("100.01"), Decimal("0")), (Decimal("5"), Decimal("-0.01"))],
)
def test_pricing_context_rejects_out_of_range_values(tax, delivery):
    with pytest.raises(ValueError):
        PricingContext(tax_percent=tax, delivery_charge=delivery)


def test_money_rounds_half_up():
    assert money("2.345") == Decimal("2.35")
    assert money(Decimal("2.344")) == Decimal("2.34")


@pytest.mark.django_db
def test_default_lookup_reads_published_discounts():
    DiscountFactory(code="LIVE", amount_off=Decimal("2.00"))
    DiscountFactory(code="DRAFT", amount_off=Decimal("2.00"), status="unpublished")

    live = quote([_line("10.00", 1)], "LIVE", PricingContext())
    draft = quote([_line("10.00", 1)], "DRAFT", PricingContext())

    assert live.discount_amount == Decimal("2.00")
    assert draft.discount_amount == Decimal("0.00")
