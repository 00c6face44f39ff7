"""
Tests for the processing fee calculation.

The gross charge must leave at least the tier price after Stripe takes
its percentage and fixed fee, and never more than one cent over it.
"""
from decimal import Decimal

import pytest

from payments.fees import calculate_processing_fee, format_amount, from_cents, to_cents


def test_twenty_dollar_tier():
    fees = calculate_processing_fee(2000, rate="0.029", fixed_cents=30)
    assert fees.gross_cents == 2091
    assert fees.fee_cents == 91
    assert fees.price_cents == 2000


@pytest.mark.parametrize("price_cents", [0, 1, 99, 500, 1000, 2000, 2500, 9999, 100000, 1234567])
def test_artist_receives_the_tier_price(price_cents):
    rate = Decimal("0.029")
    fees = calculate_processing_fee(price_cents, rate=rate, fixed_cents=30)
    net = Decimal(fees.gross_cents) - (Decimal(fees.gross_cents) * rate + 30)
    assert fees.gross_cents >= price_cents
    assert fees.gross_cents - fees.fee_cents == price_cents
    # rounding up means the artist gets the price, give or take a cent
    assert net >= price_cents
    assert round(net) - price_cents <= 1


def test_float_rate_matches_decimal_rate():
    assert calculate_processing_fee(2000, rate=0.029, fixed_cents=30) == calculate_processing_fee(
        2000, rate=Decimal("0.029"), fixed_cents=30
    )


def test_defaults_come_from_settings(settings):
    settings.STRIPE_FEE_PERCENT = "0.05"
    settings.STRIPE_FEE_FIXED_CENTS = 0
    fees = calculate_processing_fee(950)
    assert fees.gross_cents == 1000
    assert fees.fee_cents == 50


def test_cent_conversions():
    assert to_cents(Decimal("20.00")) == 2000
    assert to_cents("19.995") == 2000
    assert from_cents(2091) == Decimal("20.91")
    assert format_amount(Decimal("1234.5")) == "$1,234.50"
    assert format_amount(Decimal("10"), "eur") == "10.00 EUR"
