"""
Processing fee calculation for checkout.

Backers cover the card processor's cut so that the project is credited
exactly the tier price.  Stripe deducts ``gross * rate + fixed`` from
every charge, so the gross charge has to satisfy::

    gross - (gross * rate + fixed) >= price

which gives ``gross = ceil((price + fixed) / (1 - rate))``.  All maths
is done on integer cents with an exact fractional rate; rounding up
means the artist never receives less than the tier price.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from fractions import Fraction

from django.conf import settings

CENT = Decimal("0.01")


@dataclass(frozen=True)
class FeeBreakdown:
    """Amounts in cents for one checkout: what the project gets, the fee, and the total charged."""

    price_cents: int
    fee_cents: int
    gross_cents: int


def calculate_processing_fee(
    price_cents: int,
    rate: Decimal | str | float | None = None,
    fixed_cents: int | None = None,
) -> FeeBreakdown:
    """Compute the gross charge and processing fee for a price in cents.

    Args:
        price_cents: Net amount the project must receive, in cents.
        rate: Percentage rate charged by the processor as a fraction
            (``0.029`` for 2.9%).  Defaults to ``settings.STRIPE_FEE_PERCENT``.
        fixed_cents: Fixed per-transaction fee in cents.  Defaults to
            ``settings.STRIPE_FEE_FIXED_CENTS``.

    Returns:
        A ``FeeBreakdown`` where ``gross_cents - fee_cents == price_cents``.
    """
    if rate is None:
        rate = settings.STRIPE_FEE_PERCENT
    if fixed_cents is None:
        fixed_cents = settings.STRIPE_FEE_FIXED_CENTS

    # str() first so float rates like 0.029 stay exact
    exact_rate = Fraction(str(rate))
    gross = Fraction(price_cents + fixed_cents) / (1 - exact_rate)
    gross_cents = -(-gross.numerator // gross.denominator)
    return FeeBreakdown(
        price_cents=price_cents,
        fee_cents=gross_cents - price_cents,
        gross_cents=gross_cents,
    )


def to_cents(amount: Decimal | int | str) -> int:
    """Convert a currency amount (dollars) to integer cents, rounding half up."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert integer cents to a two-place Decimal amount."""
    return (Decimal(cents) / 100).quantize(CENT)


def format_amount(amount: Decimal | int | str, currency: str = "usd") -> str:
    """Render an amount for display in emails ("$20.00")."""
    value = Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)
    if currency.lower() == "usd":
        return f"${value:,.2f}"
    return f"{value:,.2f} {currency.upper()}"
