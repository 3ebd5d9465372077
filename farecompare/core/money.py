"""Decimal helpers shared by the pricing stages."""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric input to ``Decimal`` without binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_cents(amount: Decimal) -> Decimal:
    """Quantize a currency amount to cents (half-up)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
