"""Rounding helpers for amounts kept as floats on aggregates.

Arithmetic goes through ``Decimal`` built from the float's string form so that
``19.995`` rounds the way a shopper reads it, not the way IEEE 754 stores it.
"""

from decimal import ROUND_HALF_UP, Decimal

_WHOLE = Decimal("1")
_CENTS = Decimal("0.01")


def to_decimal(amount: float | int | str) -> Decimal:
    return Decimal(str(amount))


def round_half_up(amount: float | int | str | Decimal) -> int:
    value = amount if isinstance(amount, Decimal) else to_decimal(amount)
    return int(value.quantize(_WHOLE, rounding=ROUND_HALF_UP))


def to_minor_units(amount: float | int | str) -> int:
    """Express a major-unit price in the processor's minor unit (paise, cents)."""
    return round_half_up(to_decimal(amount) * 100)


def round_cents(amount: Decimal) -> float:
    return float(amount.quantize(_CENTS, rounding=ROUND_HALF_UP))
