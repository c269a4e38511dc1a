"""Conversion between display amounts and stored minor units.

Amounts arrive from the API as major-unit decimals ("12.50") and are stored
as integer minor units (1250). Conversion happens once, at the boundary.
"""

from decimal import Decimal, ROUND_DOWN
from typing import Union
from src.domain.errors import ValidationError

MINOR_UNITS_PER_MAJOR = 100
_CENT = Decimal("0.01")


def to_minor_units(amount: Union[Decimal, int, str]) -> int:
    """
    Convert a major-unit amount to integer minor units

    Multiplies by 100 and truncates toward zero (12.509 -> 1250,
    -0.019 -> -1).

    Raises:
        ValidationError: If the amount is not a finite decimal
    """
    try:
        value = Decimal(amount) if not isinstance(amount, Decimal) else amount
    except ArithmeticError:
        raise ValidationError(f"Invalid monetary amount: {amount!r}")

    if not value.is_finite():
        raise ValidationError(f"Invalid monetary amount: {amount!r}")

    scaled = (value * MINOR_UNITS_PER_MAJOR).to_integral_value(rounding=ROUND_DOWN)
    return int(scaled)


def from_minor_units(amount: int) -> Decimal:
    """Convert integer minor units back to a two-place major-unit Decimal"""
    return (Decimal(amount) / MINOR_UNITS_PER_MAJOR).quantize(_CENT)
