"""Invoice Calculator

Pure functions deriving invoice totals from line items, signed adjustments
and a tax rate. All amounts are integer minor units; no floats are involved.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Iterable, Union
from src.domain.errors import ValidationError
from src.domain.invoice_adjustment import AdjustmentKind


@dataclass(frozen=True)
class InvoiceTotals:
    """Derived monetary fields of an invoice (minor units)"""

    subtotal: int
    tax_amount: int
    adjustments_total: int
    total: int


def compute_subtotal(items: Iterable) -> int:
    return sum(item.quantity * item.unit_price for item in items)


def compute_tax(subtotal: int, tax_rate: Union[Decimal, int]) -> int:
    """
    Tax on a subtotal, truncated: floor(subtotal * tax_rate / 100)

    Truncation (never rounding) is the billing policy.
    """
    if tax_rate < 0:
        raise ValidationError(f"Tax rate must be non-negative, got {tax_rate}")
    tax = (Decimal(subtotal) * Decimal(tax_rate) / 100).to_integral_value(rounding=ROUND_FLOOR)
    return int(tax)


def adjustment_sign(kind) -> int:
    """+1 for additions, -1 for deductions; anything else is rejected"""
    try:
        kind = AdjustmentKind(kind)
    except ValueError:
        raise ValidationError(f"Unknown adjustment kind: {kind!r}")
    return 1 if kind == AdjustmentKind.ADDITION else -1


def compute_adjustments_total(adjustments: Iterable) -> int:
    return sum(adjustment_sign(adj.kind) * adj.amount for adj in adjustments)


def compute_totals(items: Iterable, adjustments: Iterable, tax_rate: Union[Decimal, int]) -> InvoiceTotals:
    """
    Compute all derived invoice totals

    Args:
        items: Objects exposing quantity and unit_price (minor units)
        adjustments: Objects exposing kind and amount (minor units)
        tax_rate: Non-negative percentage

    Returns:
        InvoiceTotals with subtotal, tax_amount, adjustments_total, total
    """
    subtotal = compute_subtotal(items)
    tax_amount = compute_tax(subtotal, tax_rate)
    adjustments_total = compute_adjustments_total(adjustments)
    return InvoiceTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        adjustments_total=adjustments_total,
        total=subtotal + tax_amount + adjustments_total,
    )
