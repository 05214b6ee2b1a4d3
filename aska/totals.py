"""Invoice totals and currency rounding."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping

_CENT = Decimal("0.01")


def round_currency(amount: float) -> float:
    """Round to two decimals, halves toward positive infinity (-0.125 -> -0.12)."""
    value = Decimal(str(amount))
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    # Adding 0.0 turns a rounded -0.0 into 0.0.
    return float(value.quantize(_CENT, rounding=rounding)) + 0.0


def format_currency(amount: float) -> str:
    """Return amount formatted to two decimals."""
    return f"{amount:,.2f}"


@dataclass(frozen=True)
class Totals:
    subtotal: float
    discount_amount: float
    tax_amount: float
    total: float


def _line_total(item: Any) -> float:
    if isinstance(item, Mapping):
        return float(item.get("line_total", 0) or 0)
    return float(item.line_total)


def compute_totals(items: Iterable[Any], tax_percent: float, discount_percent: float) -> Totals:
    """Compute invoice totals; discount applies before tax.

    ``items`` may be InvoiceItem objects or mappings with a ``line_total`` key.
    """
    subtotal = sum(_line_total(item) for item in items)
    discount_amount = subtotal * discount_percent / 100
    taxable_amount = subtotal - discount_amount
    tax_amount = taxable_amount * tax_percent / 100
    total = taxable_amount + tax_amount

    return Totals(
        subtotal=round_currency(subtotal),
        discount_amount=round_currency(discount_amount),
        tax_amount=round_currency(tax_amount),
        total=round_currency(total),
    )
