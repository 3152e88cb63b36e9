"""
Tax Decomposer
Unbundles a fixed-rate GST from tax-inclusive item prices.

Canonical derivation:
    unit_price_excl_tax = price / (1 + rate)
    tax_per_unit        = price - unit_price_excl_tax

so excl + tax always equals the inclusive price exactly. Values are kept
at full Decimal precision; rounding to paise happens only for display.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple, Union

from . import invoice_config as cfg
from .exceptions import PreconditionError
from .models import InvoiceLineItem, NormalizedItem

RateLike = Union[str, int, float, Decimal]


class TaxDecomposer:
    """Splits tax-inclusive prices into taxable value and GST."""

    def __init__(self, rate: Optional[RateLike] = None):
        self.rate = self.parse_rate(cfg.GST_RATE if rate is None else rate)
        self._divisor = Decimal("1") + self.rate

    @staticmethod
    def parse_rate(rate: RateLike) -> Decimal:
        """Validate a tax rate given as a fraction (0.18 for 18%)."""
        if isinstance(rate, bool):
            raise PreconditionError(f"Tax rate must be a number, got {rate!r}")
        try:
            # str() first so 0.18 (float) becomes exactly Decimal("0.18")
            value = Decimal(str(rate).strip())
        except (InvalidOperation, ValueError):
            raise PreconditionError(f"Tax rate is not a number: {rate!r}")
        if not value.is_finite() or value < 0:
            raise PreconditionError(f"Tax rate must be a non-negative number, got {rate!r}")
        return value

    # ------------------------------------------------------------------
    # Per unit
    # ------------------------------------------------------------------

    def unit_breakdown(self, price_incl_tax: Decimal) -> Tuple[Decimal, Decimal]:
        """Return (price excluding tax, tax) for one unit."""
        excl = price_incl_tax / self._divisor
        return excl, price_incl_tax - excl

    # ------------------------------------------------------------------
    # Per line
    # ------------------------------------------------------------------

    def decompose(self, item: NormalizedItem, serial_no: int = 1) -> InvoiceLineItem:
        """Build the invoice line for one normalized item."""
        excl, tax = self.unit_breakdown(item.unit_price)
        qty = Decimal(item.quantity)
        return InvoiceLineItem(
            serial_no=serial_no,
            name=item.name,
            quantity=item.quantity,
            unit_price_incl_tax=item.unit_price,
            unit_price_excl_tax=excl,
            tax_per_unit=tax,
            line_total_incl_tax=item.unit_price * qty,
            line_tax_total=tax * qty,
            size=item.size,
            color=item.color,
        )
