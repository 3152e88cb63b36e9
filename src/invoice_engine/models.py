"""
Invoice Engine Data Models
Dataclasses passed between the normalizer, tax decomposer, builder and exporter.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Dict, Optional, Tuple

MONEY_QUANT = Decimal("0.01")


def to_money(value: Decimal) -> Decimal:
    """Round a monetary value to paise for display."""
    with localcontext() as ctx:
        # quantize fails once the paise digits exceed the context precision
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def _money_str(value: Decimal) -> str:
    return str(to_money(value))


# ---------------------------------------------------------------------------
# Item models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NormalizedItem:
    """One purchasable item in canonical shape, whatever writer produced it."""
    name: str = "Product"
    images: Tuple[str, ...] = ()
    unit_price: Decimal = Decimal("0")  # tax inclusive
    quantity: int = 1
    size: str = ""
    color: str = ""
    product_id: Optional[str] = None


@dataclass(frozen=True)
class InvoiceLineItem:
    """A normalized item with its tax unbundled, per unit and per line."""
    serial_no: int
    name: str
    quantity: int
    unit_price_incl_tax: Decimal
    unit_price_excl_tax: Decimal
    tax_per_unit: Decimal
    line_total_incl_tax: Decimal
    line_tax_total: Decimal
    size: str = ""
    color: str = ""

    @property
    def line_total_excl_tax(self) -> Decimal:
        return self.line_total_incl_tax - self.line_tax_total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "serial_no": self.serial_no,
            "name": self.name,
            "quantity": self.quantity,
            "unit_price_incl_tax": _money_str(self.unit_price_incl_tax),
            "unit_price_excl_tax": _money_str(self.unit_price_excl_tax),
            "tax_per_unit": _money_str(self.tax_per_unit),
            "line_total_incl_tax": _money_str(self.line_total_incl_tax),
            "line_tax_total": _money_str(self.line_tax_total),
            "line_total_excl_tax": _money_str(self.line_total_excl_tax),
            "size": self.size,
            "color": self.color,
        }


# ---------------------------------------------------------------------------
# Party models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SellerDetails:
    """Fixed seller block printed on every invoice."""
    name: str = ""
    tagline: str = ""
    address_lines: Tuple[str, ...] = ()
    phone: str = ""
    email: str = ""
    gstin: str = ""
    state: str = ""
    state_code: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "tagline": self.tagline,
            "address_lines": list(self.address_lines),
            "phone": self.phone,
            "email": self.email,
            "gstin": self.gstin,
            "state": self.state,
            "state_code": self.state_code,
        }


@dataclass(frozen=True)
class ShippingAddress:
    """Structured shipping address recovered from the order record."""
    recipient: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""

    @property
    def locality_line(self) -> str:
        """'City, State Zip' with empty parts dropped."""
        region = " ".join(p for p in (self.state, self.zip_code) if p)
        return ", ".join(p for p in (self.city, region) if p)

    def to_dict(self) -> Dict[str, str]:
        return {
            "recipient": self.recipient,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "country": self.country,
        }


@dataclass(frozen=True)
class BuyerDetails:
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "shipping_address": (
                self.shipping_address.to_dict() if self.shipping_address else None
            ),
        }


# ---------------------------------------------------------------------------
# Invoice models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReconciliationResult:
    """Computed grand total compared with the total stored on the order."""
    computed_total: Decimal
    persisted_total: Optional[Decimal]
    tolerance: Decimal

    @property
    def difference(self) -> Optional[Decimal]:
        if self.persisted_total is None:
            return None
        return self.computed_total - self.persisted_total

    @property
    def mismatch(self) -> bool:
        diff = self.difference
        return diff is not None and abs(diff) > self.tolerance

    @property
    def status(self) -> str:
        if self.persisted_total is None:
            return "UNAVAILABLE"
        return "MISMATCH" if self.mismatch else "OK"

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "status": self.status,
            "computed_total": _money_str(self.computed_total),
        }
        if self.persisted_total is not None:
            d["persisted_total"] = _money_str(self.persisted_total)
            d["difference"] = _money_str(self.difference)
        return d


@dataclass(frozen=True)
class InvoiceDocument:
    """Fully resolved, renderer-agnostic tax invoice for one order."""
    order_id: str
    display_order_id: str
    invoice_number: str
    order_date: str
    order_date_display: str
    seller: SellerDetails
    buyer: BuyerDetails
    line_items: Tuple[InvoiceLineItem, ...]
    subtotal_incl_tax: Decimal
    total_tax: Decimal
    shipping_cost: Decimal
    grand_total: Decimal
    grand_total_in_words: str
    status: str
    payment_status: str
    tax_rate: Decimal
    reconciliation: ReconciliationResult

    @property
    def subtotal_excl_tax(self) -> Decimal:
        return self.subtotal_incl_tax - self.total_tax

    @property
    def is_free_shipping(self) -> bool:
        return self.shipping_cost == 0

    @property
    def tax_rate_percent(self) -> str:
        """Tax rate as a display percentage, e.g. '18'."""
        pct = (self.tax_rate * 100).normalize()
        return f"{pct:f}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "display_order_id": self.display_order_id,
            "invoice_number": self.invoice_number,
            "order_date": self.order_date,
            "order_date_display": self.order_date_display,
            "seller": self.seller.to_dict(),
            "buyer": self.buyer.to_dict(),
            "line_items": [item.to_dict() for item in self.line_items],
            "subtotal_excl_tax": _money_str(self.subtotal_excl_tax),
            "total_tax": _money_str(self.total_tax),
            "subtotal_incl_tax": _money_str(self.subtotal_incl_tax),
            "shipping_cost": _money_str(self.shipping_cost),
            "is_free_shipping": self.is_free_shipping,
            "grand_total": _money_str(self.grand_total),
            "grand_total_in_words": self.grand_total_in_words,
            "tax_rate": str(self.tax_rate),
            "status": self.status,
            "payment_status": self.payment_status,
            "reconciliation": self.reconciliation.to_dict(),
        }


# ---------------------------------------------------------------------------
# Export models
# ---------------------------------------------------------------------------

@dataclass
class ExportResult:
    """Outcome of handing an invoice document to a renderer."""
    invoice_number: str = ""
    filename: str = ""
    path: str = ""
    error: str = ""
    error_code: str = ""  # RENDERER_UNAVAILABLE, RENDER_FAILED

    @property
    def success(self) -> bool:
        return not self.error_code

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "success": self.success,
            "invoice_number": self.invoice_number,
            "filename": self.filename,
        }
        if self.success:
            d["path"] = self.path
        else:
            d["error"] = self.error
            d["error_code"] = self.error_code
        return d
