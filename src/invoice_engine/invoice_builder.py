"""
Invoice Builder
Turns a stored order record into a complete, self-consistent InvoiceDocument.

Pipeline (single pass, no side effects beyond logging):
1. Normalize the order's items
2. Unbundle GST per item into invoice lines
3. Aggregate subtotal and tax
4. Read the shipping charge (an explicit 0 means free shipping)
5. Grand total = subtotal + shipping
6. Spell the grand total in words
7. Recover the structured shipping address
8. Assemble the document and reconcile against the stored total

The freshly computed grand total is authoritative. The stored total may
predate a catalog or tax-rate change, so a disagreement is only flagged.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional

from . import invoice_config as cfg
from .amount_words import amount_in_words
from .audit_logger import InvoiceAuditLogger, get_audit_logger
from .field_resolver import as_amount, as_mapping, as_text, resolve
from .formatting import display_order_id, format_invoice_date, invoice_number
from .item_normalizer import ItemNormalizer
from .logger import get_logger
from .models import (
    BuyerDetails,
    InvoiceDocument,
    ReconciliationResult,
    SellerDetails,
    ShippingAddress,
)
from .tax_decomposer import RateLike, TaxDecomposer

ADDRESS_FIELD_PATHS = {
    "address": ("address", "street", "line1", "address_line1"),
    "city": ("city",),
    "state": ("state",),
    "zip_code": ("zipCode", "zip_code", "zip", "pincode", "postal_code"),
    "country": ("country",),
}


def default_seller() -> SellerDetails:
    """Seller block from configuration."""
    return SellerDetails(
        name=cfg.SELLER_NAME,
        tagline=cfg.SELLER_TAGLINE,
        address_lines=tuple(
            line for line in (cfg.SELLER_ADDRESS_LINE1, cfg.SELLER_ADDRESS_LINE2) if line
        ),
        phone=cfg.SELLER_PHONE,
        email=cfg.SELLER_EMAIL,
        gstin=cfg.SELLER_GSTIN,
        state=cfg.SELLER_STATE,
        state_code=cfg.SELLER_STATE_CODE,
    )


def is_invoice_available(order: Mapping[str, Any]) -> bool:
    """Customers can download an invoice only once the order is paid."""
    status = resolve(order, ("payment_status",), as_text, "")
    return status.lower() == "paid"


def parse_shipping_address(raw: Any) -> Optional[ShippingAddress]:
    """
    Recover a structured address from a mapping or its JSON text

    Returns None when the value is missing, unreadable or has no
    recognizable address fields.
    """
    if isinstance(raw, str) and not raw.strip():
        return None

    address = as_mapping(raw)
    if address is None:
        if isinstance(raw, str):
            get_logger().warning("Unreadable shipping address ignored", component="InvoiceBuilder")
        return None
    raw = address

    fields = {key: resolve(raw, paths, as_text, "") for key, paths in ADDRESS_FIELD_PATHS.items()}
    if not any(fields.values()):
        return None

    first = resolve(raw, ("firstName", "first_name"), as_text, "")
    last = resolve(raw, ("lastName", "last_name"), as_text, "")
    recipient = " ".join(p for p in (first, last) if p) or resolve(raw, ("name",), as_text, "")
    return ShippingAddress(recipient=recipient, **fields)


class InvoiceBuilder:
    """Builds InvoiceDocuments from raw order records."""

    def __init__(
        self,
        tax_rate: Optional[RateLike] = None,
        seller: Optional[SellerDetails] = None,
        tolerance: Optional[str] = None,
        normalizer: Optional[ItemNormalizer] = None,
        audit_logger: Optional[InvoiceAuditLogger] = None,
    ) -> None:
        self.decomposer = TaxDecomposer(tax_rate)
        self.seller = seller or default_seller()
        self.tolerance = Decimal(tolerance or cfg.RECONCILIATION_TOLERANCE)
        self.normalizer = normalizer or ItemNormalizer()
        self.audit_logger = audit_logger if audit_logger is not None else get_audit_logger()
        self.logger = get_logger()

    @property
    def tax_rate(self) -> Decimal:
        return self.decomposer.rate

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, order: Mapping[str, Any]) -> InvoiceDocument:
        """Build the invoice document for one order record."""
        items = self.normalizer.normalize(order.get("items"))
        lines = tuple(
            self.decomposer.decompose(item, serial_no=idx)
            for idx, item in enumerate(items, start=1)
        )

        subtotal = sum((line.line_total_incl_tax for line in lines), Decimal("0"))
        total_tax = sum((line.line_tax_total for line in lines), Decimal("0"))
        shipping = resolve(order, ("shipping_cost",), as_amount, Decimal("0"))
        grand_total = subtotal + shipping

        order_id = resolve(order, ("id",), as_text, "")
        short_id = display_order_id(order_id)
        inv_no = invoice_number(short_id)
        order_date = resolve(order, ("created_at",), as_text, "")

        reconciliation = ReconciliationResult(
            computed_total=grand_total,
            persisted_total=resolve(order, ("total",), as_amount, None),
            tolerance=self.tolerance,
        )

        document = InvoiceDocument(
            order_id=order_id,
            display_order_id=short_id,
            invoice_number=inv_no,
            order_date=order_date,
            order_date_display=format_invoice_date(order_date),
            seller=self.seller,
            buyer=self._buyer(order),
            line_items=lines,
            subtotal_incl_tax=subtotal,
            total_tax=total_tax,
            shipping_cost=shipping,
            grand_total=grand_total,
            grand_total_in_words=amount_in_words(grand_total),
            status=resolve(order, ("status",), as_text, "pending"),
            payment_status=resolve(order, ("payment_status",), as_text, "pending"),
            tax_rate=self.tax_rate,
            reconciliation=reconciliation,
        )

        if reconciliation.mismatch:
            self.logger.log_reconciliation_mismatch(
                inv_no,
                reconciliation.computed_total,
                reconciliation.persisted_total,
                reconciliation.difference,
            )
        self.logger.log_invoice_built(inv_no, len(lines), grand_total)
        if self.audit_logger:
            self.audit_logger.log_invoice(document)

        return document

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _buyer(order: Mapping[str, Any]) -> BuyerDetails:
        return BuyerDetails(
            name=resolve(order, ("customer_name",), as_text, ""),
            email=resolve(order, ("customer_email",), as_text, ""),
            phone=resolve(order, ("customer_phone",), as_text, None),
            shipping_address=parse_shipping_address(order.get("shipping_address")),
        )
