"""
Invoice PDF Renderer
====================

Generates an A4 tax invoice from a built InvoiceDocument.

Layout:
    Seller header | TAX INVOICE block
    SOLD BY | BILL TO
    ORDER DETAILS table: S.No | Product Description | Qty | Unit Price | GST | Amount
    Amount summary with total in words
    Payment details, terms, signature lines, footer

reportlab is imported lazily so the rest of the engine works without it;
a missing install is reported as RendererUnavailableError.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from xml.sax.saxutils import escape

from . import invoice_config as cfg
from .exceptions import RenderError, RendererUnavailableError
from .formatting import format_amount, truncate_name
from .logger import get_logger
from .models import InvoiceDocument
from .renderer import InvoiceRenderer

# Palette
BRAND_BLUE = "#1a237e"
TITLE_RED = "#d32f2f"
TEXT_GREY = "#555555"
MUTED_GREY = "#777777"
BORDER_GREY = "#dddddd"
PANEL_GREY = "#f5f5f5"
STATUS_GREEN = "#388e3c"
STATUS_ORANGE = "#f57c00"


def _ensure_reportlab() -> None:
    try:
        import reportlab  # noqa: F401
    except ImportError as e:
        raise RendererUnavailableError(
            "reportlab not installed. Install with: pip install reportlab"
        ) from e


def _status_colour(status: str, good: str, bad: Optional[str] = None) -> str:
    status = status.lower()
    if status == good:
        return STATUS_GREEN
    if bad and status == bad:
        return TITLE_RED
    return STATUS_ORANGE


class InvoicePdfRenderer(InvoiceRenderer):
    """Renders invoice documents as A4 PDFs with reportlab"""

    extension = "pdf"

    def __init__(self, currency_symbol: Optional[str] = None):
        self.currency_symbol = cfg.PDF_CURRENCY_SYMBOL if currency_symbol is None else currency_symbol
        self.logger = get_logger()

    def render(self, document: InvoiceDocument, output_path: str) -> None:
        _ensure_reportlab()

        from reportlab.lib.pagesizes import A4
        from reportlab.lib.units import mm
        from reportlab.platypus import SimpleDocTemplate
        from reportlab.platypus.doctemplate import LayoutError

        try:
            doc = SimpleDocTemplate(
                output_path,
                pagesize=A4,
                leftMargin=15 * mm,
                rightMargin=15 * mm,
                topMargin=15 * mm,
                bottomMargin=15 * mm,
                title=f"Tax Invoice {document.invoice_number}",
                author=document.seller.name,
            )
            doc.build(self._story(document))
        except (LayoutError, OSError, ValueError, KeyError, AttributeError) as e:
            raise RenderError(f"PDF generation failed: {e}") from e

        self.logger.debug(f"PDF written for {document.invoice_number}", component="PdfRenderer")

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def _money(self, value) -> str:
        return f"{self.currency_symbol}{format_amount(value)}"

    # ------------------------------------------------------------------
    # Story
    # ------------------------------------------------------------------

    def _story(self, document: InvoiceDocument) -> List:
        from reportlab.lib.units import mm
        from reportlab.platypus import Spacer

        styles = self._styles()
        elements = []
        elements.extend(self._header(document, styles))
        elements.append(Spacer(1, 4 * mm))
        elements.append(self._parties(document, styles))
        elements.append(Spacer(1, 5 * mm))
        elements.extend(self._items(document, styles))
        elements.append(Spacer(1, 3 * mm))
        elements.append(self._summary(document, styles))
        elements.append(Spacer(1, 6 * mm))
        elements.extend(self._payment_and_terms(document, styles))
        elements.append(Spacer(1, 10 * mm))
        elements.append(self._signatures(document, styles))
        elements.append(Spacer(1, 8 * mm))
        elements.extend(self._footer(document, styles))
        return elements

    @staticmethod
    def _styles() -> dict:
        from reportlab.lib import colors
        from reportlab.lib.enums import TA_CENTER
        from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet

        base = getSampleStyleSheet()
        grey = colors.HexColor(TEXT_GREY)
        return {
            "brand": ParagraphStyle(
                "Brand", parent=base["Heading1"], fontSize=22, alignment=TA_CENTER,
                textColor=colors.HexColor(BRAND_BLUE), spaceAfter=6,
            ),
            "center": ParagraphStyle(
                "CenterSmall", parent=base["Normal"], fontSize=9, alignment=TA_CENTER,
                textColor=grey, leading=12,
            ),
            "title": ParagraphStyle(
                "InvoiceTitle", parent=base["Heading2"], fontSize=18, alignment=TA_CENTER,
                textColor=colors.HexColor(TITLE_RED), spaceBefore=6, spaceAfter=4,
            ),
            "section": ParagraphStyle(
                "Section", parent=base["Normal"], fontName="Helvetica-Bold", fontSize=10,
                textColor=colors.HexColor(BRAND_BLUE), spaceAfter=4,
            ),
            "heading": ParagraphStyle(
                "Heading", parent=base["Normal"], fontName="Helvetica-Bold", fontSize=12,
                textColor=colors.HexColor(BRAND_BLUE), spaceAfter=6,
            ),
            "body": ParagraphStyle(
                "Body", parent=base["Normal"], fontSize=9, textColor=grey, leading=12,
            ),
            "strong": ParagraphStyle(
                "Strong", parent=base["Normal"], fontName="Helvetica-Bold", fontSize=10,
                textColor=colors.HexColor("#333333"), leading=13,
            ),
            "cell": ParagraphStyle(
                "Cell", parent=base["Normal"], fontSize=8.5, leading=11,
            ),
            "footer": ParagraphStyle(
                "Footer", parent=base["Normal"], fontSize=8, alignment=TA_CENTER,
                textColor=colors.HexColor(MUTED_GREY), leading=11,
            ),
        }

    def _header(self, document: InvoiceDocument, styles: dict) -> List:
        from reportlab.lib import colors
        from reportlab.platypus import HRFlowable, Paragraph

        seller = document.seller
        elements = [Paragraph(escape(seller.name.upper()), styles["brand"])]
        if seller.tagline:
            elements.append(Paragraph(escape(seller.tagline), styles["center"]))
        if seller.address_lines:
            elements.append(Paragraph(escape(", ".join(seller.address_lines)), styles["center"]))
        contact = " | ".join(
            part for part in (
                f"Phone: {seller.phone}" if seller.phone else "",
                f"Email: {seller.email}" if seller.email else "",
            ) if part
        )
        if contact:
            elements.append(Paragraph(escape(contact), styles["center"]))
        if seller.gstin:
            elements.append(Paragraph(f"GSTIN: {escape(seller.gstin)}", styles["center"]))

        elements.append(Paragraph("TAX INVOICE", styles["title"]))
        elements.append(Paragraph(
            f"Invoice No: {escape(document.invoice_number)}<br/>"
            f"Date: {escape(document.order_date_display)}<br/>"
            f"Order ID: {escape(document.display_order_id)}",
            styles["center"],
        ))
        elements.append(HRFlowable(width="100%", thickness=2, color=colors.HexColor("#333333"),
                                   spaceBefore=6, spaceAfter=2))
        return elements

    def _parties(self, document: InvoiceDocument, styles: dict):
        from reportlab.lib import colors
        from reportlab.lib.units import mm
        from reportlab.platypus import Paragraph, Table, TableStyle

        seller = document.seller
        sold_by = [Paragraph("SOLD BY", styles["section"]), Paragraph(escape(seller.name), styles["strong"])]
        sold_by += [Paragraph(escape(line), styles["body"]) for line in seller.address_lines]
        if seller.gstin:
            sold_by.append(Paragraph(f"GSTIN: {escape(seller.gstin)}", styles["body"]))
        if seller.state:
            sold_by.append(Paragraph(
                f"State: {escape(seller.state)} | Code: {escape(seller.state_code)}", styles["body"]
            ))

        buyer = document.buyer
        bill_to = [Paragraph("BILL TO", styles["section"]), Paragraph(escape(buyer.name), styles["strong"])]
        for value in (buyer.email, buyer.phone):
            if value:
                bill_to.append(Paragraph(escape(value), styles["body"]))
        address = buyer.shipping_address
        if address:
            for value in (address.address, address.locality_line, address.country):
                if value:
                    bill_to.append(Paragraph(escape(value), styles["body"]))

        table = Table([[sold_by, bill_to]], colWidths=[88 * mm, 88 * mm], hAlign="CENTER")
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor(PANEL_GREY)),
            ("BOX", (0, 0), (0, 0), 0.75, colors.HexColor(BORDER_GREY)),
            ("BOX", (1, 0), (1, 0), 0.75, colors.HexColor(BORDER_GREY)),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 8),
            ("RIGHTPADDING", (0, 0), (-1, -1), 8),
            ("TOPPADDING", (0, 0), (-1, -1), 6),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
        ]))
        return table

    def _items(self, document: InvoiceDocument, styles: dict) -> List:
        from reportlab.lib import colors
        from reportlab.lib.units import mm
        from reportlab.platypus import Paragraph, Table, TableStyle

        rate = document.tax_rate_percent
        header = ["S.No", "Product Description", "Qty", "Unit Price\n(excl. GST)",
                  f"GST ({rate}%)\nper unit", "Amount"]
        table_data = [header]

        for line in document.line_items:
            description = escape(truncate_name(line.name))
            variant = ", ".join(
                part for part in (
                    f"Size: {line.size}" if line.size else "",
                    f"Color: {line.color}" if line.color else "",
                ) if part
            )
            if variant:
                description += f"<br/><font size='7' color='{MUTED_GREY}'>{escape(variant)}</font>"

            table_data.append([
                str(line.serial_no),
                Paragraph(description, styles["cell"]),
                str(line.quantity),
                self._money(line.unit_price_excl_tax),
                self._money(line.tax_per_unit),
                self._money(line.line_total_incl_tax),
            ])

        if not document.line_items:
            table_data.append(["", Paragraph("No items", styles["cell"]), "", "", "", ""])

        # A4 = 210mm, minus 30mm margins = 180mm usable
        col_widths = [12 * mm, 70 * mm, 14 * mm, 28 * mm, 26 * mm, 30 * mm]
        table = Table(table_data, colWidths=col_widths, repeatRows=1)
        table.setStyle(TableStyle([
            # Header row
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(BRAND_BLUE)),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, 0), 8.5),
            ("ALIGN", (0, 0), (-1, 0), "CENTER"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, 0), 5),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 5),

            # Data rows
            ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 1), (-1, -1), 8.5),
            ("ALIGN", (0, 1), (0, -1), "CENTER"),
            ("ALIGN", (2, 1), (2, -1), "CENTER"),
            ("ALIGN", (3, 1), (-1, -1), "RIGHT"),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#fafafa")]),

            # Grid
            ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor(BORDER_GREY)),
        ]))
        return [Paragraph("ORDER DETAILS", styles["heading"]), table]

    def _summary(self, document: InvoiceDocument, styles: dict):
        from reportlab.lib import colors
        from reportlab.lib.units import mm
        from reportlab.platypus import Paragraph, Table, TableStyle

        rate = document.tax_rate_percent
        shipping = "FREE" if document.is_free_shipping else self._money(document.shipping_cost)
        rows = [
            ["Subtotal (Excluding GST):", self._money(document.subtotal_excl_tax)],
            [f"GST @{rate}%:", self._money(document.total_tax)],
            ["Subtotal (Including GST):", self._money(document.subtotal_incl_tax)],
            ["Shipping:", shipping],
            ["Total:", self._money(document.grand_total)],
        ]
        words = f"{document.grand_total_in_words} {cfg.MAJOR_UNIT_LABEL} Only"
        rows.append([Paragraph(f"<b>Amount in Words:</b> {escape(words)}", styles["body"]), ""])

        total_idx = len(rows) - 2
        table = Table(rows, colWidths=[60 * mm, 35 * mm], hAlign="RIGHT")
        table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("ALIGN", (1, 0), (1, -1), "RIGHT"),
            ("LINEABOVE", (0, total_idx), (-1, total_idx), 1.5, colors.HexColor("#333333")),
            ("FONTNAME", (0, total_idx), (-1, total_idx), "Helvetica-Bold"),
            ("FONTSIZE", (0, total_idx), (-1, total_idx), 11),
            ("TEXTCOLOR", (0, total_idx), (-1, total_idx), colors.HexColor(BRAND_BLUE)),
            ("SPAN", (0, -1), (-1, -1)),
            ("TOPPADDING", (0, -1), (-1, -1), 6),
        ]))
        return table

    def _payment_and_terms(self, document: InvoiceDocument, styles: dict) -> List:
        from reportlab.platypus import Paragraph

        payment = document.payment_status
        status = document.status
        elements = [
            Paragraph("Payment Details", styles["section"]),
            Paragraph(
                f"<b>Payment Status:</b> <font color='{_status_colour(payment, 'paid')}'>"
                f"<b>{escape(payment.upper())}</b></font>",
                styles["body"],
            ),
            Paragraph(
                f"<b>Order Status:</b> <font color='{_status_colour(status, 'delivered', 'cancelled')}'>"
                f"<b>{escape(status.capitalize())}</b></font>",
                styles["body"],
            ),
        ]
        if cfg.INVOICE_TERMS:
            elements.append(Paragraph("Terms &amp; Conditions", styles["section"]))
            elements.append(Paragraph(
                "<br/>".join(f"• {escape(term)}" for term in cfg.INVOICE_TERMS),
                styles["body"],
            ))
        return elements

    def _signatures(self, document: InvoiceDocument, styles: dict):
        from reportlab.lib import colors
        from reportlab.lib.units import mm
        from reportlab.platypus import Paragraph, Table, TableStyle

        table = Table(
            [
                ["", ""],
                [Paragraph("Customer Signature", styles["body"]),
                 Paragraph(f"For {escape(document.seller.name)}", styles["body"])],
            ],
            colWidths=[65 * mm, 65 * mm],
            rowHeights=[12 * mm, None],
            hAlign="CENTER",
            spaceBefore=2,
        )
        table.setStyle(TableStyle([
            ("LINEBELOW", (0, 0), (0, 0), 0.75, colors.HexColor("#666666")),
            ("LINEBELOW", (1, 0), (1, 0), 0.75, colors.HexColor("#666666")),
        ]))
        return table

    def _footer(self, document: InvoiceDocument, styles: dict) -> List:
        from reportlab.lib import colors
        from reportlab.platypus import HRFlowable, Paragraph

        generated = datetime.now().strftime("%d %b %Y at %I:%M %p")
        return [
            HRFlowable(width="100%", thickness=0.75, color=colors.HexColor(BORDER_GREY), spaceAfter=4),
            Paragraph(
                f"This is a computer generated invoice from {escape(document.seller.name)} "
                "and does not require a physical signature.",
                styles["footer"],
            ),
            Paragraph(f"Invoice generated on {generated}", styles["footer"]),
        ]
