"""
Invoice CSV Renderer
Spreadsheet-friendly rendition of an invoice document
"""
import csv

from . import invoice_config as cfg
from .exceptions import RenderError
from .formatting import format_amount
from .models import InvoiceDocument, to_money
from .renderer import InvoiceRenderer


class InvoiceCsvRenderer(InvoiceRenderer):
    """Writes invoice header, line items and summary as CSV rows"""

    extension = "csv"

    def render(self, document: InvoiceDocument, output_path: str) -> None:
        """
        Generate CSV from invoice document

        Args:
            document: Built invoice document
            output_path: Destination file path
        """
        buyer = document.buyer
        try:
            # utf-8-sig so spreadsheet apps detect the encoding (rupee sign, names)
            with open(output_path, 'w', newline='', encoding='utf-8-sig') as csvfile:
                writer = csv.writer(csvfile)

                # Header info rows
                writer.writerow(['Invoice No', document.invoice_number])
                writer.writerow(['Invoice Date', document.order_date_display])
                writer.writerow(['Order ID', document.display_order_id])
                writer.writerow(['Seller', document.seller.name])
                writer.writerow(['Seller GSTIN', document.seller.gstin])
                writer.writerow(['Customer', buyer.name])
                writer.writerow(['Email', buyer.email])
                writer.writerow(['Phone', buyer.phone or ''])
                if buyer.shipping_address:
                    address = buyer.shipping_address
                    writer.writerow(['Ship To', ', '.join(
                        p for p in (address.address, address.locality_line, address.country) if p
                    )])
                writer.writerow([])  # Blank row separator

                # Column headers
                rate = document.tax_rate_percent
                writer.writerow([
                    'S.No', 'Product', 'Size', 'Color', 'Qty',
                    'Unit Price (excl. GST)', f'GST ({rate}%) per unit',
                    'Unit Price (incl. GST)', 'Amount'
                ])

                for line in document.line_items:
                    writer.writerow([
                        line.serial_no,
                        line.name,
                        line.size,
                        line.color,
                        line.quantity,
                        str(to_money(line.unit_price_excl_tax)),
                        str(to_money(line.tax_per_unit)),
                        str(to_money(line.unit_price_incl_tax)),
                        str(to_money(line.line_total_incl_tax)),
                    ])

                writer.writerow([])

                # Summary
                writer.writerow(['Subtotal (Excluding GST)', format_amount(document.subtotal_excl_tax)])
                writer.writerow([f'GST @{rate}%', format_amount(document.total_tax)])
                writer.writerow(['Subtotal (Including GST)', format_amount(document.subtotal_incl_tax)])
                writer.writerow([
                    'Shipping',
                    'FREE' if document.is_free_shipping else format_amount(document.shipping_cost)
                ])
                writer.writerow(['Total', format_amount(document.grand_total)])
                writer.writerow([
                    'Amount in Words',
                    f"{document.grand_total_in_words} {cfg.MAJOR_UNIT_LABEL} Only"
                ])

        except OSError as e:
            raise RenderError(f"CSV generation failed: {e}") from e
