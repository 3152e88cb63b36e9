"""
Invoice Engine
Builds GST tax invoices from stored storefront orders and exports them
as PDF or CSV documents.

Pipeline:
1. ItemNormalizer turns heterogeneous item payloads into NormalizedItems
2. TaxDecomposer unbundles GST from tax-inclusive prices
3. InvoiceBuilder assembles and reconciles the InvoiceDocument
4. DocumentExporter renders it (InvoicePdfRenderer / InvoiceCsvRenderer)
"""

from .amount_words import amount_in_words, integer_to_words
from .csv_renderer import InvoiceCsvRenderer
from .document_exporter import DocumentExporter
from .exceptions import (
    InvoiceEngineError,
    PreconditionError,
    RenderError,
    RendererUnavailableError,
)
from .field_resolver import resolve
from .invoice_builder import InvoiceBuilder, is_invoice_available
from .item_normalizer import ItemNormalizer
from .models import (
    BuyerDetails,
    ExportResult,
    InvoiceDocument,
    InvoiceLineItem,
    NormalizedItem,
    ReconciliationResult,
    SellerDetails,
    ShippingAddress,
)
from .pdf_renderer import InvoicePdfRenderer
from .renderer import InvoiceRenderer
from .tax_decomposer import TaxDecomposer

__version__ = "1.0.0"

__all__ = [
    "amount_in_words",
    "integer_to_words",
    "resolve",
    "is_invoice_available",
    "ItemNormalizer",
    "TaxDecomposer",
    "InvoiceBuilder",
    "DocumentExporter",
    "InvoiceRenderer",
    "InvoicePdfRenderer",
    "InvoiceCsvRenderer",
    "NormalizedItem",
    "InvoiceLineItem",
    "SellerDetails",
    "ShippingAddress",
    "BuyerDetails",
    "ReconciliationResult",
    "InvoiceDocument",
    "ExportResult",
    "InvoiceEngineError",
    "PreconditionError",
    "RendererUnavailableError",
    "RenderError",
]
