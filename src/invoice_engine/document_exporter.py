"""
Document Exporter
Hands a built InvoiceDocument to a renderer and reports the outcome.

Exports are all-or-nothing: the renderer writes to a temporary file in the
output folder which is moved into place only after rendering succeeds, so
a failed export never leaves a partial artifact behind. Failures are
returned as an ExportResult, never raised.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from typing import Optional

from . import invoice_config as cfg
from .audit_logger import InvoiceAuditLogger, get_audit_logger
from .exceptions import RenderError, RendererUnavailableError
from .formatting import export_filename
from .logger import get_logger
from .models import ExportResult, InvoiceDocument
from .pdf_renderer import InvoicePdfRenderer
from .renderer import InvoiceRenderer


class DocumentExporter:
    """Exports invoice documents through a pluggable renderer."""

    def __init__(
        self,
        renderer: Optional[InvoiceRenderer] = None,
        output_dir: Optional[str] = None,
        audit_logger: Optional[InvoiceAuditLogger] = None,
    ) -> None:
        self.renderer = renderer or InvoicePdfRenderer()
        self.output_dir = output_dir or cfg.INVOICE_OUTPUT_DIR
        self.audit_logger = audit_logger if audit_logger is not None else get_audit_logger()
        self.logger = get_logger()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def export(self, document: InvoiceDocument) -> ExportResult:
        """Render ``document`` to ``<BRAND>-Invoice-<orderId>.<ext>``."""
        filename = export_filename(document.display_order_id, self.renderer.extension)
        result = ExportResult(invoice_number=document.invoice_number, filename=filename)

        try:
            os.makedirs(self.output_dir, exist_ok=True)
            result.path = self._render_atomically(document, filename)
        except RendererUnavailableError as e:
            result.error = str(e)
            result.error_code = "RENDERER_UNAVAILABLE"
        except (RenderError, OSError) as e:
            result.error = str(e)
            result.error_code = "RENDER_FAILED"
        except Exception as e:
            # Third-party renderers may raise anything; the caller still gets a result
            result.error = f"{type(e).__name__}: {e}"
            result.error_code = "RENDER_FAILED"

        self.logger.log_export(
            document.invoice_number,
            result.success,
            result.path if result.success else f"{result.error_code} - {result.error}",
        )
        if self.audit_logger:
            self.audit_logger.log_export(result, renderer=self.renderer.name)
        return result

    async def export_async(self, document: InvoiceDocument) -> ExportResult:
        """Run export() in a worker thread so the event loop is never blocked."""
        return await asyncio.to_thread(self.export, document)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _render_atomically(self, document: InvoiceDocument, filename: str) -> str:
        final_path = os.path.join(self.output_dir, filename)
        fd, tmp_path = tempfile.mkstemp(
            prefix=".tmp-", suffix=f".{self.renderer.extension}", dir=self.output_dir
        )
        os.close(fd)
        try:
            self.renderer.render(document, tmp_path)
            os.replace(tmp_path, final_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        return final_path
