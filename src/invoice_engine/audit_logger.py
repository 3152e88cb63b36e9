"""
Invoice Audit Logger
Audit trail of every invoice built and exported.
Structured JSON-lines format with file rotation.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from . import invoice_config as cfg
from .models import ExportResult, InvoiceDocument, to_money


class InvoiceAuditLogger:
    """Per-invoice audit logging for built and exported documents."""

    def __init__(
        self,
        log_dir: Optional[str] = None,
        max_mb: Optional[int] = None,
        backup_count: Optional[int] = None,
    ) -> None:
        self.log_dir = log_dir or cfg.AUDIT_LOG_DIR
        self.max_mb = max_mb or cfg.AUDIT_LOG_MAX_MB
        self.backup_count = backup_count or cfg.AUDIT_LOG_BACKUP_COUNT

        Path(self.log_dir).mkdir(parents=True, exist_ok=True)

        self._logger = self._create_logger()

    @property
    def log_path(self) -> str:
        return os.path.join(self.log_dir, "invoice_audit.log")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def log_invoice(self, document: InvoiceDocument) -> None:
        """Log a built invoice with its totals and reconciliation outcome."""
        reconciliation = document.reconciliation
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": "WARNING" if reconciliation.mismatch else "INFO",
            "type": "INVOICE_BUILT",
            "invoice_number": document.invoice_number,
            "order_id": document.order_id,
            "line_items": len(document.line_items),
            "subtotal_incl_tax": str(to_money(document.subtotal_incl_tax)),
            "total_tax": str(to_money(document.total_tax)),
            "shipping_cost": str(to_money(document.shipping_cost)),
            "grand_total": str(to_money(document.grand_total)),
            "reconciliation": reconciliation.to_dict(),
            "payment_status": document.payment_status,
            "customer_email_masked": self._mask_email(document.buyer.email),
        }
        self._logger.info(json.dumps(entry, ensure_ascii=False))

    def log_export(self, result: ExportResult, renderer: str = "") -> None:
        """Log the outcome of one export."""
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": "INFO" if result.success else "ERROR",
            "type": "INVOICE_EXPORT",
            "renderer": renderer,
            **result.to_dict(),
        }
        if result.success:
            self._logger.info(json.dumps(entry, ensure_ascii=False))
        else:
            self._logger.error(json.dumps(entry, ensure_ascii=False))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _create_logger(self) -> logging.Logger:
        """Create a structured rotating-file logger."""
        logger = logging.getLogger(f"invoice_engine_audit_{id(self)}")
        logger.setLevel(logging.DEBUG)
        logger.handlers.clear()
        logger.propagate = False

        handler = RotatingFileHandler(
            self.log_path,
            maxBytes=self.max_mb * 1024 * 1024,
            backupCount=self.backup_count,
            encoding="utf-8",
        )
        handler.setLevel(logging.DEBUG)
        # Entries are already structured JSON
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

        return logger

    def close(self) -> None:
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)

    @staticmethod
    def _mask_email(email: str) -> str:
        """Mask the local part of an email for privacy.

        Example: priya.sharma@example.com -> pr****@example.com
        """
        if not email or "@" not in email:
            return email
        local, _, domain = email.partition("@")
        return local[:2] + "****@" + domain


# Global audit logger instance (only when enabled in config)
_global_audit_logger = None


def get_audit_logger() -> Optional[InvoiceAuditLogger]:
    """Shared audit logger, or None when ENABLE_AUDIT_LOGGING is off"""
    global _global_audit_logger
    if not cfg.ENABLE_AUDIT_LOGGING:
        return None
    if _global_audit_logger is None:
        _global_audit_logger = InvoiceAuditLogger()
    return _global_audit_logger
