"""
Structured Logging for the Invoice Engine
Provides rotating file logs with a component prefix and immediate flush
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from . import invoice_config as cfg


class InvoiceLogger:
    """Centralized logging with rotation and formatting"""

    def __init__(self, name="Invoice-Engine", log_dir=None, log_level=None):
        """
        Initialize logger with rotating file handlers

        Args:
            name: Logger name
            log_dir: Directory for log files (defaults to config LOG_DIR)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        log_level = (log_level or cfg.LOG_LEVEL).upper()
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, log_level, logging.INFO))

        # Clear any existing handlers
        self.logger.handlers.clear()
        self.logger.propagate = False

        log_path = Path(log_dir or cfg.LOG_DIR)
        log_path.mkdir(parents=True, exist_ok=True)

        log_format = logging.Formatter(
            '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # 1. Main rotating file handler
        main_handler = RotatingFileHandler(
            log_path / 'invoice_engine.log',
            maxBytes=cfg.LOG_FILE_MAX_MB * 1024 * 1024,
            backupCount=cfg.LOG_FILE_BACKUP_COUNT,
            encoding='utf-8'
        )
        main_handler.setLevel(logging.DEBUG)
        main_handler.setFormatter(log_format)
        self.logger.addHandler(main_handler)

        # 2. Error-only log file (5MB per file, keep 3 files)
        error_handler = RotatingFileHandler(
            log_path / 'errors.log',
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(log_format)
        self.logger.addHandler(error_handler)

        # 3. Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(log_format)
        self.logger.addHandler(console_handler)

    def debug(self, message, component=""):
        self._log(logging.DEBUG, message, component)

    def info(self, message, component=""):
        self._log(logging.INFO, message, component)

    def warning(self, message, component=""):
        self._log(logging.WARNING, message, component)

    def error(self, message, component="", exc_info=False):
        self._log(logging.ERROR, message, component, exc_info=exc_info)

    def _log(self, level, message, component="", exc_info=False):
        """Internal logging method with component prefix"""
        if component:
            message = f"[{component}] {message}"

        self.logger.log(level, message, exc_info=exc_info)

        for handler in self.logger.handlers:
            handler.flush()

    def log_invoice_built(self, invoice_number, line_count, grand_total):
        """Log a completed invoice computation"""
        self.info(
            f"Invoice {invoice_number} - Built with {line_count} line item(s), "
            f"grand total {grand_total}",
            component="InvoiceBuilder"
        )

    def log_reconciliation_mismatch(self, invoice_number, computed, persisted, difference):
        """Log a computed vs stored total disagreement"""
        self.warning(
            f"Invoice {invoice_number} - Computed total {computed} differs from "
            f"stored total {persisted} by {difference}",
            component="Reconciliation"
        )

    def log_export(self, invoice_number, success, detail):
        """Log an export outcome"""
        if success:
            self.info(f"Invoice {invoice_number} - Exported to {detail}", component="Export")
        else:
            self.error(f"Invoice {invoice_number} - Export failed: {detail}", component="Export")


# Global logger instance
_global_logger = None


def get_logger(log_level=None):
    """Get or create global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = InvoiceLogger(log_level=log_level)
    return _global_logger
