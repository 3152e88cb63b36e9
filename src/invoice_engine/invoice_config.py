"""
Invoice Engine Configuration
Loads environment variables (and a project-level .env for local dev)
and provides defaults for tax, currency, seller and output settings.
"""

import os
import tempfile
from pathlib import Path

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Project root (two levels up from this file: src/invoice_engine/invoice_config.py)
# ---------------------------------------------------------------------------
ENGINE_ROOT = Path(__file__).parent
PROJECT_ROOT = ENGINE_ROOT.parent.parent

env_file = PROJECT_ROOT / ".env"
if env_file.exists():
    load_dotenv(env_file)


def get_writable_path(folder_name: str) -> str:
    """Get a writable folder that works locally and in read-only containers"""
    env_path = os.getenv(folder_name.upper() + "_DIR")
    if env_path:
        path = Path(env_path) if os.path.isabs(env_path) else PROJECT_ROOT / env_path
    else:
        path = PROJECT_ROOT / folder_name

    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except (PermissionError, OSError):
            path = Path(tempfile.gettempdir()) / "invoice_engine" / folder_name
            path.mkdir(parents=True, exist_ok=True)

    return str(path)


# ---------------------------------------------------------------------------
# Tax & currency
# ---------------------------------------------------------------------------
GST_RATE: str = os.getenv("GST_RATE", "0.18")
CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "₹")
# Core PDF fonts have no rupee glyph
PDF_CURRENCY_SYMBOL: str = os.getenv("PDF_CURRENCY_SYMBOL", "Rs. ")
MAJOR_UNIT_LABEL: str = os.getenv("MAJOR_UNIT_LABEL", "Rupees")
MINOR_UNIT_LABEL: str = os.getenv("MINOR_UNIT_LABEL", "Paise")

# Rounding tolerance (in rupees) when comparing computed vs stored totals
RECONCILIATION_TOLERANCE: str = os.getenv("RECONCILIATION_TOLERANCE", "0.01")

# ---------------------------------------------------------------------------
# Invoice identity
# ---------------------------------------------------------------------------
BRAND_NAME: str = os.getenv("BRAND_NAME", "SSFashions")
INVOICE_PREFIX: str = os.getenv("INVOICE_PREFIX", "SSF")
# 0 keeps the full order id
ORDER_ID_DISPLAY_LENGTH: int = int(os.getenv("ORDER_ID_DISPLAY_LENGTH", "8"))
DISPLAY_TIMEZONE: str = os.getenv("DISPLAY_TIMEZONE", "Asia/Kolkata")

# ---------------------------------------------------------------------------
# Seller block
# ---------------------------------------------------------------------------
SELLER_NAME: str = os.getenv("SELLER_NAME", "SS Fashions")
SELLER_TAGLINE: str = os.getenv("SELLER_TAGLINE", "Premium Clothing & Fashion Accessories")
SELLER_ADDRESS_LINE1: str = os.getenv("SELLER_ADDRESS_LINE1", "123 Fashion Street")
SELLER_ADDRESS_LINE2: str = os.getenv("SELLER_ADDRESS_LINE2", "Mumbai, Maharashtra 400001")
SELLER_PHONE: str = os.getenv("SELLER_PHONE", "+91 98765 43210")
SELLER_EMAIL: str = os.getenv("SELLER_EMAIL", "info@ssfashions.com")
SELLER_GSTIN: str = os.getenv("SELLER_GSTIN", "27AABCU9603R1Z5")
SELLER_STATE: str = os.getenv("SELLER_STATE", "Maharashtra")
SELLER_STATE_CODE: str = os.getenv("SELLER_STATE_CODE", "27")

INVOICE_TERMS = [
    term.strip()
    for term in os.getenv(
        "INVOICE_TERMS",
        "Goods once sold will not be taken back|"
        "All disputes subject to Mumbai jurisdiction|"
        "E. & O.E.",
    ).split("|")
    if term.strip()
]

# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------
PRODUCT_NAME_MAX_LENGTH: int = int(os.getenv("PRODUCT_NAME_MAX_LENGTH", "40"))
PREVIEW_ITEM_COUNT: int = int(os.getenv("PREVIEW_ITEM_COUNT", "4"))

# Public storage endpoint used to turn stored image paths into URLs
IMAGE_PUBLIC_BASE_URL: str = os.getenv("IMAGE_PUBLIC_BASE_URL", "")
IMAGE_BUCKET: str = os.getenv("IMAGE_BUCKET", "product-images")

# ---------------------------------------------------------------------------
# Output & logging
# ---------------------------------------------------------------------------
INVOICE_OUTPUT_DIR: str = get_writable_path("invoices")
LOG_DIR: str = os.getenv("LOG_DIR", str(PROJECT_ROOT / "logs"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE_MAX_MB: int = int(os.getenv("LOG_FILE_MAX_MB", "10"))
LOG_FILE_BACKUP_COUNT: int = int(os.getenv("LOG_FILE_BACKUP_COUNT", "5"))

ENABLE_AUDIT_LOGGING: bool = os.getenv("ENABLE_AUDIT_LOGGING", "false").lower() == "true"
AUDIT_LOG_DIR: str = os.getenv("AUDIT_LOG_DIR", str(PROJECT_ROOT / "logs" / "audit"))
AUDIT_LOG_MAX_MB: int = int(os.getenv("AUDIT_LOG_MAX_MB", "10"))
AUDIT_LOG_BACKUP_COUNT: int = int(os.getenv("AUDIT_LOG_BACKUP_COUNT", "5"))
