"""
Invoice Formatting Helpers
Display conventions shared by the builder and the renderers: invoice
numbers, filenames, Indian digit grouping and invoice dates.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from . import invoice_config as cfg
from .models import to_money


def display_order_id(order_id: Any, length: Optional[int] = None) -> str:
    """Short, upper-cased order reference shown to customers (first 8 chars)."""
    length = cfg.ORDER_ID_DISPLAY_LENGTH if length is None else length
    text = str(order_id or "").strip()
    if length > 0:
        text = text[:length]
    return text.upper()


def invoice_number(display_id: str, prefix: Optional[str] = None) -> str:
    prefix = cfg.INVOICE_PREFIX if prefix is None else prefix
    return f"{prefix}{display_id}"


def export_filename(display_id: str, extension: str, brand: Optional[str] = None) -> str:
    """<brand>-Invoice-<orderId>.<ext>"""
    brand = cfg.BRAND_NAME if brand is None else brand
    return f"{brand}-Invoice-{display_id}.{extension.lstrip('.')}"


def group_indian(digits: str) -> str:
    """Insert Indian thousands separators: 1234567 -> 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_amount(value: Decimal) -> str:
    """2-decimal amount with Indian grouping, no symbol: 123456.5 -> 1,23,456.50"""
    money = to_money(value)
    sign = "-" if money < 0 else ""
    whole, _, fraction = f"{money.copy_abs():.2f}".partition(".")
    return f"{sign}{group_indian(whole)}.{fraction}"


def format_currency(value: Decimal, symbol: Optional[str] = None) -> str:
    symbol = cfg.CURRENCY_SYMBOL if symbol is None else symbol
    return f"{symbol}{format_amount(value)}"


def shipping_display(shipping_cost: Decimal, symbol: Optional[str] = None) -> str:
    """An explicit zero shipping charge is shown as FREE."""
    if shipping_cost == 0:
        return "FREE"
    return format_currency(shipping_cost, symbol)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as stored on orders; None when unreadable."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_invoice_date(value: Any, tz_name: Optional[str] = None) -> str:
    """
    Day, abbreviated month, 4-digit year: '05 Mar 2025'

    Timestamps carrying an offset are shown in the display timezone.
    Unreadable values are returned as text rather than raising.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return str(value).strip() if value is not None else ""

    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(ZoneInfo(tz_name or cfg.DISPLAY_TIMEZONE))
        except ZoneInfoNotFoundError:
            pass
    return parsed.strftime("%d %b %Y")


def truncate_name(name: str, max_length: Optional[int] = None) -> str:
    """Shorten long product names for the items table."""
    max_length = cfg.PRODUCT_NAME_MAX_LENGTH if max_length is None else max_length
    if len(name) <= max_length:
        return name
    return name[:max_length] + "..."
