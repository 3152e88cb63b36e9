"""
Field Resolver
Pulls a named field out of an open, untyped record by trying an ordered
list of candidate key paths and coercing the first usable value.

Key paths are dotted strings ("product.name") or tuples of keys. A miss,
a wrong type or a failed coercion simply moves on to the next candidate;
when nothing matches the caller's default is returned.
"""

from __future__ import annotations

import json
import math
from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Tuple, Union

KeyPath = Union[str, Sequence[str]]

_MISSING = object()


def _split_path(path: KeyPath) -> Tuple[str, ...]:
    if isinstance(path, str):
        return tuple(part for part in path.split(".") if part)
    return tuple(path)


def lookup(record: Any, path: KeyPath) -> Any:
    """Walk ``path`` through nested mappings; return a sentinel on any miss."""
    current = record
    for key in _split_path(path):
        if not isinstance(current, Mapping) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, tuple, list, dict)):
        return len(value) == 0
    return False


def resolve(
    record: Any,
    candidate_keys: Iterable[KeyPath],
    coerce: Optional[Callable[[Any], Any]] = None,
    default: Any = None,
) -> Any:
    """Return the first candidate whose coerced value is present and non-empty.

    Args:
        record: Raw record (anything; non-mappings resolve to ``default``).
        candidate_keys: Key paths in priority order.
        coerce: Conversion applied to each raw value. Defaults to ``as_text``.
        default: Returned when no candidate yields a usable value.
    """
    coerce = coerce or as_text
    for path in candidate_keys:
        raw = lookup(record, path)
        if raw is _MISSING or _is_empty(raw):
            continue
        try:
            value = coerce(raw)
        except (ValueError, TypeError, ArithmeticError):
            continue
        if not _is_empty(value):
            return value
    return default


# ---------------------------------------------------------------------------
# Coercers
# ---------------------------------------------------------------------------

def as_text(value: Any) -> Optional[str]:
    """Strings are stripped; plain numbers become their text form."""
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    return None


def as_amount(value: Any) -> Optional[Decimal]:
    """Convert to a finite, non-negative Decimal, returning None otherwise.

    Accepts numbers and numeric text such as "1,299.00" or "₹590".
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        amount = Decimal(str(value))
    elif isinstance(value, (int, Decimal)):
        amount = Decimal(value)
    elif isinstance(value, str):
        cleaned = value.replace(",", "").replace("₹", "").strip()
        if not cleaned:
            return None
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            return None
    else:
        return None

    if not amount.is_finite() or amount < 0:
        return None
    return amount


def as_positive_int(value: Any) -> Optional[int]:
    """Convert to an integer >= 1 (fractions are floored)."""
    amount = as_amount(value)
    if amount is None:
        return None
    whole = int(amount.to_integral_value(rounding=ROUND_FLOOR))
    return whole if whole >= 1 else None


def _clean_images(values: Iterable[Any]) -> Tuple[str, ...]:
    return tuple(v.strip() for v in values if isinstance(v, str) and v.strip())


def _load_json(text: str) -> Any:
    """json.loads that treats any unreadable text (incl. runaway nesting) as None."""
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def as_image_sequence(value: Any) -> Optional[Tuple[str, ...]]:
    """Multi-image fields: only a sequence (or JSON array text) counts."""
    if isinstance(value, str):
        text = value.strip()
        if not text.startswith("["):
            return None
        value = _load_json(text)
    if isinstance(value, (list, tuple)):
        return _clean_images(value) or None
    return None


def as_image_list(value: Any) -> Optional[Tuple[str, ...]]:
    """Sequence -> cleaned tuple of non-blank strings; single string -> 1-tuple.

    Text holding a JSON array (an older checkout stored images that way)
    is unpacked as a sequence.
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.startswith("["):
            parsed = _load_json(text)
            if isinstance(parsed, list):
                return _clean_images(parsed) or None
        return (text,)
    if isinstance(value, (list, tuple)):
        return _clean_images(value) or None
    return None


def as_mapping(value: Any) -> Optional[Mapping]:
    """Mappings pass through; JSON object text is decoded."""
    if isinstance(value, Mapping):
        return value
    if isinstance(value, str):
        parsed = _load_json(value)
        if isinstance(parsed, Mapping):
            return parsed
    return None
