"""
Amount in Words
Spells out rupee amounts using the Indian numbering groups
(Thousand, Lakh, Crore), e.g. 1250000 -> "Twelve Lakh Fifty Thousand".
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from . import invoice_config as cfg
from .exceptions import PreconditionError
from .models import to_money

ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# (group size, group name), largest first
GROUPS = [
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
]

Number = Union[int, float, str, Decimal]


def _spell(n: int) -> str:
    """Words for n > 0 (empty string for 0)."""
    if n == 0:
        return ""
    if n < 20:
        return ONES[n]
    if n < 100:
        tens, ones = divmod(n, 10)
        return TENS[tens] + (" " + ONES[ones] if ones else "")
    if n < 1000:
        hundreds, rest = divmod(n, 100)
        return ONES[hundreds] + " Hundred" + (" " + _spell(rest) if rest else "")
    for size, name in GROUPS:
        if n >= size:
            quotient, rest = divmod(n, size)
            return _spell(quotient) + " " + name + (" " + _spell(rest) if rest else "")
    return ""  # unreachable


def integer_to_words(n: int) -> str:
    """Spell a non-negative integer; 0 is "Zero"."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise PreconditionError(f"Expected a whole number, got {n!r}")
    if n < 0:
        raise PreconditionError(f"Cannot spell a negative number: {n}")
    return _spell(n) or "Zero"


def _to_decimal(amount: Number) -> Decimal:
    if isinstance(amount, bool):
        raise PreconditionError(f"Amount must be a number, got {amount!r}")
    try:
        value = Decimal(str(amount)) if isinstance(amount, float) else Decimal(amount)
    except (InvalidOperation, ValueError, TypeError):
        raise PreconditionError(f"Amount is not a number: {amount!r}")
    if not value.is_finite():
        raise PreconditionError(f"Amount must be finite, got {amount!r}")
    if value < 0:
        raise PreconditionError(f"Amount must not be negative, got {amount!r}")
    return value


def amount_in_words(amount: Number, minor_unit_label: str = None) -> str:
    """
    Spell a currency amount in words

    The rupee part is spelled with Indian grouping; paise (the fraction
    rounded to two digits) are appended as "and <words> Paise" when
    non-zero. An amount of zero is "Zero".

    Raises:
        PreconditionError: for negative, non-finite or non-numeric input
    """
    value = _to_decimal(amount)
    minor_unit_label = minor_unit_label or cfg.MINOR_UNIT_LABEL

    # to_money leaves exactly two fraction digits, so the coefficient is the paise count
    digits = to_money(value).as_tuple().digits
    rupees, paise = divmod(int("".join(map(str, digits))), 100)

    words = _spell(rupees)
    if paise:
        paise_words = _spell(paise) + " " + minor_unit_label
        words = f"{words} and {paise_words}" if words else paise_words
    return words or "Zero"
