"""
Tests for GST decomposition, amount-in-words conversion and the
invoice display formatting helpers.
"""

import sys
import unittest
from datetime import datetime
from decimal import Decimal
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from invoice_engine.amount_words import amount_in_words, integer_to_words
from invoice_engine.exceptions import PreconditionError
from invoice_engine.formatting import (
    display_order_id,
    export_filename,
    format_amount,
    format_currency,
    format_invoice_date,
    group_indian,
    invoice_number,
    parse_timestamp,
    shipping_display,
    truncate_name,
)
from invoice_engine.models import NormalizedItem, to_money
from invoice_engine.tax_decomposer import TaxDecomposer


# ======================================================================
# Test: Tax Decomposer
# ======================================================================


class TestTaxDecomposer(unittest.TestCase):

    def setUp(self):
        self.decomposer = TaxDecomposer()

    def test_default_rate(self):
        self.assertEqual(self.decomposer.rate, Decimal("0.18"))

    def test_exact_split(self):
        excl, tax = self.decomposer.unit_breakdown(Decimal("590"))
        self.assertEqual(excl, Decimal("500"))
        self.assertEqual(tax, Decimal("90"))

    def test_inexact_split_sums_back_to_price(self):
        excl, tax = self.decomposer.unit_breakdown(Decimal("1000"))
        self.assertEqual(to_money(excl), Decimal("847.46"))
        self.assertEqual(to_money(tax), Decimal("152.54"))
        self.assertEqual(excl + tax, Decimal("1000"))
        self.assertAlmostEqual(float(excl * Decimal("1.18")), 1000.0, places=6)

    def test_line_values_scale_with_quantity(self):
        line = self.decomposer.decompose(
            NormalizedItem(name="Cotton Kurta", unit_price=Decimal("590"), quantity=2, size="M"),
            serial_no=3,
        )
        self.assertEqual(line.serial_no, 3)
        self.assertEqual(line.line_total_incl_tax, Decimal("1180"))
        self.assertEqual(line.line_tax_total, Decimal("180"))
        self.assertEqual(line.line_total_excl_tax, Decimal("1000"))
        self.assertEqual(line.size, "M")

    def test_zero_price_item(self):
        line = self.decomposer.decompose(NormalizedItem(unit_price=Decimal("0")))
        self.assertEqual(line.tax_per_unit, Decimal("0"))
        self.assertEqual(line.line_total_incl_tax, Decimal("0"))

    def test_zero_rate(self):
        excl, tax = TaxDecomposer(0).unit_breakdown(Decimal("250"))
        self.assertEqual(excl, Decimal("250"))
        self.assertEqual(tax, Decimal("0"))

    def test_alternative_rates(self):
        self.assertEqual(TaxDecomposer("0.05").rate, Decimal("0.05"))
        self.assertEqual(TaxDecomposer(0.12).rate, Decimal("0.12"))
        excl, tax = TaxDecomposer("0.05").unit_breakdown(Decimal("105"))
        self.assertEqual(excl, Decimal("100"))
        self.assertEqual(tax, Decimal("5"))

    def test_invalid_rates_raise(self):
        for bad in (-0.18, "-1", "abc", "NaN", True):
            with self.subTest(rate=bad):
                with self.assertRaises(PreconditionError):
                    TaxDecomposer(bad)

    def test_precondition_error_is_value_error(self):
        with self.assertRaises(ValueError):
            TaxDecomposer(-1)


# ======================================================================
# Test: Amount in Words
# ======================================================================


class TestAmountInWords(unittest.TestCase):

    def test_zero(self):
        self.assertEqual(amount_in_words(0), "Zero")
        self.assertEqual(integer_to_words(0), "Zero")

    def test_small_numbers(self):
        self.assertEqual(integer_to_words(7), "Seven")
        self.assertEqual(integer_to_words(15), "Fifteen")
        self.assertEqual(integer_to_words(40), "Forty")
        self.assertEqual(integer_to_words(99), "Ninety Nine")
        self.assertEqual(integer_to_words(115), "One Hundred Fifteen")

    def test_indian_grouping(self):
        self.assertEqual(integer_to_words(1_000), "One Thousand")
        self.assertEqual(integer_to_words(100_000), "One Lakh")
        self.assertEqual(integer_to_words(10_000_000), "One Crore")
        self.assertEqual(integer_to_words(1_250_000), "Twelve Lakh Fifty Thousand")
        self.assertEqual(integer_to_words(99_999), "Ninety Nine Thousand Nine Hundred Ninety Nine")

    def test_large_crore_values(self):
        self.assertEqual(
            integer_to_words(1_234_567_890),
            "One Hundred Twenty Three Crore Forty Five Lakh Sixty Seven Thousand "
            "Eight Hundred Ninety",
        )

    def test_invoice_total(self):
        self.assertEqual(amount_in_words(Decimal("2180.00")), "Two Thousand One Hundred Eighty")

    def test_paise(self):
        self.assertEqual(
            amount_in_words(Decimal("2180.50")),
            "Two Thousand One Hundred Eighty and Fifty Paise",
        )
        self.assertEqual(amount_in_words("1.05"), "One and Five Paise")

    def test_paise_only(self):
        self.assertEqual(amount_in_words(Decimal("0.50")), "Fifty Paise")

    def test_paise_rounding_carries_into_rupees(self):
        self.assertEqual(amount_in_words(Decimal("999.999")), "One Thousand")

    def test_amount_beyond_default_precision(self):
        self.assertEqual(amount_in_words(10**27), "Ten Lakh Crore Crore Crore")
        self.assertEqual(amount_in_words(Decimal("1" + "0" * 27 + ".50")), "Ten Lakh Crore Crore Crore and Fifty Paise")

    def test_float_input(self):
        self.assertEqual(amount_in_words(12.5), "Twelve and Fifty Paise")

    def test_custom_minor_unit_label(self):
        self.assertEqual(amount_in_words("3.25", minor_unit_label="Cents"), "Three and Twenty Five Cents")

    def test_invalid_amounts_raise(self):
        for bad in (-1, Decimal("-0.01"), "NaN", "Infinity", float("inf"), "abc", True, None):
            with self.subTest(amount=bad):
                with self.assertRaises(PreconditionError):
                    amount_in_words(bad)

    def test_integer_to_words_rejects_non_integers(self):
        for bad in (-5, 2.5, True, "10"):
            with self.subTest(value=bad):
                with self.assertRaises(PreconditionError):
                    integer_to_words(bad)


# ======================================================================
# Test: Formatting
# ======================================================================


class TestFormatting(unittest.TestCase):

    ORDER_ID = "a1b2c3d4-e5f6-7890-abcd-ef1234567890"

    def test_display_order_id(self):
        self.assertEqual(display_order_id(self.ORDER_ID), "A1B2C3D4")
        self.assertEqual(display_order_id("abc"), "ABC")
        self.assertEqual(display_order_id(self.ORDER_ID, length=0), self.ORDER_ID.upper())
        self.assertEqual(display_order_id(None), "")

    def test_invoice_number_and_filename(self):
        self.assertEqual(invoice_number("A1B2C3D4"), "SSFA1B2C3D4")
        self.assertEqual(export_filename("A1B2C3D4", "pdf"), "SSFashions-Invoice-A1B2C3D4.pdf")
        self.assertEqual(export_filename("A1B2C3D4", ".csv"), "SSFashions-Invoice-A1B2C3D4.csv")

    def test_group_indian(self):
        self.assertEqual(group_indian("999"), "999")
        self.assertEqual(group_indian("1000"), "1,000")
        self.assertEqual(group_indian("100000"), "1,00,000")
        self.assertEqual(group_indian("1234567"), "12,34,567")
        self.assertEqual(group_indian("123456789"), "12,34,56,789")

    def test_format_amount(self):
        self.assertEqual(format_amount(Decimal("1234567.891")), "12,34,567.89")
        self.assertEqual(format_amount(Decimal("999")), "999.00")
        self.assertEqual(format_amount(Decimal("0.005")), "0.01")

    def test_very_large_amounts(self):
        self.assertEqual(str(to_money(Decimal("1e30"))), "1" + "0" * 30 + ".00")
        self.assertTrue(format_amount(Decimal("1e30")).endswith(",00,000.00"))

    def test_format_currency(self):
        self.assertEqual(format_currency(Decimal("2180")), "₹2,180.00")
        self.assertEqual(format_currency(Decimal("2180"), symbol="Rs. "), "Rs. 2,180.00")

    def test_shipping_display(self):
        self.assertEqual(shipping_display(Decimal("0")), "FREE")
        self.assertEqual(shipping_display(Decimal("49")), "₹49.00")

    def test_parse_timestamp(self):
        parsed = parse_timestamp("2025-03-05T10:00:00Z")
        self.assertIsNotNone(parsed.tzinfo)
        self.assertIsNone(parse_timestamp("yesterday"))
        self.assertIsNone(parse_timestamp(None))

    def test_format_invoice_date(self):
        self.assertEqual(format_invoice_date("2025-03-05T10:00:00Z"), "05 Mar 2025")
        self.assertEqual(format_invoice_date("2025-03-05"), "05 Mar 2025")
        self.assertEqual(format_invoice_date(datetime(2024, 12, 1, 9, 30)), "01 Dec 2024")

    def test_format_invoice_date_uses_display_timezone(self):
        # 20:00 UTC is 01:30 the next day in India
        self.assertEqual(format_invoice_date("2025-03-04T20:00:00+00:00"), "05 Mar 2025")
        self.assertEqual(format_invoice_date("2025-03-04T20:00:00+00:00", tz_name="UTC"), "04 Mar 2025")

    def test_format_invoice_date_unreadable(self):
        self.assertEqual(format_invoice_date("not a date"), "not a date")
        self.assertEqual(format_invoice_date(None), "")

    def test_truncate_name(self):
        self.assertEqual(truncate_name("Short name"), "Short name")
        self.assertEqual(truncate_name("x" * 40), "x" * 40)
        self.assertEqual(truncate_name("x" * 45), "x" * 40 + "...")
        self.assertEqual(truncate_name("abcdef", max_length=3), "abc...")


if __name__ == "__main__":
    unittest.main()
