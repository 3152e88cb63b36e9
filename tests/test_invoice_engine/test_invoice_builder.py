"""
Tests for the Invoice Builder: totals, reconciliation, buyer details and
the audit trail.
"""

import json
import os
import sys
import tempfile
import unittest
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from invoice_engine.audit_logger import InvoiceAuditLogger, get_audit_logger
from invoice_engine.exceptions import PreconditionError
from invoice_engine.invoice_builder import (
    InvoiceBuilder,
    default_seller,
    is_invoice_available,
    parse_shipping_address,
)
from invoice_engine.models import SellerDetails, to_money

ORDER_ID = "9f3c2a1b-7d4e-4f6a-8b2c-1e5d9a0b7c3f"


def _sample_order(**overrides):
    """Two items written by different generations of the checkout."""
    order = {
        "id": ORDER_ID,
        "created_at": "2025-03-05T10:15:00Z",
        "customer_name": "Priya Sharma",
        "customer_email": "priya.sharma@example.com",
        "customer_phone": "+91 90000 11111",
        "shipping_address": json.dumps({
            "firstName": "Priya",
            "lastName": "Sharma",
            "address": "12 MG Road",
            "city": "Pune",
            "state": "Maharashtra",
            "zipCode": "411001",
            "country": "India",
        }),
        "items": json.dumps([
            {"name": "Cotton Kurta", "price": 590, "quantity": 2, "size": "M", "color": "Blue"},
            {"product": {"name": "Silk Saree", "price": "1000"}, "qty": 1},
        ]),
        "subtotal": 2180,
        "shipping_cost": 0,
        "total": 2180,
        "status": "delivered",
        "payment_status": "paid",
    }
    order.update(overrides)
    return order


class TestInvoiceBuilder(unittest.TestCase):

    def setUp(self):
        self.builder = InvoiceBuilder()

    def test_worked_example(self):
        doc = self.builder.build(_sample_order())

        self.assertEqual(len(doc.line_items), 2)
        first, second = doc.line_items

        self.assertEqual(first.serial_no, 1)
        self.assertEqual(first.line_total_incl_tax, Decimal("1180"))
        self.assertEqual(first.line_tax_total, Decimal("180"))

        self.assertEqual(second.serial_no, 2)
        self.assertEqual(second.name, "Silk Saree")
        self.assertEqual(to_money(second.line_total_incl_tax), Decimal("1000.00"))
        self.assertEqual(to_money(second.line_tax_total), Decimal("152.54"))

        self.assertEqual(doc.subtotal_incl_tax, Decimal("2180"))
        self.assertEqual(to_money(doc.total_tax), Decimal("332.54"))
        self.assertEqual(to_money(doc.subtotal_excl_tax), Decimal("1847.46"))
        self.assertEqual(doc.grand_total, Decimal("2180"))
        self.assertTrue(doc.is_free_shipping)
        self.assertEqual(doc.grand_total_in_words, "Two Thousand One Hundred Eighty")
        self.assertEqual(doc.reconciliation.status, "OK")

    def test_totals_invariants(self):
        doc = self.builder.build(_sample_order(shipping_cost="99"))
        self.assertEqual(doc.grand_total, doc.subtotal_incl_tax + doc.shipping_cost)
        self.assertEqual(doc.subtotal_incl_tax - doc.total_tax, doc.subtotal_excl_tax)
        self.assertEqual(
            doc.subtotal_incl_tax,
            sum(line.line_total_incl_tax for line in doc.line_items),
        )

    def test_identity_fields(self):
        doc = self.builder.build(_sample_order())
        self.assertEqual(doc.order_id, ORDER_ID)
        self.assertEqual(doc.display_order_id, "9F3C2A1B")
        self.assertEqual(doc.invoice_number, "SSF9F3C2A1B")
        self.assertEqual(doc.order_date_display, "05 Mar 2025")
        self.assertEqual(doc.status, "delivered")
        self.assertEqual(doc.payment_status, "paid")
        self.assertEqual(doc.tax_rate_percent, "18")

    def test_seller_block_from_config(self):
        doc = self.builder.build(_sample_order())
        self.assertEqual(doc.seller, default_seller())
        self.assertEqual(doc.seller.name, "SS Fashions")
        self.assertEqual(doc.seller.gstin, "27AABCU9603R1Z5")
        self.assertEqual(doc.seller.state_code, "27")

    def test_custom_seller(self):
        seller = SellerDetails(name="Test Store", gstin="29ABCDE1234F1Z5")
        doc = InvoiceBuilder(seller=seller).build(_sample_order())
        self.assertEqual(doc.seller.name, "Test Store")

    def test_buyer_details(self):
        buyer = self.builder.build(_sample_order()).buyer
        self.assertEqual(buyer.name, "Priya Sharma")
        self.assertEqual(buyer.email, "priya.sharma@example.com")
        self.assertEqual(buyer.phone, "+91 90000 11111")
        address = buyer.shipping_address
        self.assertEqual(address.recipient, "Priya Sharma")
        self.assertEqual(address.address, "12 MG Road")
        self.assertEqual(address.locality_line, "Pune, Maharashtra 411001")
        self.assertEqual(address.country, "India")

    def test_missing_phone_is_none(self):
        order = _sample_order()
        del order["customer_phone"]
        self.assertIsNone(self.builder.build(order).buyer.phone)

    def test_shipping_cost_adds_to_total(self):
        doc = self.builder.build(_sample_order(shipping_cost=99, total=2279))
        self.assertFalse(doc.is_free_shipping)
        self.assertEqual(doc.grand_total, Decimal("2279"))
        self.assertEqual(doc.reconciliation.status, "OK")

    def test_missing_shipping_cost_treated_as_zero(self):
        order = _sample_order()
        del order["shipping_cost"]
        self.assertEqual(self.builder.build(order).shipping_cost, Decimal("0"))

    def test_zero_items(self):
        doc = self.builder.build(_sample_order(items=[], total=0))
        self.assertEqual(doc.line_items, ())
        self.assertEqual(doc.subtotal_incl_tax, Decimal("0"))
        self.assertEqual(doc.total_tax, Decimal("0"))
        self.assertEqual(doc.grand_total, Decimal("0"))
        self.assertEqual(doc.grand_total_in_words, "Zero")

    def test_malformed_items_do_not_fail_the_build(self):
        doc = self.builder.build(_sample_order(items="{not json", total=None))
        self.assertEqual(doc.line_items, ())
        self.assertEqual(doc.grand_total, Decimal("0"))

    def test_deeply_nested_items_text_does_not_fail_the_build(self):
        doc = self.builder.build(_sample_order(items="[" * 100_000, total=None))
        self.assertEqual(doc.line_items, ())
        self.assertEqual(doc.grand_total, Decimal("0"))

    def test_very_large_price_is_totalled_and_spelled(self):
        doc = self.builder.build(_sample_order(items=[{"name": "Heirloom", "price": "1e30"}], total=None))
        self.assertEqual(doc.grand_total, Decimal("1e30"))
        self.assertEqual(doc.grand_total_in_words, "One Hundred Crore Crore Crore Crore")
        self.assertEqual(doc.to_dict()["grand_total"], "1" + "0" * 30 + ".00")

    def test_item_without_price_contributes_zero(self):
        doc = self.builder.build(_sample_order(items=[{"name": "Gift Wrap"}], total=None))
        self.assertEqual(doc.line_items[0].line_total_incl_tax, Decimal("0"))
        self.assertEqual(doc.grand_total, Decimal("0"))

    def test_reconciliation_mismatch_flagged(self):
        with patch.object(self.builder.logger, "log_reconciliation_mismatch") as log_mismatch:
            doc = self.builder.build(_sample_order(total=2000))
        self.assertTrue(doc.reconciliation.mismatch)
        self.assertEqual(doc.reconciliation.status, "MISMATCH")
        self.assertEqual(doc.reconciliation.difference, Decimal("180"))
        # The freshly computed total stays authoritative
        self.assertEqual(doc.grand_total, Decimal("2180"))
        log_mismatch.assert_called_once()

    def test_reconciliation_within_tolerance(self):
        doc = self.builder.build(_sample_order(total="2180.01"))
        self.assertFalse(doc.reconciliation.mismatch)

    def test_reconciliation_without_stored_total(self):
        order = _sample_order()
        del order["total"]
        doc = self.builder.build(order)
        self.assertIsNone(doc.reconciliation.persisted_total)
        self.assertEqual(doc.reconciliation.status, "UNAVAILABLE")
        self.assertFalse(doc.reconciliation.mismatch)

    def test_custom_tax_rate(self):
        doc = InvoiceBuilder(tax_rate="0.05").build(
            _sample_order(items=[{"name": "Scarf", "price": 105}], total=105)
        )
        self.assertEqual(doc.total_tax, Decimal("5"))
        self.assertEqual(doc.tax_rate_percent, "5")

    def test_negative_tax_rate_rejected(self):
        with self.assertRaises(PreconditionError):
            InvoiceBuilder(tax_rate="-0.18")

    def test_build_is_repeatable(self):
        order = _sample_order()
        first = self.builder.build(order).to_dict()
        second = self.builder.build(order).to_dict()
        self.assertEqual(first, second)

    def test_to_dict_contract(self):
        d = self.builder.build(_sample_order()).to_dict()
        self.assertEqual(d["invoice_number"], "SSF9F3C2A1B")
        self.assertEqual(d["grand_total"], "2180.00")
        self.assertEqual(d["total_tax"], "332.54")
        self.assertEqual(d["subtotal_excl_tax"], "1847.46")
        self.assertEqual(d["line_items"][1]["tax_per_unit"], "152.54")
        self.assertEqual(d["reconciliation"]["status"], "OK")
        self.assertEqual(d["buyer"]["shipping_address"]["city"], "Pune")


class TestShippingAddress(unittest.TestCase):

    def test_structured_record(self):
        address = parse_shipping_address({"name": "Ravi", "street": "4 Park Lane", "zip": "560001"})
        self.assertEqual(address.recipient, "Ravi")
        self.assertEqual(address.address, "4 Park Lane")
        self.assertEqual(address.zip_code, "560001")

    def test_unreadable_text(self):
        self.assertIsNone(parse_shipping_address("{oops"))

    def test_deeply_nested_text(self):
        self.assertIsNone(parse_shipping_address('{"a":' * 100_000))
        doc = InvoiceBuilder().build(_sample_order(shipping_address='{"a":' * 100_000))
        self.assertIsNone(doc.buyer.shipping_address)

    def test_empty_values(self):
        self.assertIsNone(parse_shipping_address(None))
        self.assertIsNone(parse_shipping_address(""))
        self.assertIsNone(parse_shipping_address({}))
        self.assertIsNone(parse_shipping_address("[1, 2]"))
        self.assertIsNone(parse_shipping_address({"firstName": "Only A Name"}))

    def test_unreadable_address_does_not_fail_build(self):
        doc = InvoiceBuilder().build(_sample_order(shipping_address="{oops"))
        self.assertIsNone(doc.buyer.shipping_address)
        self.assertEqual(doc.buyer.name, "Priya Sharma")


class TestInvoiceAvailability(unittest.TestCase):

    def test_paid_orders(self):
        self.assertTrue(is_invoice_available({"payment_status": "paid"}))
        self.assertTrue(is_invoice_available({"payment_status": " PAID "}))

    def test_unpaid_orders(self):
        self.assertFalse(is_invoice_available({"payment_status": "pending"}))
        self.assertFalse(is_invoice_available({"payment_status": "failed"}))
        self.assertFalse(is_invoice_available({}))


class TestAuditTrail(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.audit = InvoiceAuditLogger(log_dir=self.tmpdir.name)

    def tearDown(self):
        self.audit.close()
        self.tmpdir.cleanup()

    def _entries(self):
        with open(self.audit.log_path, encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]

    def test_built_invoice_is_audited(self):
        InvoiceBuilder(audit_logger=self.audit).build(_sample_order(total=2000))
        entries = self._entries()
        self.assertEqual(len(entries), 1)
        entry = entries[0]
        self.assertEqual(entry["type"], "INVOICE_BUILT")
        self.assertEqual(entry["level"], "WARNING")
        self.assertEqual(entry["invoice_number"], "SSF9F3C2A1B")
        self.assertEqual(entry["grand_total"], "2180.00")
        self.assertEqual(entry["reconciliation"]["status"], "MISMATCH")
        self.assertEqual(entry["customer_email_masked"], "pr****@example.com")

    def test_email_masking(self):
        self.assertEqual(InvoiceAuditLogger._mask_email("ab@x.in"), "ab****@x.in")
        self.assertEqual(InvoiceAuditLogger._mask_email(""), "")
        self.assertEqual(InvoiceAuditLogger._mask_email("no-at-sign"), "no-at-sign")

    def test_audit_disabled_by_default(self):
        with patch("invoice_engine.invoice_config.ENABLE_AUDIT_LOGGING", False):
            self.assertIsNone(get_audit_logger())
            self.assertIsNone(InvoiceBuilder().audit_logger)

    def test_log_file_created(self):
        self.assertTrue(os.path.isdir(self.tmpdir.name))
        InvoiceBuilder(audit_logger=self.audit).build(_sample_order())
        self.assertTrue(os.path.exists(self.audit.log_path))


if __name__ == "__main__":
    unittest.main()
