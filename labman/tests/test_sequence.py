"""
Tests for CodeSequence (labman.models.sequence).

Verifies atomic code generation for orders and invoices.
"""

import pytest
from datetime import date

from labman.models import CodeSequence, Invoice, Order


# ═══════════════════════════════════════════════════════════════════
# CodeSequence
# ═══════════════════════════════════════════════════════════════════


class TestCodeSequence:
    """Tests for CodeSequence model."""

    def test_next_value_starts_at_1(self, db):
        """First call returns 1."""
        val = CodeSequence.next_value("TEST-PREFIX")
        assert val == 1

    def test_next_value_increments(self, db):
        """Subsequent calls increment."""
        v1 = CodeSequence.next_value("INC-PREFIX")
        v2 = CodeSequence.next_value("INC-PREFIX")
        v3 = CodeSequence.next_value("INC-PREFIX")

        assert (v1, v2, v3) == (1, 2, 3)

    def test_different_prefixes_independent(self, db):
        """Different prefixes have independent counters."""
        CodeSequence.next_value("FACT-2025")
        CodeSequence.next_value("FACT-2025")

        assert CodeSequence.next_value("FACT-2026") == 1

    def test_str_representation(self, db):
        CodeSequence.next_value("STR-PREFIX")
        seq = CodeSequence.objects.get(prefix="STR-PREFIX")

        assert "STR-PREFIX" in str(seq)
        assert "1" in str(seq)


# ═══════════════════════════════════════════════════════════════════
# Order / Invoice codes
# ═══════════════════════════════════════════════════════════════════


@pytest.mark.django_db
class TestCodeGeneration:
    def test_custom_order_code_preserved(self, client_record):
        order = Order.objects.create(client=client_record, code="CMD-MANUAL-1")

        assert order.code == "CMD-MANUAL-1"
        assert not CodeSequence.objects.filter(prefix="CMD").exists()

    def test_order_prefix_from_settings(self, client_record, settings):
        settings.LABMAN = {"ORDER_CODE_PREFIX": "ORD"}

        order = Order.objects.create(client=client_record)

        assert order.code.startswith("ORD-")
        assert order.code.endswith("-0001")

    def test_no_collision_on_many_orders(self, client_record):
        codes = {Order.objects.create(client=client_record).code for _ in range(10)}
        assert len(codes) == 10

    def test_invoice_code_uses_issue_year(self, client_record):
        order = Order.objects.create(client=client_record)

        invoice = Invoice.objects.create(
            order=order,
            client_last_name="Popescu",
            client_first_name="Ana",
            issued_on=date(2024, 6, 1),
        )

        assert invoice.code == "FACT-2024-0001"
        assert str(invoice) == "FACT-2024-0001"
