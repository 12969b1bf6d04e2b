"""
Tests for labman.analytics.

Verifies SQL aggregate-based dashboard figures.
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from labman.analytics import InvoiceAnalytics, MaterialAnalytics, OrderAnalytics
from labman.models import InvoiceStatus, OrderStatus
from labman.services.invoices import issue_invoice
from labman.services.orders import place_order


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def orders(db, client_record, base_product, derived_product):
    """Three orders (25, 38, 50), the last one cancelled."""
    first = place_order(client_record, [(base_product.pk, 1)], advance=Decimal("5"))
    second = place_order(
        client_record,
        [(derived_product.pk, 1)],
        cas_value=Decimal("30"),
        ordered_on=date.today() - timedelta(days=40),
    )
    third = place_order(client_record, [(base_product.pk, 2)], advance=Decimal("100"))
    second.set_status(OrderStatus.IN_PROGRESS)
    third.set_status(OrderStatus.CANCELLED)
    return [first, second, third]


# ═══════════════════════════════════════════════════════════════════
# OrderAnalytics
# ═══════════════════════════════════════════════════════════════════


class TestOrderSummary:
    def test_summary_empty(self, db):
        result = OrderAnalytics.summary()

        assert result["total_orders"] == 0
        assert result["active_orders"] == 0
        assert result["revenue"] == 0.0
        assert result["cas_total"] == 0.0

    def test_summary_with_data(self, orders):
        result = OrderAnalytics.summary()

        assert result["total_orders"] == 3
        assert result["active_orders"] == 2
        assert result["new_orders"] == 1
        assert result["in_progress_orders"] == 1
        assert result["cancelled_orders"] == 1
        # cancelled order excluded from money
        assert result["revenue"] == pytest.approx(63.0)
        assert result["advances"] == pytest.approx(5.0)
        assert result["cas_total"] == pytest.approx(30.0)

    def test_summary_date_filter(self, orders):
        result = OrderAnalytics.summary(date_from=date.today() - timedelta(days=7))

        assert result["total_orders"] == 2
        assert result["revenue"] == pytest.approx(25.0)

    def test_summary_single_query(self, orders, django_assert_num_queries):
        with django_assert_num_queries(1):
            OrderAnalytics.summary()


# ═══════════════════════════════════════════════════════════════════
# InvoiceAnalytics
# ═══════════════════════════════════════════════════════════════════


class TestInvoiceSummary:
    def test_paid_and_outstanding(self, orders):
        first, second, _ = orders
        paid = issue_invoice(first, vat_percent=0)
        issue_invoice(second, vat_percent=0)
        paid.set_status(InvoiceStatus.PAID)

        result = InvoiceAnalytics.summary()

        assert result["total_invoices"] == 2
        assert result["paid_invoices"] == 1
        assert result["issued_invoices"] == 1
        assert result["revenue"] == pytest.approx(63.0)
        # second: 38 - 30 CAS
        assert result["outstanding"] == pytest.approx(8.0)

    def test_cancelled_invoice_excluded(self, orders):
        invoice = issue_invoice(orders[0], vat_percent=0)
        invoice.set_status(InvoiceStatus.CANCELLED)

        result = InvoiceAnalytics.summary()

        assert result["revenue"] == 0.0
        assert result["outstanding"] == 0.0


# ═══════════════════════════════════════════════════════════════════
# MaterialAnalytics
# ═══════════════════════════════════════════════════════════════════


class TestStockValue:
    def test_stock_value(self, gips, velcro):
        # 10 x 50 + 4 x 20
        assert MaterialAnalytics.stock_value() == pytest.approx(580.0)
        assert gips.stock_value == Decimal("500")

    def test_empty(self, db):
        assert MaterialAnalytics.stock_value() == 0.0
