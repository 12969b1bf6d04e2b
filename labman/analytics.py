"""
Labman Analytics.

Dashboard figures for orders, invoices and raw material stock.
Uses aggregate() for O(1) memory SQL queries.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Q, Sum
from django.db.models.functions import Coalesce

from labman.models import (
    Invoice,
    InvoiceStatus,
    Order,
    OrderStatus,
    RawMaterial,
)


def _sum(field: str, **kwargs) -> Coalesce:
    return Coalesce(Sum(field, **kwargs), Decimal("0"), output_field=DecimalField())


class OrderAnalytics:
    """Analytics for orders."""

    @classmethod
    def summary(cls, date_from: date = None, date_to: date = None) -> dict[str, Any]:
        """
        Order counts and money in a single query.

        Cancelled orders are counted but excluded from every amount.

        Returns:
            {
                'total_orders': 150,
                'active_orders': 30,
                'new_orders': 10,
                'in_progress_orders': 12,
                'finished_orders': 8,
                'delivered_orders': 115,
                'cancelled_orders': 5,
                'revenue': 48200.0,
                'advances': 9100.0,
                'cas_total': 21000.0,
            }
        """
        qs = Order.objects.all()

        if date_from:
            qs = qs.filter(ordered_on__gte=date_from)
        if date_to:
            qs = qs.filter(ordered_on__lte=date_to)

        not_cancelled = ~Q(status=OrderStatus.CANCELLED)

        stats = qs.aggregate(
            total_orders=Count("id"),
            active_orders=Count(
                "id",
                filter=~Q(status__in=[OrderStatus.CANCELLED, OrderStatus.DELIVERED]),
            ),
            new_orders=Count("id", filter=Q(status=OrderStatus.NEW)),
            in_progress_orders=Count("id", filter=Q(status=OrderStatus.IN_PROGRESS)),
            finished_orders=Count("id", filter=Q(status=OrderStatus.FINISHED)),
            delivered_orders=Count("id", filter=Q(status=OrderStatus.DELIVERED)),
            cancelled_orders=Count("id", filter=Q(status=OrderStatus.CANCELLED)),
            revenue=_sum("total", filter=not_cancelled),
            advances=_sum("advance", filter=not_cancelled),
            cas_total=_sum("cas_value", filter=not_cancelled & Q(cas_value__gt=0)),
        )

        return {
            **{k: v for k, v in stats.items() if k.endswith("_orders")},
            "revenue": float(stats["revenue"]),
            "advances": float(stats["advances"]),
            "cas_total": float(stats["cas_total"]),
        }


class InvoiceAnalytics:
    """Analytics for invoices."""

    @classmethod
    def summary(cls, date_from: date = None, date_to: date = None) -> dict[str, Any]:
        """
        Returns:
            {
                'total_invoices': 80,
                'issued_invoices': 12,
                'paid_invoices': 66,
                'revenue': 51000.0,
                'outstanding': 3400.0,
            }
        """
        qs = Invoice.objects.all()

        if date_from:
            qs = qs.filter(issued_on__gte=date_from)
        if date_to:
            qs = qs.filter(issued_on__lte=date_to)

        stats = qs.aggregate(
            total_invoices=Count("id"),
            issued_invoices=Count("id", filter=Q(status=InvoiceStatus.ISSUED)),
            paid_invoices=Count("id", filter=Q(status=InvoiceStatus.PAID)),
            revenue=_sum("total", filter=~Q(status=InvoiceStatus.CANCELLED)),
            outstanding=_sum("balance_due", filter=Q(status=InvoiceStatus.ISSUED)),
        )

        return {
            "total_invoices": stats["total_invoices"],
            "issued_invoices": stats["issued_invoices"],
            "paid_invoices": stats["paid_invoices"],
            "revenue": float(stats["revenue"]),
            "outstanding": float(stats["outstanding"]),
        }


class MaterialAnalytics:
    """Analytics for raw material stock."""

    @classmethod
    def stock_value(cls) -> float:
        """Σ unit_price × stock over all raw materials."""
        stats = RawMaterial.objects.aggregate(
            value=Coalesce(
                Sum(
                    ExpressionWrapper(
                        F("unit_price") * F("stock"),
                        output_field=DecimalField(max_digits=24, decimal_places=7),
                    )
                ),
                Decimal("0"),
                output_field=DecimalField(),
            )
        )
        return float(stats["value"])
