"""
Invoice issuing.

Builds an invoice from an order: one line per product still in the
catalog, priced by the resolver at issue time, then VAT and the balance
left after the advance and the CAS decision.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.utils import timezone

from labman.exceptions import LabError
from labman.models import Invoice, InvoiceLine, InvoiceStatus, Order
from labman.protocols.catalog import CatalogBackend
from labman.services.pricing import compute_product_price

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _cents(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def active_invoice(order: Order) -> Invoice | None:
    """The order's invoice that is not cancelled, if any."""
    return order.invoices.exclude(status=InvoiceStatus.CANCELLED).first()


def issue_invoice(
    order: Order,
    *,
    vat_percent: Decimal | int | float | None = None,
    issued_on: date | None = None,
    due_on: date | None = None,
    notes: str = "",
    catalog: CatalogBackend | None = None,
    user=None,
) -> Invoice:
    """
    Issue the invoice of an order.

    Args:
        order:       Order to invoice.
        vat_percent: VAT rate (LABMAN DEFAULT_VAT_PERCENT if omitted).
        issued_on:   Issue date (today if omitted).
        due_on:      Due date (issued_on + INVOICE_DUE_DAYS if omitted).
        notes:       Free text printed on the invoice.
        catalog:     Snapshot to price with; a fresh one is loaded if omitted.
        user:        Who issued it (for logging).

    Raises:
        LabError: ORDER_CANCELLED, or INVOICE_EXISTS if the order already
                  has an invoice that is not cancelled.
    """
    from labman.conf import get_setting

    with transaction.atomic():
        order = Order.objects.select_for_update().select_related("client").get(pk=order.pk)

        if order.is_cancelled:
            raise LabError("ORDER_CANCELLED", order=order.code)

        existing = active_invoice(order)
        if existing is not None:
            raise LabError("INVOICE_EXISTS", order=order.code, invoice=existing.code)

        if catalog is None:
            from labman.conf import get_catalog

            catalog = get_catalog()

        if vat_percent is None:
            vat_percent = get_setting("DEFAULT_VAT_PERCENT")
        vat = Decimal(str(vat_percent))
        issued_on = issued_on or timezone.localdate()
        if due_on is None:
            due_on = issued_on + timedelta(days=int(get_setting("INVOICE_DUE_DAYS")))

        lines = []
        for line in order.lines.all():
            product = catalog.get_product(line.product_id)
            if product is None:
                logger.warning(
                    f"Order {order.code}: product {line.product_id} no longer exists, left off invoice",
                    extra={"order": order.pk, "product": line.product_id},
                )
                continue
            unit_price = _cents(compute_product_price(product, catalog))
            lines.append(
                InvoiceLine(
                    name=product.name,
                    quantity=line.quantity,
                    unit_price=unit_price,
                    total=_cents(unit_price * line.quantity),
                )
            )

        subtotal = sum((line.total for line in lines), Decimal("0"))
        vat_total = _cents(subtotal * vat / Decimal("100"))
        total = subtotal + vat_total
        balance_due = max(total - order.advance - order.cas_value, Decimal("0"))

        client = order.client
        invoice = Invoice.objects.create(
            order=order,
            order_code=order.code,
            client_last_name=client.last_name,
            client_first_name=client.first_name,
            client_national_id=client.national_id,
            client_phone=client.phone,
            client_email=client.email,
            client_address=client.address,
            subtotal=subtotal,
            vat_percent=vat,
            vat_total=vat_total,
            total=total,
            payment_method=order.payment_method,
            advance=order.advance,
            cas_value=order.cas_value,
            balance_due=balance_due,
            issued_on=issued_on,
            due_on=due_on,
            notes=notes,
        )
        for line in lines:
            line.invoice = invoice
        InvoiceLine.objects.bulk_create(lines)

    logger.info(
        f"Invoice {invoice.code} issued for order {order.code}: total {invoice.total}",
        extra={
            "invoice": invoice.pk,
            "code": invoice.code,
            "order": order.pk,
            "total": float(invoice.total),
            "user": user.username if user else None,
        },
    )
    return invoice
