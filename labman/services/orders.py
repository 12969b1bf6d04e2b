"""
Order totals.

An order's total is Σ product price × line quantity. Lines and total are
always written together, inside one transaction holding the order row
lock, so a committed order never shows a total computed from other
lines than the ones stored.

Usage:
    from labman.services.orders import place_order, set_order_lines

    order = place_order(client, [{"product": p1.pk, "quantity": 2}])
    set_order_lines(order, [(p1.pk, 1), (p2.pk, 3)])
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable

from django.db import transaction

from labman.exceptions import LabError
from labman.models import Order, OrderLine
from labman.protocols.catalog import CatalogBackend
from labman.results import MissingReference, OrderTotal
from labman.services.pricing import compute_product_price

logger = logging.getLogger(__name__)

TOTAL_QUANTUM = Decimal("0.0001")


def order_total(
    lines: Iterable[tuple[Any, Decimal | float]],
    catalog: CatalogBackend,
) -> OrderTotal:
    """
    Sum price × quantity over (product_id, quantity) pairs.

    Each distinct product is priced once. Lines whose product no longer
    exists contribute 0 and are reported in OrderTotal.missing.
    """
    prices: dict[Any, float | None] = {}
    missing: list[MissingReference] = []
    total = 0.0

    for product_id, quantity in lines:
        if product_id not in prices:
            product = catalog.get_product(product_id)
            if product is None:
                logger.debug(
                    f"Order line references missing product {product_id!r}, counted as zero",
                    extra={"product": product_id},
                )
                missing.append(MissingReference("product", product_id))
                prices[product_id] = None
            else:
                prices[product_id] = compute_product_price(product, catalog, missing=missing)

        price = prices[product_id]
        if price is not None:
            total += price * float(quantity)

    return OrderTotal(total=total, missing=missing)


def _coerce_lines(lines) -> list[tuple[Any, Decimal, str]]:
    """Accept dicts ({"product", "quantity", "notes"}) or (product, quantity) pairs."""
    result = []
    for line in lines:
        if isinstance(line, dict):
            product = line["product"]
            quantity = line.get("quantity", 1)
            notes = line.get("notes", "") or ""
        else:
            product, quantity = line
            notes = ""
        product_id = getattr(product, "pk", product)
        quantity = Decimal(str(quantity))
        if quantity <= 0:
            raise LabError("INVALID_QUANTITY", product=product_id, quantity=float(quantity))
        result.append((product_id, quantity, notes))
    return result


def _as_decimal(total: float) -> Decimal:
    return Decimal(str(total)).quantize(TOTAL_QUANTUM)


def set_order_lines(
    order: Order,
    lines,
    *,
    catalog: CatalogBackend | None = None,
    user=None,
) -> OrderTotal:
    """
    Replace an order's lines and store the recomputed total.

    Args:
        order:   Order to update (the instance's total is refreshed).
        lines:   New lines, see _coerce_lines().
        catalog: Snapshot to price with; a fresh one is loaded if omitted.
        user:    Who made the change (for logging).

    Raises:
        LabError: ORDER_CANCELLED, INVALID_QUANTITY or PRODUCT_NOT_FOUND.
                  Nothing is written in that case.
    """
    coerced = _coerce_lines(lines)

    with transaction.atomic():
        locked = Order.objects.select_for_update().get(pk=order.pk)
        if locked.is_cancelled:
            raise LabError("ORDER_CANCELLED", order=locked.code)

        if catalog is None:
            from labman.conf import get_catalog

            catalog = get_catalog()

        for product_id, _quantity, _notes in coerced:
            if catalog.get_product(product_id) is None:
                raise LabError("PRODUCT_NOT_FOUND", product=product_id)

        result = order_total([(pid, qty) for pid, qty, _ in coerced], catalog)

        locked.lines.all().delete()
        OrderLine.objects.bulk_create(
            OrderLine(order=locked, product_id=pid, quantity=qty, notes=notes)
            for pid, qty, notes in coerced
        )
        locked.total = _as_decimal(result.total)
        locked.save(update_fields=["total", "updated_at"])

    order.total = locked.total
    order.updated_at = locked.updated_at

    logger.info(
        f"Order {locked.code}: {len(coerced)} lines, total {locked.total}",
        extra={
            "order": locked.pk,
            "code": locked.code,
            "lines": len(coerced),
            "total": float(locked.total),
            "user": user.username if user else None,
        },
    )
    return result


def place_order(
    client,
    lines,
    *,
    catalog: CatalogBackend | None = None,
    user=None,
    **fields,
) -> Order:
    """
    Create an order with its lines and computed total in one transaction.

    Extra keyword arguments are Order fields (technician, payment_method,
    advance, cas_value, estimated_delivery, notes...).
    """
    with transaction.atomic():
        order = Order.objects.create(client=client, **fields)
        set_order_lines(order, lines, catalog=catalog, user=user)
    return order


def recalculate_order(
    order: Order,
    *,
    catalog: CatalogBackend | None = None,
) -> OrderTotal:
    """
    Recompute the total from the stored lines (after catalog price edits).

    Lines whose product was deleted stay on the order and count as zero.
    """
    with transaction.atomic():
        locked = Order.objects.select_for_update().get(pk=order.pk)

        if catalog is None:
            from labman.conf import get_catalog

            catalog = get_catalog()

        result = order_total(locked.lines.values_list("product_id", "quantity"), catalog)
        locked.total = _as_decimal(result.total)
        locked.save(update_fields=["total", "updated_at"])

    order.total = locked.total
    if not result.is_complete:
        logger.warning(
            f"Order {locked.code}: {len(result.missing)} unresolved references in total",
            extra={"order": locked.pk, "missing": len(result.missing)},
        )
    return result
