"""
Labman Service - Thin wrapper over services and models.

Usage:
    from labman import lab, LabError

    # Catalog
    breakdown = lab.price(product)
    name = lab.check_duplicate([(gips.pk, 2)], parent=None, exclude=product)

    # Orders
    order = lab.place_order(client, [(product.pk, 1)], advance=100)
    lab.set_lines(order, [(product.pk, 2)])
    invoice = lab.issue_invoice(order)
"""

from typing import Any, Iterable

from labman.conf import get_access_backend, get_catalog
from labman.exceptions import LabError
from labman.protocols.catalog import Component
from labman.results import OrderTotal, PriceBreakdown
from labman.services import invoices, orders, pricing


def _pk(value: Any) -> Any:
    return getattr(value, "pk", value)


def _components(components: Iterable) -> list[Component]:
    result = []
    for comp in components:
        if isinstance(comp, Component):
            result.append(comp)
        elif isinstance(comp, dict):
            result.append(Component(_pk(comp["material"]), float(comp["quantity"])))
        else:
            material, quantity = comp
            result.append(Component(_pk(material), float(quantity)))
    return result


class Lab:
    """
    Main API for Labman (thin wrapper).

    Every pricing call takes a fresh catalog snapshot unless one is
    passed in.
    """

    # ══════════════════════════════════════════════════════════════
    # CATALOG
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def catalog(cls):
        return get_catalog()

    @classmethod
    def price(cls, product, catalog=None) -> PriceBreakdown:
        """
        Price a stored product.

        Raises:
            LabError: PRODUCT_NOT_FOUND
            CyclicBOMError: parent chain loops
        """
        if catalog is None:
            catalog = get_catalog()
        info = catalog.get_product(_pk(product))
        if info is None:
            raise LabError("PRODUCT_NOT_FOUND", product=_pk(product))
        return pricing.price_breakdown(info, catalog)

    @classmethod
    def quote(cls, components, parent=None, labor_price=0, catalog=None) -> PriceBreakdown:
        """Price a draft product that is not saved yet."""
        if catalog is None:
            catalog = get_catalog()
        return pricing.quote(_components(components), _pk(parent), float(labor_price), catalog)

    @classmethod
    def check_duplicate(cls, components, parent=None, exclude=None, catalog=None) -> str | None:
        """Name of an existing product with the same effective BOM, or None."""
        if catalog is None:
            catalog = get_catalog()
        return pricing.find_duplicate(
            _components(components),
            _pk(parent),
            catalog,
            exclude_id=_pk(exclude),
        )

    # ══════════════════════════════════════════════════════════════
    # ORDERS & INVOICES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def place_order(cls, client, lines, user=None, **fields):
        return orders.place_order(client, lines, user=user, **fields)

    @classmethod
    def set_lines(cls, order, lines, user=None) -> OrderTotal:
        return orders.set_order_lines(order, lines, user=user)

    @classmethod
    def recalculate(cls, order) -> OrderTotal:
        return orders.recalculate_order(order)

    @classmethod
    def issue_invoice(cls, order, user=None, **kwargs):
        return invoices.issue_invoice(order, user=user, **kwargs)

    # ══════════════════════════════════════════════════════════════
    # ACCESS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def allowed_modules(cls, user) -> frozenset[str]:
        backend = get_access_backend()
        if backend is None:
            return frozenset()
        return backend.allowed_modules(user)

    @classmethod
    def can_access(cls, user, module: str) -> bool:
        return module in cls.allowed_modules(user)
