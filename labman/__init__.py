"""
Django Labman - Lab management with recursive product costing.

Raw materials, products derived from base products, clients, orders and
invoices for a small orthotics/dental lab.

Usage:
    from labman import lab, LabError

    # Pricing (materials once across the base chain, labor at every level)
    breakdown = lab.price(product)
    print(breakdown.total, breakdown.is_complete)

    # Duplicate BOM check before saving a product
    name = lab.check_duplicate([(gips.pk, 2)], parent=base, exclude=product)

    # Orders: lines and total are always stored together
    order = lab.place_order(client, [(product.pk, 1)])
    invoice = lab.issue_invoice(order)
"""

from labman.exceptions import CyclicBOMError, LabError


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("lab", "Lab"):
        from labman.service import Lab

        return Lab
    if name == "PriceBreakdown":
        from labman.results import PriceBreakdown

        return PriceBreakdown
    if name == "MissingReference":
        from labman.results import MissingReference

        return MissingReference
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["lab", "Lab", "LabError", "CyclicBOMError", "PriceBreakdown", "MissingReference"]
__version__ = "0.1.0"
