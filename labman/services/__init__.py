"""
Labman Services.

Business logic that doesn't belong in models:
- pricing: BOM flattening, product prices, duplicate detection
- catalog: Parent assignment checks
- orders: Order totals and atomic line replacement
- invoices: Invoice issuing from orders

The pricing and catalog helpers are re-exported here; orders and
invoices need the models and are imported from their own modules.
"""

from labman.services.catalog import (
    derived_products,
    parent_violation,
    validate_parent,
    would_create_cycle,
)
from labman.services.pricing import (
    compute_labor_total,
    compute_own_components_price,
    compute_product_price,
    find_duplicate,
    normalize_components,
    price_breakdown,
    quote,
    resolve_components,
)

__all__ = [
    "resolve_components",
    "compute_product_price",
    "compute_labor_total",
    "compute_own_components_price",
    "price_breakdown",
    "quote",
    "normalize_components",
    "find_duplicate",
    "parent_violation",
    "validate_parent",
    "would_create_cycle",
    "derived_products",
]
