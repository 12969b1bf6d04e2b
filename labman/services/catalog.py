"""
Catalog integrity checks.

The pricing resolver assumes the parent graph is a forest. These checks
keep it that way at the moment a parent is assigned.
"""

from __future__ import annotations

from typing import Any

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from labman.protocols.catalog import KIND_SERVICE, CatalogBackend, ProductInfo

PARENT_MESSAGES = {
    "SELF_PARENT": _("A product cannot be its own base product."),
    "PARENT_NOT_FOUND": _("The base product does not exist."),
    "PARENT_IS_SERVICE": _("A service cannot be used as a base product."),
    "PARENT_CYCLE": _("This base product would create a cycle."),
    "HAS_DERIVED": _("A base product of other products cannot become a service."),
}


def would_create_cycle(product_id: Any, parent_id: Any, catalog: CatalogBackend) -> bool:
    """
    True if linking product_id -> parent_id closes a loop.

    Walks up from the proposed parent. Reaching product_id, or any
    product twice, means a cycle. A dangling id ends the walk.
    """
    seen = set()
    current_id = parent_id
    while current_id is not None:
        if product_id is not None and current_id == product_id:
            return True
        if current_id in seen:
            return True
        seen.add(current_id)
        current = catalog.get_product(current_id)
        if current is None:
            return False
        current_id = current.base_id
    return False


def parent_violation(
    product_id: Any,
    kind: str,
    parent_id: Any,
    catalog: CatalogBackend,
) -> str | None:
    """
    Error code for an invalid parent assignment, or None if allowed.

    Services ignore their parent, so any value is accepted for them.
    """
    if parent_id is None or kind == KIND_SERVICE:
        return None
    if product_id is not None and parent_id == product_id:
        return "SELF_PARENT"
    parent = catalog.get_product(parent_id)
    if parent is None:
        return "PARENT_NOT_FOUND"
    if parent.is_service:
        return "PARENT_IS_SERVICE"
    if would_create_cycle(product_id, parent_id, catalog):
        return "PARENT_CYCLE"
    return None


def validate_parent(
    product_id: Any,
    kind: str,
    parent_id: Any,
    catalog: CatalogBackend,
    field: str = "parent",
) -> None:
    """Raise ValidationError if the parent assignment is not allowed."""
    code = parent_violation(product_id, kind, parent_id, catalog)
    if code is not None:
        raise ValidationError({field: ValidationError(PARENT_MESSAGES[code], code=code)})


def derived_products(product_id: Any, catalog: CatalogBackend) -> list[ProductInfo]:
    """Products whose direct parent is product_id."""
    return [p for p in catalog.list_products() if p.base_id == product_id]


def kind_violation(product_id: Any, kind: str, catalog: CatalogBackend) -> str | None:
    """
    Error code for an invalid kind change, or None if allowed.

    A product that other products derive from must stay a product.
    """
    if kind != KIND_SERVICE or product_id is None:
        return None
    if any(p.id != product_id for p in derived_products(product_id, catalog)):
        return "HAS_DERIVED"
    return None


def validate_kind(product_id: Any, kind: str, catalog: CatalogBackend, field: str = "kind") -> None:
    """Raise ValidationError if the product cannot take this kind."""
    code = kind_violation(product_id, kind, catalog)
    if code is not None:
        raise ValidationError({field: ValidationError(PARENT_MESSAGES[code], code=code)})
