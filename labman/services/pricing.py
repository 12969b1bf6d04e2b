"""
Product cost resolution over a catalog snapshot.

A product may derive from a parent product. Its effective bill of
materials is its own components plus everything inherited up the parent
chain, with quantities of the same material summed once. Labor, on the
other hand, is paid again at every level of the chain.

Every function here is pure: it reads through a CatalogBackend and never
touches the store. Dangling references (deleted material, deleted
parent) count as zero and are reported through the optional ``missing``
list; a parent chain that loops raises CyclicBOMError.

Usage:
    from labman.services.pricing import compute_product_price, find_duplicate

    price = compute_product_price(product, catalog)
    name = find_duplicate(components, parent_id, catalog, exclude_id=product.id)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from labman.exceptions import CyclicBOMError
from labman.protocols.catalog import (
    KIND_PRODUCT,
    CatalogBackend,
    Component,
    ProductInfo,
)
from labman.results import MissingReference, PriceBreakdown

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════
# PARENT CHAIN
# ══════════════════════════════════════════════════════════════


def _note_missing(missing, kind: str, ref_id: Any, referenced_by: Any) -> None:
    logger.debug(
        f"Missing {kind} {ref_id!r} referenced by {referenced_by!r}, counted as zero",
        extra={"kind": kind, "ref_id": ref_id, "referenced_by": referenced_by},
    )
    if missing is not None:
        missing.append(MissingReference(kind, ref_id, referenced_by))


def iter_ancestors(
    product: ProductInfo,
    catalog: CatalogBackend,
    *,
    missing: list[MissingReference] | None = None,
) -> Iterator[ProductInfo]:
    """
    Yield the parent, grandparent, ... of a product, nearest first.

    Stops at a root or at a parent id that does not resolve. Raises
    CyclicBOMError when the chain comes back to a product already seen.
    """
    chain = [product.id]
    seen = {product.id} if product.id is not None else set()
    current = product

    while current.base_id is not None:
        parent_id = current.base_id
        if parent_id in seen:
            chain.append(parent_id)
            logger.error(
                f"Cyclic parent chain for product {product.id!r}: {chain}",
                extra={"product": product.id, "chain": chain},
            )
            raise CyclicBOMError(product.id, chain)

        parent = catalog.get_product(parent_id)
        if parent is None:
            _note_missing(missing, "product", parent_id, current.id)
            return

        seen.add(parent_id)
        chain.append(parent_id)
        yield parent
        current = parent


# ══════════════════════════════════════════════════════════════
# FLATTENING
# ══════════════════════════════════════════════════════════════


def _merge_into(acc: list[Component], inherited: Iterable[Component]) -> None:
    """Add quantities to the first entry of the same material, else append."""
    for comp in inherited:
        for i, existing in enumerate(acc):
            if existing.material_id == comp.material_id:
                acc[i] = Component(
                    existing.material_id, existing.quantity + comp.quantity
                )
                break
        else:
            acc.append(Component(comp.material_id, comp.quantity))


def resolve_components(
    product: ProductInfo,
    catalog: CatalogBackend,
    *,
    missing: list[MissingReference] | None = None,
) -> list[Component]:
    """
    Flatten a product's bill of materials through its parent chain.

    Own components come first, in their stored order (not merged among
    themselves). Each ancestor's own components are then merged in,
    nearest ancestor first.
    """
    acc = [Component(c.material_id, c.quantity) for c in product.bom]
    for ancestor in iter_ancestors(product, catalog, missing=missing):
        _merge_into(acc, ancestor.bom)
    return acc


# ══════════════════════════════════════════════════════════════
# PRICES
# ══════════════════════════════════════════════════════════════


def compute_own_components_price(
    components: Iterable[Component],
    catalog: CatalogBackend,
    *,
    owner: Any = None,
    missing: list[MissingReference] | None = None,
) -> float:
    """Sum of unit_price x quantity; unknown materials contribute 0."""
    total = 0.0
    for comp in components:
        material = catalog.get_material(comp.material_id)
        if material is None:
            _note_missing(missing, "material", comp.material_id, owner)
            continue
        total += material.unit_price * comp.quantity
    return total


def compute_labor_total(
    product: ProductInfo,
    catalog: CatalogBackend,
    *,
    missing: list[MissingReference] | None = None,
) -> float:
    """Own labor plus the labor of every resolvable ancestor."""
    total = product.labor_price
    for ancestor in iter_ancestors(product, catalog, missing=missing):
        total += ancestor.labor_price
    return total


def compute_product_price(
    product: ProductInfo,
    catalog: CatalogBackend,
    *,
    missing: list[MissingReference] | None = None,
) -> float:
    """
    Total sale price of a product.

    Materials of the flattened BOM, counted once, plus the cumulative
    labor of the product and all its ancestors.
    """
    components = resolve_components(product, catalog, missing=missing)
    materials = compute_own_components_price(
        components, catalog, owner=product.id, missing=missing
    )
    # Missing parents were already reported while flattening.
    labor = compute_labor_total(product, catalog)
    return materials + labor


def price_breakdown(product: ProductInfo, catalog: CatalogBackend) -> PriceBreakdown:
    """Price a product and report every reference counted as zero."""
    missing: list[MissingReference] = []
    components = resolve_components(product, catalog, missing=missing)
    materials = compute_own_components_price(
        components, catalog, owner=product.id, missing=missing
    )
    labor = compute_labor_total(product, catalog)
    return PriceBreakdown(
        materials=materials,
        labor=labor,
        components=components,
        missing=missing,
    )


def draft_product(
    components: Iterable[Component],
    parent_id: Any = None,
    labor_price: float = 0.0,
    product_id: Any = None,
) -> ProductInfo:
    """Build a ProductInfo for a product that is not stored yet."""
    return ProductInfo(
        id=product_id,
        name="",
        kind=KIND_PRODUCT,
        parent_id=parent_id,
        components=tuple(components),
        labor_price=labor_price,
    )


def quote(
    components: Iterable[Component],
    parent_id: Any,
    labor_price: float,
    catalog: CatalogBackend,
) -> PriceBreakdown:
    """
    Price a draft product before it is saved.

    Equivalent to price_breakdown() on the stored product once saved.
    """
    components = list(components)
    draft = draft_product(components, parent_id, labor_price)
    missing: list[MissingReference] = []

    own = compute_own_components_price(components, catalog, missing=missing)
    inherited: list[Component] = []
    for ancestor in iter_ancestors(draft, catalog, missing=missing):
        _merge_into(inherited, ancestor.bom)
    inherited_price = compute_own_components_price(
        inherited, catalog, owner=parent_id, missing=missing
    )

    flattened = list(components)
    _merge_into(flattened, inherited)
    return PriceBreakdown(
        materials=own + inherited_price,
        labor=compute_labor_total(draft, catalog),
        components=flattened,
        missing=missing,
    )


# ══════════════════════════════════════════════════════════════
# DUPLICATES
# ══════════════════════════════════════════════════════════════


def normalize_components(
    components: Iterable[Component],
    parent_id: Any,
    catalog: CatalogBackend,
) -> list[Component]:
    """
    Canonical form of a bill of materials.

    Flattened through the parent chain, one entry per material, sorted
    by material id.
    """
    draft = draft_product(components, parent_id)
    merged: dict[Any, float] = {}
    for comp in resolve_components(draft, catalog):
        merged[comp.material_id] = merged.get(comp.material_id, 0.0) + comp.quantity
    return [Component(mid, qty) for mid, qty in sorted(merged.items(), key=lambda kv: kv[0])]


def same_composition(
    left: list[Component],
    right: list[Component],
    tolerance: float,
) -> bool:
    """Compare two canonical forms position by position."""
    if len(left) != len(right):
        return False
    return all(
        a.material_id == b.material_id and abs(a.quantity - b.quantity) < tolerance
        for a, b in zip(left, right)
    )


def find_duplicate(
    components: Iterable[Component],
    parent_id: Any,
    catalog: CatalogBackend,
    exclude_id: Any = None,
    *,
    tolerance: float | None = None,
) -> str | None:
    """
    Name of another product with the same effective composition, or None.

    Args:
        components:  Own components of the candidate.
        parent_id:   Candidate's parent product id (or None).
        catalog:     Catalog snapshot.
        exclude_id:  Id of the product being edited, never matched.
        tolerance:   Absolute quantity tolerance (LABMAN DUPLICATE_TOLERANCE).
    """
    if tolerance is None:
        from labman.conf import get_duplicate_tolerance

        tolerance = get_duplicate_tolerance()

    candidate = normalize_components(components, parent_id, catalog)

    for other in catalog.list_products():
        if other.is_service:
            continue
        if exclude_id is not None and other.id == exclude_id:
            continue
        existing = normalize_components(other.bom, other.base_id, catalog)
        if same_composition(candidate, existing, tolerance):
            return other.name
    return None
