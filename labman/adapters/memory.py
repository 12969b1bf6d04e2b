"""
In-memory catalog snapshot.

Implements the CatalogBackend protocol over plain dicts. Used for drafts,
tests, and as the base of the ORM loader.

Usage:
    catalog = InMemoryCatalog(
        materials=[MaterialInfo(1, "Gips", 10.0)],
        products=[ProductInfo(1, "Orteza", components=(Component(1, 2),))],
    )
"""

from __future__ import annotations

from typing import Any, Iterable

from labman.protocols.catalog import MaterialInfo, ProductInfo


class InMemoryCatalog:
    """
    Read-only catalog snapshot.

    Products keep their insertion order in list_products().
    """

    def __init__(
        self,
        materials: Iterable[MaterialInfo] = (),
        products: Iterable[ProductInfo] = (),
    ):
        self._materials = {m.id: m for m in materials}
        self._products = {p.id: p for p in products}

    def get_material(self, material_id: Any) -> MaterialInfo | None:
        return self._materials.get(material_id)

    def get_product(self, product_id: Any) -> ProductInfo | None:
        return self._products.get(product_id)

    def list_products(self) -> list[ProductInfo]:
        return list(self._products.values())

    def list_materials(self) -> list[MaterialInfo]:
        return list(self._materials.values())

    def __len__(self) -> int:
        return len(self._products)
