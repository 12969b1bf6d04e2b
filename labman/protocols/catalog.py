"""
Catalog Protocol: interface for raw materials and products.

The pricing resolver only reads through this protocol. Labman ships an
in-memory snapshot (labman.adapters.memory) and a Django ORM loader
(labman.adapters.orm); any other store can implement it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

KIND_PRODUCT = "product"
KIND_SERVICE = "service"


@dataclass(frozen=True)
class Component:
    """One raw material line of a bill of materials."""

    material_id: Any
    quantity: float


@dataclass(frozen=True)
class MaterialInfo:
    """Raw material as seen by the resolver."""

    id: Any
    name: str
    unit_price: float
    unit: str = "buc"
    stock: float = 0.0


@dataclass(frozen=True)
class ProductInfo:
    """
    Product or service as seen by the resolver.

    A service never inherits and never lists materials, whatever the
    stored data says: use ``bom`` and ``base_id`` instead of the raw
    fields when walking the graph.
    """

    id: Any
    name: str
    kind: str = KIND_PRODUCT
    description: str = ""
    parent_id: Any = None
    components: tuple[Component, ...] = field(default_factory=tuple)
    labor_price: float = 0.0

    @property
    def is_service(self) -> bool:
        return self.kind == KIND_SERVICE

    @property
    def bom(self) -> tuple[Component, ...]:
        """Own components (empty for services)."""
        if self.is_service:
            return ()
        return tuple(self.components)

    @property
    def base_id(self) -> Any:
        """Parent product id (None for services)."""
        if self.is_service:
            return None
        return self.parent_id


@runtime_checkable
class CatalogBackend(Protocol):
    """
    Protocol for catalog reads.

    Implementations should provide methods to:
    - Look up a material by id
    - Look up a product by id
    - List every product and service
    """

    def get_material(self, material_id: Any) -> MaterialInfo | None:
        """
        Get a raw material.

        Args:
            material_id: Material identifier

        Returns:
            MaterialInfo or None if not found
        """
        ...

    def get_product(self, product_id: Any) -> ProductInfo | None:
        """
        Get a product or service.

        Args:
            product_id: Product identifier

        Returns:
            ProductInfo or None if not found
        """
        ...

    def list_products(self) -> list[ProductInfo]:
        """
        List all products and services.

        Returns:
            List of ProductInfo
        """
        ...
