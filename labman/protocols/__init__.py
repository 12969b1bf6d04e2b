"""
Labman Protocols.

Defines interfaces for external integrations.
"""

from labman.protocols.catalog import (
    KIND_PRODUCT,
    KIND_SERVICE,
    CatalogBackend,
    Component,
    MaterialInfo,
    ProductInfo,
)
from labman.protocols.access import AccessBackend

__all__ = [
    # Catalog Protocol
    "CatalogBackend",
    # Catalog types
    "Component",
    "MaterialInfo",
    "ProductInfo",
    "KIND_PRODUCT",
    "KIND_SERVICE",
    # Access Protocol
    "AccessBackend",
]
