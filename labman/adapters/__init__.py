"""
Labman Adapters.

Implementations of protocols for external systems.
Adapters use lazy imports: model-backed adapters only touch the
database when you actually call them.
"""

from labman.adapters.memory import InMemoryCatalog
from labman.adapters.orm import ModelCatalog, load_catalog
from labman.adapters.groups import GroupAccessBackend

__all__ = [
    # Catalog adapters
    "InMemoryCatalog",
    "ModelCatalog",
    "load_catalog",
    # Access adapters
    "GroupAccessBackend",
]
