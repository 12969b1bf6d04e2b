"""
Labman Result Types.

Structured results for pricing operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from labman.protocols.catalog import Component


@dataclass(frozen=True)
class MissingReference:
    """A material or parent product that could not be resolved."""

    kind: str  # "material" | "product"
    ref_id: Any
    referenced_by: Any = None


@dataclass
class PriceBreakdown:
    """
    Price of a product split into its parts.

    If is_complete=False: missing lists the references that were
    counted as zero.
    """

    materials: float
    labor: float
    components: list[Component] = field(default_factory=list)
    missing: list[MissingReference] = field(default_factory=list)

    @property
    def total(self) -> float:
        return self.materials + self.labor

    @property
    def is_complete(self) -> bool:
        return len(self.missing) == 0


@dataclass
class OrderTotal:
    """Recomputed order total with unresolved lines."""

    total: float
    missing: list[MissingReference] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return len(self.missing) == 0
