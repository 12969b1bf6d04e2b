"""
Django ORM catalog loader.

Loads RawMaterial, Product and ProductComponent rows into an immutable
snapshot. The resolver never sees model instances.

Configuration (default):
    LABMAN = {
        "CATALOG_LOADER": "labman.adapters.orm.load_catalog",
    }
"""

from __future__ import annotations

import logging
from collections import defaultdict

from labman.adapters.memory import InMemoryCatalog
from labman.protocols.catalog import Component, MaterialInfo, ProductInfo

logger = logging.getLogger(__name__)


def material_info(material) -> MaterialInfo:
    """Convert a RawMaterial into a MaterialInfo."""
    return MaterialInfo(
        id=material.pk,
        name=material.name,
        unit_price=float(material.unit_price),
        unit=material.unit,
        stock=float(material.stock),
    )


def product_info(product, components=None) -> ProductInfo:
    """
    Convert a Product into a ProductInfo.

    Args:
        product:    Product instance.
        components: Pre-fetched (material_id, quantity) pairs; read from
                    product.components when omitted.
    """
    if components is None:
        components = product.components.values_list("material_id", "quantity")
    return ProductInfo(
        id=product.pk,
        name=product.name,
        kind=product.kind,
        description=product.description,
        parent_id=product.parent_id,
        components=tuple(Component(mid, float(qty)) for mid, qty in components),
        labor_price=float(product.labor_price),
    )


class ModelCatalog(InMemoryCatalog):
    """
    Snapshot of the catalog tables.

    Three queries, whatever the size of the catalog. Take a new snapshot
    before price-sensitive operations (placing an order, issuing an
    invoice).
    """

    @classmethod
    def load(cls) -> "ModelCatalog":
        from labman.models import Product, ProductComponent, RawMaterial

        materials = [material_info(m) for m in RawMaterial.objects.all()]

        by_product = defaultdict(list)
        rows = ProductComponent.objects.order_by("product_id", "id").values_list(
            "product_id", "material_id", "quantity"
        )
        for product_id, material_id, quantity in rows:
            by_product[product_id].append((material_id, quantity))

        products = [
            product_info(p, by_product.get(p.pk, ()))
            for p in Product.objects.order_by("id")
        ]

        logger.debug(
            f"Catalog snapshot loaded: {len(materials)} materials, {len(products)} products",
            extra={"materials": len(materials), "products": len(products)},
        )
        return cls(materials=materials, products=products)


def load_catalog() -> ModelCatalog:
    """Default CATALOG_LOADER."""
    return ModelCatalog.load()
