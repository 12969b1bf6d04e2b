"""
Tests for catalog integrity (Product.clean, labman.services.catalog).
"""

import pytest
from decimal import Decimal

from django.core.exceptions import ValidationError

from labman.adapters.memory import InMemoryCatalog
from labman.adapters.orm import ModelCatalog
from labman.exceptions import CyclicBOMError
from labman.models import Product, ProductComponent, ProductKind, RawMaterial
from labman.protocols.catalog import KIND_PRODUCT, KIND_SERVICE, ProductInfo
from labman.services.catalog import (
    derived_products,
    kind_violation,
    parent_violation,
    would_create_cycle,
)
from labman.services.pricing import compute_product_price, resolve_components


# ═══════════════════════════════════════════════════════════════════
# Parent checks (no database)
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def tree():
    return InMemoryCatalog(
        products=[
            ProductInfo(1, "Root"),
            ProductInfo(2, "Child", parent_id=1),
            ProductInfo(3, "Grandchild", parent_id=2),
            ProductInfo(4, "Svc", kind=KIND_SERVICE),
        ]
    )


class TestParentViolation:
    def test_valid_parent(self, tree):
        assert parent_violation(3, KIND_PRODUCT, 1, tree) is None

    def test_no_parent(self, tree):
        assert parent_violation(3, KIND_PRODUCT, None, tree) is None

    def test_self_parent(self, tree):
        assert parent_violation(2, KIND_PRODUCT, 2, tree) == "SELF_PARENT"

    def test_missing_parent(self, tree):
        assert parent_violation(2, KIND_PRODUCT, 404, tree) == "PARENT_NOT_FOUND"

    def test_service_parent(self, tree):
        assert parent_violation(2, KIND_PRODUCT, 4, tree) == "PARENT_IS_SERVICE"

    def test_descendant_as_parent_is_a_cycle(self, tree):
        assert would_create_cycle(1, 3, tree) is True
        assert parent_violation(1, KIND_PRODUCT, 3, tree) == "PARENT_CYCLE"

    def test_new_product_cannot_cycle(self, tree):
        assert would_create_cycle(None, 3, tree) is False

    def test_service_ignores_parent(self, tree):
        assert parent_violation(4, KIND_SERVICE, 4, tree) is None

    def test_derived_products(self, tree):
        assert [p.id for p in derived_products(1, tree)] == [2]
        assert derived_products(3, tree) == []


class TestKindViolation:
    def test_base_product_cannot_become_service(self, tree):
        assert kind_violation(1, KIND_SERVICE, tree) == "HAS_DERIVED"
        assert kind_violation(2, KIND_SERVICE, tree) == "HAS_DERIVED"

    def test_leaf_can_become_service(self, tree):
        assert kind_violation(3, KIND_SERVICE, tree) is None

    def test_products_and_new_rows_always_pass(self, tree):
        assert kind_violation(1, KIND_PRODUCT, tree) is None
        assert kind_violation(None, KIND_SERVICE, tree) is None


# ═══════════════════════════════════════════════════════════════════
# Product model
# ═══════════════════════════════════════════════════════════════════


@pytest.mark.django_db
class TestProductModel:
    def test_cycle_rejected_on_save(self, base_product, derived_product):
        base_product.parent = derived_product

        with pytest.raises(ValidationError) as exc_info:
            base_product.save()

        assert exc_info.value.error_dict["parent"][0].code == "PARENT_CYCLE"
        base_product.refresh_from_db()
        assert base_product.parent_id is None

    def test_self_parent_rejected(self, base_product):
        base_product.parent_id = base_product.pk

        with pytest.raises(ValidationError) as exc_info:
            base_product.save()

        assert exc_info.value.error_dict["parent"][0].code == "SELF_PARENT"

    def test_service_parent_rejected(self, service):
        with pytest.raises(ValidationError) as exc_info:
            Product.objects.create(name="Orteza", parent=service)

        assert exc_info.value.error_dict["parent"][0].code == "PARENT_IS_SERVICE"

    def test_service_clears_parent_and_components(self, gips, base_product):
        svc = Product(name="Ajustare", kind=ProductKind.SERVICE, parent=base_product)
        svc.save()
        svc.set_components([(gips.pk, 2)])

        svc.refresh_from_db()
        assert svc.parent_id is None
        assert not svc.components.exists()

    def test_product_turned_service_loses_components(self, base_product):
        base_product.kind = ProductKind.SERVICE
        base_product.save()

        assert not ProductComponent.objects.filter(product=base_product).exists()

    def test_base_product_turned_service_rejected(self, base_product, derived_product):
        base_product.kind = ProductKind.SERVICE
        base_product.labor_price = Decimal("100")

        with pytest.raises(ValidationError) as exc_info:
            base_product.save()

        assert exc_info.value.error_dict["kind"][0].code == "HAS_DERIVED"
        base_product.refresh_from_db()
        assert base_product.kind == ProductKind.PRODUCT
        assert base_product.components.count() == 1
        assert derived_product.as_info().parent_id == base_product.pk

    def test_component_quantity_must_be_positive(self, gips, base_product):
        with pytest.raises(ValidationError):
            base_product.set_components([(gips.pk, 0)])

        # Previous components untouched
        assert base_product.components.count() == 1

    def test_negative_labor_rejected(self):
        with pytest.raises(ValidationError):
            Product.objects.create(name="Gresit", labor_price=Decimal("-1"))

    def test_as_info(self, gips, derived_product, base_product):
        info = derived_product.as_info()

        assert info.id == derived_product.pk
        assert info.parent_id == base_product.pk
        assert info.labor_price == 3.0
        assert [(c.material_id, c.quantity) for c in info.components] == [(gips.pk, 1.0)]

    def test_history_is_recorded(self, base_product):
        base_product.labor_price = Decimal("7")
        base_product.save()

        assert base_product.history.count() == 2
        assert base_product.history.first().labor_price == Decimal("7")


# ═══════════════════════════════════════════════════════════════════
# ORM catalog snapshot
# ═══════════════════════════════════════════════════════════════════


@pytest.mark.django_db
class TestModelCatalog:
    def test_snapshot_prices(self, base_product, derived_product):
        catalog = ModelCatalog.load()

        assert compute_product_price(catalog.get_product(base_product.pk), catalog) == pytest.approx(25)
        assert compute_product_price(catalog.get_product(derived_product.pk), catalog) == pytest.approx(38)

    def test_snapshot_is_not_live(self, gips, base_product):
        catalog = ModelCatalog.load()
        RawMaterial.objects.filter(pk=gips.pk).update(unit_price=Decimal("100"))

        assert catalog.get_material(gips.pk).unit_price == 10.0
        assert ModelCatalog.load().get_material(gips.pk).unit_price == 100.0

    def test_deleted_material_counts_as_zero(self, gips, velcro, base_product):
        base_product.set_components([(gips.pk, 2), (velcro.pk, 1)])
        velcro.delete()

        catalog = ModelCatalog.load()
        assert compute_product_price(catalog.get_product(base_product.pk), catalog) == pytest.approx(25)

    def test_deleted_parent_counts_as_root(self, gips, base_product, derived_product):
        Product.objects.filter(pk=base_product.pk).delete()

        catalog = ModelCatalog.load()
        info = catalog.get_product(derived_product.pk)
        assert info.parent_id == base_product.pk
        assert resolve_components(info, catalog) == list(info.components)
        assert compute_product_price(info, catalog) == pytest.approx(13)

    def test_cycle_written_behind_validation_raises(self, base_product, derived_product):
        Product.objects.filter(pk=base_product.pk).update(parent_id=derived_product.pk)

        catalog = ModelCatalog.load()
        with pytest.raises(CyclicBOMError):
            resolve_components(catalog.get_product(base_product.pk), catalog)
