"""
Tests for duplicate bill-of-materials detection (labman.services.pricing).
"""

import pytest

from labman.adapters.memory import InMemoryCatalog
from labman.protocols.catalog import KIND_SERVICE, Component, MaterialInfo, ProductInfo
from labman.services.pricing import find_duplicate, normalize_components, same_composition

M1, M2, M3 = 1, 2, 3


@pytest.fixture
def materials():
    return [
        MaterialInfo(M1, "Gips", 10.0),
        MaterialInfo(M2, "Rasina", 2.5),
        MaterialInfo(M3, "Velcro", 4.0),
    ]


@pytest.fixture
def catalog(materials):
    return InMemoryCatalog(
        materials=materials,
        products=[
            ProductInfo(1, "Orteza", components=(Component(M1, 2), Component(M2, 1))),
            ProductInfo(2, "Orteza articulata", parent_id=1, components=(Component(M3, 1),)),
            ProductInfo(3, "Ajustare", kind=KIND_SERVICE, labor_price=40),
        ],
    )


class TestNormalize:
    def test_sorted_by_material_id_and_merged(self, catalog):
        result = normalize_components(
            [Component(M3, 1), Component(M1, 1), Component(M1, 0.5)], None, catalog
        )
        assert result == [Component(M1, 1.5), Component(M3, 1)]

    def test_includes_parent_chain(self, catalog):
        result = normalize_components([Component(M3, 1)], 1, catalog)
        assert result == [Component(M1, 2), Component(M2, 1), Component(M3, 1)]

    def test_same_composition_length_mismatch(self):
        assert same_composition([Component(M1, 1)], [], 0.001) is False


class TestFindDuplicate:
    def test_same_components_found(self, catalog):
        assert find_duplicate([Component(M2, 1), Component(M1, 2)], None, catalog) == "Orteza"

    def test_different_quantities_not_found(self, catalog):
        assert find_duplicate([Component(M1, 3), Component(M2, 1)], None, catalog) is None

    def test_flat_candidate_matches_derived_product(self, catalog):
        """Effective composition counts, not how it is split across the chain."""
        name = find_duplicate(
            [Component(M1, 2), Component(M2, 1), Component(M3, 1)], None, catalog
        )
        assert name == "Orteza articulata"

    def test_derived_candidate_matches_flat_product(self, materials):
        catalog = InMemoryCatalog(
            materials=materials,
            products=[
                ProductInfo(1, "Base", components=(Component(M1, 1),)),
                ProductInfo(2, "Flat", components=(Component(M1, 3),)),
            ],
        )
        assert find_duplicate([Component(M1, 2)], 1, catalog) == "Flat"

    def test_exclude_product_being_edited(self, catalog):
        components = [Component(M1, 2), Component(M2, 1)]
        assert find_duplicate(components, None, catalog, exclude_id=1) is None

    def test_symmetry(self, materials):
        x = ProductInfo(1, "X", components=(Component(M1, 2), Component(M2, 1)))
        y = ProductInfo(2, "Y", components=(Component(M2, 1.0004), Component(M1, 2)))
        catalog = InMemoryCatalog(materials, [x, y])

        assert find_duplicate(y.components, y.parent_id, catalog, exclude_id=y.id) == "X"
        assert find_duplicate(x.components, x.parent_id, catalog, exclude_id=x.id) == "Y"

    def test_services_never_match(self, materials):
        svc = ProductInfo(1, "Ajustare", kind=KIND_SERVICE, components=(Component(M1, 5),))
        catalog = InMemoryCatalog(materials, [svc])
        assert find_duplicate([Component(M1, 5)], None, catalog) is None

    def test_labor_only_products_match_each_other(self, materials):
        a = ProductInfo(1, "Consult A", labor_price=5)
        b = ProductInfo(2, "Consult B", labor_price=7)
        catalog = InMemoryCatalog(materials, [a, b])

        assert find_duplicate([], None, catalog, exclude_id=2) == "Consult A"
        assert find_duplicate([], None, catalog, exclude_id=1) == "Consult B"

    def test_empty_candidate_does_not_match_a_bom(self, materials):
        catalog = InMemoryCatalog(materials, [ProductInfo(1, "Orteza", components=(Component(M1, 1),))])
        assert find_duplicate([], None, catalog) is None

    def test_empty_candidate_does_not_match_services(self, materials):
        catalog = InMemoryCatalog(materials, [ProductInfo(1, "Ajustare", kind=KIND_SERVICE, labor_price=40)])
        assert find_duplicate([], None, catalog) is None

    def test_missing_material_ids_still_compared(self, materials):
        catalog = InMemoryCatalog(materials, [ProductInfo(1, "Old", components=(Component(404, 1),))])
        assert find_duplicate([Component(404, 1)], None, catalog) == "Old"


class TestTolerance:
    @pytest.fixture
    def single(self, materials):
        return InMemoryCatalog(materials, [ProductInfo(1, "Gips 2", components=(Component(M1, 2.0),))])

    def test_just_outside_tolerance(self, single):
        assert find_duplicate([Component(M1, 2.0011)], None, single) is None

    def test_just_inside_tolerance(self, single):
        assert find_duplicate([Component(M1, 2.0009)], None, single) == "Gips 2"

    def test_explicit_tolerance(self, single):
        assert find_duplicate([Component(M1, 2.05)], None, single, tolerance=0.1) == "Gips 2"

    def test_tolerance_from_settings(self, single, settings):
        settings.LABMAN = {"DUPLICATE_TOLERANCE": 0.5}
        assert find_duplicate([Component(M1, 2.3)], None, single) == "Gips 2"
