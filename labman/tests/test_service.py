"""
Tests for the Labman service facade (labman.lab).
"""

import pytest
from decimal import Decimal

from labman import CyclicBOMError, LabError, lab
from labman.adapters.memory import InMemoryCatalog
from labman.models import Product
from labman.protocols.catalog import Component, MaterialInfo, ProductInfo


class TestCatalogFacade:
    @pytest.fixture
    def catalog(self):
        return InMemoryCatalog(
            materials=[MaterialInfo(1, "Gips", 10.0)],
            products=[
                ProductInfo(1, "P1", components=(Component(1, 2),), labor_price=5),
                ProductInfo(2, "P2", parent_id=1, components=(Component(1, 1),), labor_price=3),
            ],
        )

    def test_price_with_explicit_catalog(self, catalog):
        assert lab.price(2, catalog=catalog).total == pytest.approx(38)

    def test_price_unknown_product(self, catalog):
        with pytest.raises(LabError) as exc_info:
            lab.price(404, catalog=catalog)
        assert exc_info.value.code == "PRODUCT_NOT_FOUND"

    def test_quote_accepts_pairs_and_dicts(self, catalog):
        breakdown = lab.quote([(1, 0.5), {"material": 1, "quantity": "0.5"}], parent=1, labor_price=3, catalog=catalog)
        assert breakdown.total == pytest.approx(38)

    def test_check_duplicate(self, catalog):
        assert lab.check_duplicate([(1, 3)], catalog=catalog) == "P2"
        assert lab.check_duplicate([(1, 3)], exclude=2, catalog=catalog) is None

    def test_empty_catalog_is_used_as_given(self):
        assert lab.quote([(1, 2)], catalog=InMemoryCatalog()).total == 0


@pytest.mark.django_db
class TestModelFacade:
    def test_price_of_model_instance(self, base_product, derived_product):
        breakdown = lab.price(derived_product)

        assert breakdown.total == pytest.approx(38)
        assert breakdown.is_complete

    def test_cyclic_product(self, base_product, derived_product):
        Product.objects.filter(pk=base_product.pk).update(parent_id=derived_product.pk)

        with pytest.raises(CyclicBOMError):
            lab.price(derived_product)

    def test_order_flow(self, client_record, base_product, derived_product):
        order = lab.place_order(client_record, [(base_product, 1)])
        assert order.total == Decimal("25.0000")

        result = lab.set_lines(order, [(derived_product, 2)])
        assert result.total == pytest.approx(76)

        invoice = lab.issue_invoice(order, vat_percent=0)
        assert invoice.total == Decimal("76.00")
        assert lab.recalculate(order).is_complete
