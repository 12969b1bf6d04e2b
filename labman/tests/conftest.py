"""
Shared fixtures for Labman tests.
"""

from decimal import Decimal

import pytest

from labman.conf import reset_access_backend


@pytest.fixture(autouse=True)
def _fresh_access_backend():
    reset_access_backend()
    yield
    reset_access_backend()


# ═══════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def gips(db):
    from labman.models import RawMaterial

    return RawMaterial.objects.create(
        name="Gips", unit_price=Decimal("10"), unit="kg", stock=Decimal("50")
    )


@pytest.fixture
def velcro(db):
    from labman.models import RawMaterial

    return RawMaterial.objects.create(
        name="Velcro", unit_price=Decimal("4"), unit="m", stock=Decimal("20")
    )


@pytest.fixture
def base_product(db, gips):
    """Gips x2, labor 5 -> price 25."""
    from labman.models import Product

    p = Product.objects.create(name="Orteza genunchi", labor_price=Decimal("5"))
    p.set_components([(gips.pk, 2)])
    return p


@pytest.fixture
def derived_product(db, gips, base_product):
    """Gips x1 on top of base_product, labor 3 -> price 38."""
    from labman.models import Product

    p = Product.objects.create(
        name="Orteza genunchi articulata",
        parent=base_product,
        labor_price=Decimal("3"),
    )
    p.set_components([(gips.pk, 1)])
    return p


@pytest.fixture
def service(db):
    from labman.models import Product, ProductKind

    return Product.objects.create(
        name="Ajustare", kind=ProductKind.SERVICE, labor_price=Decimal("40")
    )


# ═══════════════════════════════════════════════════════════════════
# People
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def client_record(db):
    from labman.models import Client

    return Client.objects.create(
        last_name="Popescu",
        first_name="Ana",
        national_id="2900101123456",
        phone="0722000000",
        address="Str. Lunga 1, Brasov",
    )
