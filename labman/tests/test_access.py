"""
Tests for module access (AccessGroup, GroupAccessBackend, Lab.can_access).
"""

import pytest

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ValidationError

from labman import Lab
from labman.adapters.groups import GroupAccessBackend
from labman.conf import get_access_backend, reset_access_backend
from labman.models import AccessGroup, Module
from labman.protocols.access import AccessBackend

User = get_user_model()


@pytest.fixture
def user(db):
    return User.objects.create_user(username="tehnician", password="test123")


@pytest.fixture
def reception(db):
    return AccessGroup.objects.create(name="Receptie", modules=[Module.ORDERS, Module.CLIENTS])


@pytest.fixture
def workshop(db):
    return AccessGroup.objects.create(name="Atelier", modules=[Module.ORDERS, Module.PRODUCTS])


class TestAccessGroup:
    def test_unknown_module_rejected(self, db):
        with pytest.raises(ValidationError):
            AccessGroup.objects.create(name="Gresit", modules=["orders", "payroll"])

    def test_modules_must_be_a_list(self, db):
        with pytest.raises(ValidationError):
            AccessGroup.objects.create(name="Gresit", modules={"orders": True})


@pytest.mark.django_db
class TestGroupAccessBackend:
    def test_implements_protocol(self):
        assert isinstance(GroupAccessBackend(), AccessBackend)

    def test_union_of_groups(self, user, reception, workshop):
        reception.users.add(user)
        workshop.users.add(user)

        assert Lab.allowed_modules(user) == frozenset({"orders", "clients", "products"})
        assert Lab.can_access(user, Module.PRODUCTS) is True
        assert Lab.can_access(user, Module.INVOICES) is False

    def test_no_groups(self, user):
        assert Lab.allowed_modules(user) == frozenset()

    def test_superuser_sees_everything(self):
        admin = User.objects.create_superuser(username="admin", password="x", email="a@b.ro")
        assert Lab.allowed_modules(admin) == frozenset(Module.values)

    def test_inactive_user(self, user, reception):
        reception.users.add(user)
        user.is_active = False
        user.save()

        assert Lab.allowed_modules(user) == frozenset()

    def test_anonymous(self):
        assert Lab.can_access(AnonymousUser(), Module.DASHBOARD) is False


class TestBackendConfig:
    def test_singleton(self, db):
        assert get_access_backend() is get_access_backend()

    def test_disabled_backend(self, db, settings, user):
        settings.LABMAN = {"ACCESS_BACKEND": None}
        reset_access_backend()

        assert get_access_backend() is None
        assert Lab.allowed_modules(user) == frozenset()
