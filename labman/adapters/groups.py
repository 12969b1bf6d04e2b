"""
AccessGroup Backend -- module access from AccessGroup membership.

Configuration (default):
    LABMAN = {
        "ACCESS_BACKEND": "labman.adapters.groups.GroupAccessBackend",
    }
"""

from __future__ import annotations


class GroupAccessBackend:
    """
    AccessBackend implementation backed by AccessGroup rows.

    Superusers may open every module. Other active users get the union
    of the modules of every group they belong to. Anonymous and inactive
    users get nothing.
    """

    def allowed_modules(self, user) -> frozenset[str]:
        from labman.models import AccessGroup, Module

        if user is None or not getattr(user, "is_authenticated", False):
            return frozenset()
        if not user.is_active:
            return frozenset()
        if user.is_superuser:
            return frozenset(Module.values)

        modules = set()
        for group_modules in AccessGroup.objects.filter(users=user).values_list(
            "modules", flat=True
        ):
            modules.update(group_modules or [])
        return frozenset(m for m in modules if m in Module.values)
