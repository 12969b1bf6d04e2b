"""
Labman API permissions.
"""

from rest_framework.permissions import BasePermission


class HasModuleAccess(BasePermission):
    """
    Allow the request if the user's access groups include view.module.

    Views without a ``module`` attribute are not restricted here.
    """

    message = "You do not have access to this module."

    def has_permission(self, request, view):
        module = getattr(view, "module", None)
        if module is None:
            return True

        from labman.service import Lab

        return Lab.can_access(request.user, module)
