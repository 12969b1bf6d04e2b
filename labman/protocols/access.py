"""
Access Protocol: interface for module-level permissions.

Labman defines this protocol; the default implementation reads
AccessGroup rows (labman.adapters.groups).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AccessBackend(Protocol):
    """Protocol for answering "which modules may this user open?"."""

    def allowed_modules(self, user: Any) -> frozenset[str]:
        """
        Get the modules a user may access.

        Args:
            user: Django user (may be anonymous)

        Returns:
            Set of module codes (see labman.models.Module)
        """
        ...
