"""
Labman Settings.

Supports two formats (dict takes priority):

    # Option 1: Dict
    LABMAN = {
        "DUPLICATE_TOLERANCE": 0.001,
        "DEFAULT_VAT_PERCENT": Decimal("19"),
    }

    # Option 2: Flat
    LABMAN_DUPLICATE_TOLERANCE = 0.001
    LABMAN_DEFAULT_VAT_PERCENT = Decimal("19")

All settings have defaults; no configuration is required.
"""

import threading
from decimal import Decimal

from django.conf import settings
from django.utils.module_loading import import_string


# ── Defaults ──

DEFAULTS = {
    "DUPLICATE_TOLERANCE": 0.001,
    "CATALOG_LOADER": "labman.adapters.orm.load_catalog",
    "ACCESS_BACKEND": "labman.adapters.groups.GroupAccessBackend",
    "ORDER_CODE_PREFIX": "CMD",
    "INVOICE_CODE_PREFIX": "FACT",
    "DEFAULT_VAT_PERCENT": Decimal("19"),
    "INVOICE_DUE_DAYS": 30,
}


# ── Accessors ──

_sentinel = object()


def get_setting(name, default=_sentinel):
    """
    Get a labman setting.

    Looks up in order:
    1. LABMAN dict (e.g. LABMAN = {"DUPLICATE_TOLERANCE": 0.001})
    2. Flat setting (e.g. LABMAN_DUPLICATE_TOLERANCE = 0.001)
    3. DEFAULTS
    """
    labman_dict = getattr(settings, "LABMAN", {})
    if name in labman_dict:
        return labman_dict[name]

    flat_value = getattr(settings, f"LABMAN_{name}", _sentinel)
    if flat_value is not _sentinel:
        return flat_value

    if default is not _sentinel:
        return default

    return DEFAULTS.get(name)


def get_duplicate_tolerance() -> float:
    """Absolute tolerance used when comparing component quantities."""
    return float(get_setting("DUPLICATE_TOLERANCE"))


def get_catalog():
    """
    Load a fresh catalog snapshot.

    Not cached: every call reflects the current state of the store, so
    price-sensitive operations see recent prices.
    """
    loader = import_string(get_setting("CATALOG_LOADER"))
    return loader()


_access_backend_lock = threading.Lock()
_access_backend_instance = None


def get_access_backend():
    """
    Return the configured access backend instance, or None.

    The access backend answers which modules a user may open.
    """
    global _access_backend_instance

    path = get_setting("ACCESS_BACKEND")
    if not path:
        return None

    if _access_backend_instance is None:
        with _access_backend_lock:
            if _access_backend_instance is None:  # double-checked
                _access_backend_instance = import_string(path)()

    return _access_backend_instance


def reset_access_backend() -> None:
    """Reset singleton (for tests)."""
    global _access_backend_instance
    _access_backend_instance = None
