"""
Fulfillman Settings.

Supports two formats (dict takes priority):

    # Option 1: Dict
    FULFILLMAN = {
        "INVENTORY_BACKEND": "fulfillman.adapters.shopify.ShopifyInventoryBackend",
        "STRICT_STATUS_TRANSITIONS": True,
    }

    # Option 2: Flat
    FULFILLMAN_INVENTORY_BACKEND = "fulfillman.adapters.shopify.ShopifyInventoryBackend"
    FULFILLMAN_STRICT_STATUS_TRANSITIONS = True

All settings have sensible defaults, zero configuration required.
"""

import threading

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string


# ── Defaults ──

DEFAULTS = {
    "INVENTORY_BACKEND": "fulfillman.adapters.noop.NoopInventoryBackend",
    "NOTIFIER_BACKEND": "fulfillman.adapters.notifiers.LoggingNotifier",
    "STRICT_STATUS_TRANSITIONS": False,
    "STOCK_LOCK_RETRIES": 3,
    "SHOPIFY_API_VERSION": "2024-01",
    "SHOPIFY_TIMEOUT": 10,
    "LINE_NOTIFY_TOKEN": None,
    "SLACK_WEBHOOK_URL": None,
    "NOTIFIER_TIMEOUT": 5,
}


# ── Accessors ──

_sentinel = object()


def get_setting(name, default=_sentinel):
    """
    Get a fulfillman setting.

    Looks up in order:
    1. FULFILLMAN dict (e.g. FULFILLMAN = {"INVENTORY_BACKEND": "..."})
    2. Flat setting (e.g. FULFILLMAN_INVENTORY_BACKEND = "...")
    3. DEFAULTS
    """
    fulfillman_dict = getattr(settings, "FULFILLMAN", {})
    if name in fulfillman_dict:
        return fulfillman_dict[name]

    flat_value = getattr(settings, f"FULFILLMAN_{name}", _sentinel)
    if flat_value is not _sentinel:
        return flat_value

    if default is not _sentinel:
        return default

    return DEFAULTS.get(name)


def _load_backend(setting_name: str):
    path = get_setting(setting_name)
    if not path:
        raise ImproperlyConfigured(
            f"FULFILLMAN['{setting_name}'] must be configured."
        )
    try:
        return import_string(path)()
    except ImportError as e:
        raise ImproperlyConfigured(
            f"Failed to import {setting_name.lower()} '{path}': {e}"
        ) from e


_inventory_backend_lock = threading.Lock()
_inventory_backend_instance = None


def get_inventory_backend():
    """
    Return the configured external inventory backend instance.

    The inventory backend is the system of record for sellable quantities
    (e.g. Shopify). Fulfillman only pushes deltas to it.
    """
    global _inventory_backend_instance

    if _inventory_backend_instance is None:
        with _inventory_backend_lock:
            if _inventory_backend_instance is None:  # double-checked
                _inventory_backend_instance = _load_backend("INVENTORY_BACKEND")

    return _inventory_backend_instance


def reset_inventory_backend() -> None:
    """Reset singleton (for tests)."""
    global _inventory_backend_instance
    _inventory_backend_instance = None


_notifier_lock = threading.Lock()
_notifier_instance = None


def get_notifier():
    """Return the configured notifier instance."""
    global _notifier_instance

    if _notifier_instance is None:
        with _notifier_lock:
            if _notifier_instance is None:  # double-checked
                _notifier_instance = _load_backend("NOTIFIER_BACKEND")

    return _notifier_instance


def reset_notifier() -> None:
    """Reset singleton (for tests)."""
    global _notifier_instance
    _notifier_instance = None
