"""
Django Fulfillman - Headless made-to-order fulfillment engine.

Keeps raw materials, finished goods and an external inventory system
consistent while orders move from checkout to shipment.

Usage:
    from fulfillman import fulfill, FulfillError

    # Checkout
    order = fulfill.place_order(customer, [(tote_bag, 2), (pouch, 1)])

    # Can we make it?
    fulfill.max_producible(tote_bag)   # Producibility(quantity=3, ...)

    # Manufacturing run consumes materials through the ledger
    fulfill.allocate(tote_bag, 2, order=order)

    # Status changes adjust finished goods and sync the shop
    fulfill.set_status(order, "completed")
    fulfill.set_status(order, "shipped")

Errors:
    try:
        fulfill.allocate(tote_bag, 10)
    except InsufficientMaterials as e:
        for shortage in e.details["shortages"]:
            print(f"{shortage['material']}: needs {shortage['required']}, has {shortage['available']}")
"""

from fulfillman.exceptions import (
    BomNotConfigured,
    ConcurrentModification,
    FulfillError,
    InsufficientMaterials,
    InsufficientStock,
)


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("fulfill", "Fulfill"):
        from fulfillman.service import Fulfill

        return Fulfill
    if name == "Producibility":
        from fulfillman.results import Producibility

        return Producibility
    if name == "MaterialShortage":
        from fulfillman.results import MaterialShortage

        return MaterialShortage
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "fulfill",
    "Fulfill",
    "FulfillError",
    "InsufficientStock",
    "InsufficientMaterials",
    "BomNotConfigured",
    "ConcurrentModification",
    "Producibility",
    "MaterialShortage",
]
__version__ = "0.1.0"
