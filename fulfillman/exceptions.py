"""
Fulfillman Exceptions.

All fulfillman errors derive from FulfillError for consistent handling.
Subclasses carry a fixed error code so callers can either catch the type
or branch on ``error.code``.
"""

from typing import Any


class FulfillError(Exception):
    """
    Base exception for all Fulfillman errors.

    Usage:
        raise FulfillError("INVALID_STATUS", current="shipped", requested="new")
        raise InsufficientStock(material="Canvas", required=5, available=2)

    Attributes:
        code: Error code (INVALID_STATUS, INSUFFICIENT_MATERIALS, etc.)
        details: Additional context as keyword arguments
    """

    default_code = "FULFILL_ERROR"

    def __init__(self, code: str | None = None, **details: Any):
        self.code = code or self.default_code
        self.details = details
        message = f"{self.code}: {details}" if details else self.code
        super().__init__(message)

    def as_dict(self) -> dict:
        """Return error as dictionary for API responses."""
        return {"code": self.code, **self.details}

    def __str__(self) -> str:
        name = type(self).__name__
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{name}({self.code}: {details_str})"
        return f"{name}({self.code})"


# ── Not found ──


class NotFound(FulfillError):
    default_code = "NOT_FOUND"


class MaterialNotFound(NotFound):
    default_code = "MATERIAL_NOT_FOUND"


class ProductNotFound(NotFound):
    default_code = "PRODUCT_NOT_FOUND"


class OrderNotFound(NotFound):
    default_code = "ORDER_NOT_FOUND"


class PurchaseOrderNotFound(NotFound):
    default_code = "PURCHASE_ORDER_NOT_FOUND"


# ── Business rules ──


class InvalidQuantity(FulfillError):
    default_code = "INVALID_QUANTITY"


class InvalidStatus(FulfillError):
    default_code = "INVALID_STATUS"


class InsufficientStock(FulfillError):
    """An ``out`` ledger write would drive a material below zero."""

    default_code = "INSUFFICIENT_STOCK"


class InsufficientMaterials(FulfillError):
    """
    A manufacturing run cannot be covered by current material stock.

    ``details["shortages"]`` lists every short material, not just the first.
    """

    default_code = "INSUFFICIENT_MATERIALS"

    @property
    def shortages(self) -> list[dict]:
        return self.details.get("shortages", [])


class BomNotConfigured(FulfillError):
    """Product has no BOM entries (distinct from "zero producible")."""

    default_code = "BOM_NOT_CONFIGURED"


class ConcurrentModification(FulfillError):
    """Lock conflict on the material stock path that outlived its retries."""

    default_code = "CONCURRENT_MODIFICATION"


# ── External inventory system ──


class InventorySyncError(FulfillError):
    """Base for failures talking to the external inventory system."""

    default_code = "INVENTORY_SYNC_FAILED"


class ExternalSystemUnavailable(InventorySyncError):
    default_code = "EXTERNAL_SYSTEM_UNAVAILABLE"


class ProductNotMapped(InventorySyncError):
    default_code = "PRODUCT_NOT_MAPPED"


# Common error codes
# INVALID_STATUS: Status transition not allowed
# INVALID_QUANTITY: Quantity must be positive
# INSUFFICIENT_STOCK: Ledger out-write would go negative
# INSUFFICIENT_MATERIALS: Manufacturing run short on one or more materials
# BOM_NOT_CONFIGURED: Product has no BOM entries
# CONCURRENT_MODIFICATION: Material row lock conflict after retries
# EXTERNAL_SYSTEM_UNAVAILABLE: Inventory platform unreachable / error response
# PRODUCT_NOT_MAPPED: Product has no counterpart in the inventory platform
