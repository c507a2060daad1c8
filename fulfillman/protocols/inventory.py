"""
Inventory Backend Protocol.

Defines the interface for Fulfillman to talk to the external inventory
system of record (e.g. Shopify). The external system owns the authoritative
sellable quantity; Fulfillman only reads it and pushes deltas.

Implementations must raise:
    ExternalSystemUnavailable  -- network error, timeout, error response
    ProductNotMapped           -- product has no counterpart in the platform
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class InventoryBackend(Protocol):
    """
    Interface to the external inventory system.

    Implementations:
        - ShopifyInventoryBackend: Shopify Admin REST API
        - NoopInventoryBackend: local-only setups and tests
    """

    def get_quantity(self, product) -> int:
        """
        Current sellable quantity in the external system.

        Args:
            product: fulfillman Product

        Returns:
            Quantity as reported by the platform
        """
        ...

    def adjust_quantity(self, product, delta: int) -> None:
        """
        Apply a signed adjustment to the external quantity.

        Args:
            product: fulfillman Product
            delta: Positive to add stock, negative to remove
        """
        ...
