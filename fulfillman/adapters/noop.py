"""
Noop Inventory Backend -- local-only inventory, nothing leaves the process.

Use this adapter for development or testing when no commerce platform is
connected.

Configuration:
    FULFILLMAN = {
        "INVENTORY_BACKEND": "fulfillman.adapters.noop.NoopInventoryBackend",
    }
"""

from __future__ import annotations


class NoopInventoryBackend:
    """
    No-operation implementation of the InventoryBackend protocol.

    Reports the local finished-goods cache as the external quantity and
    ignores adjustments, so every push succeeds.
    """

    def get_quantity(self, product) -> int:
        return product.inventory_quantity

    def adjust_quantity(self, product, delta: int) -> None:
        return None
