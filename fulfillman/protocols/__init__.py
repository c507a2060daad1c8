"""
Fulfillman Protocols.

Defines interfaces for external integrations.
"""

from fulfillman.protocols.inventory import InventoryBackend
from fulfillman.protocols.notifier import Notifier

__all__ = [
    "InventoryBackend",
    "Notifier",
]
