"""
Fulfillman Models.

Core models for made-to-order fulfillment:
- Shop / Customer / Product: catalog mirrored from the commerce platform
- Material: raw good whose stock is derived from its ledger
- MaterialTransaction: immutable ledger entry (in / out)
- BOMEntry: material consumed per manufactured unit of a product
- Order / OrderItem: customer order and its immutable line snapshots
- Supplier / PurchaseOrder / PurchaseOrderItem: inbound materials
- CodeSequence: atomic counter for document numbers
"""

from fulfillman.models.bom import BOMEntry
from fulfillman.models.catalog import Customer, Product, Shop
from fulfillman.models.material import Material, MaterialTransaction, TransactionType
from fulfillman.models.order import Order, OrderItem, OrderStatus
from fulfillman.models.purchase import (
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    Supplier,
)
from fulfillman.models.sequence import CodeSequence

__all__ = [
    "Shop",
    "Customer",
    "Product",
    "Material",
    "MaterialTransaction",
    "TransactionType",
    "BOMEntry",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Supplier",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "PurchaseOrderStatus",
    "CodeSequence",
]
