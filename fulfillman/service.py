"""
Fulfillman Service - Thin wrapper over models and services.

Business logic lives in the models (Order.set_status, PurchaseOrder.set_status)
and in fulfillman.services. This class is a single convenience entry point
that also accepts primary keys wherever an instance is expected.

Usage:
    from fulfillman import fulfill, FulfillError

    # Materials
    fulfill.receive(canvas, 10, notes="Opening stock")
    fulfill.ledger_balance(canvas)          # Decimal("10")

    # BOM
    fulfill.cost(tote_bag)                   # ProductCost(...)
    fulfill.max_producible(tote_bag)         # Producibility(quantity=3, ...)

    # Orders
    order = fulfill.place_order(customer, [(tote_bag, 2)])
    fulfill.set_status(order, "manufacturing", allocate_materials=True)
    fulfill.set_status(order, "completed")
    fulfill.set_status(order, "shipped")
"""

from fulfillman.exceptions import (
    MaterialNotFound,
    OrderNotFound,
    ProductNotFound,
    PurchaseOrderNotFound,
)
from fulfillman.models import Material, Order, Product, PurchaseOrder
from fulfillman.services import alerts, allocation, bom, checkout, inventory_sync, ledger, purchasing


def _resolve(model, ref, error):
    if isinstance(ref, model):
        return ref
    try:
        return model.objects.get(pk=ref)
    except (model.DoesNotExist, ValueError, TypeError):
        raise error(**{f"{model._meta.model_name}_id": ref})


class Fulfill:
    """
    Fulfillman API.

    All methods are classmethods; ``fulfill`` is the class itself.
    """

    # ══════════════════════════════════════════════════════════════
    # MATERIAL LEDGER
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def record(cls, material, type: str, quantity, **kwargs):
        """Append a ledger entry (``in`` / ``out``) for a material."""
        material = _resolve(Material, material, MaterialNotFound)
        return ledger.record(material, type, quantity, **kwargs)

    @classmethod
    def receive(cls, material, quantity, notes: str = ""):
        material = _resolve(Material, material, MaterialNotFound)
        return ledger.receive(material, quantity, notes=notes)

    @classmethod
    def issue(cls, material, quantity, order=None, notes: str = ""):
        material = _resolve(Material, material, MaterialNotFound)
        return ledger.issue(material, quantity, order=order, notes=notes)

    @classmethod
    def ledger_balance(cls, material):
        return ledger.ledger_balance(_resolve(Material, material, MaterialNotFound))

    @classmethod
    def low_stock_alerts(cls, shop):
        return alerts.low_stock_alerts(shop)

    # ══════════════════════════════════════════════════════════════
    # BOM
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def cost(cls, product):
        return bom.cost(_resolve(Product, product, ProductNotFound))

    @classmethod
    def max_producible(cls, product):
        return bom.max_producible(_resolve(Product, product, ProductNotFound))

    @classmethod
    def allocate(cls, product, quantity, order=None):
        """Consume BOM materials for ``quantity`` units (all-or-nothing)."""
        product = _resolve(Product, product, ProductNotFound)
        if order is not None:
            order = _resolve(Order, order, OrderNotFound)
        return allocation.allocate(product, quantity, order=order)

    # ══════════════════════════════════════════════════════════════
    # ORDERS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def place_order(cls, customer, lines, notes: str = "") -> Order:
        return checkout.place_order(customer, lines, notes=notes)

    @classmethod
    def set_status(cls, order, status: str, *, allocate_materials: bool = False, user=None):
        """
        Move an order to ``status``.

        Returns the finished-goods adjustments applied to the local cache.
        Delegates to Order.set_status().
        """
        order = _resolve(Order, order, OrderNotFound)
        return order.set_status(status, allocate_materials=allocate_materials, user=user)

    @classmethod
    def push_inventory(cls, product, delta: int):
        """Push a finished-goods delta to the external system (manual resync)."""
        return inventory_sync.push(_resolve(Product, product, ProductNotFound), delta)

    # ══════════════════════════════════════════════════════════════
    # PURCHASING
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create_purchase_order(cls, supplier, lines, **kwargs) -> PurchaseOrder:
        return purchasing.create_purchase_order(supplier, lines, **kwargs)

    @classmethod
    def set_purchase_order_status(cls, purchase_order, status: str) -> PurchaseOrder:
        purchase_order = _resolve(PurchaseOrder, purchase_order, PurchaseOrderNotFound)
        return purchasing.set_purchase_order_status(purchase_order, status)
