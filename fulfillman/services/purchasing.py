"""
Purchasing -- purchase orders for raw materials.
"""

import logging
from decimal import Decimal

from django.db import transaction

from fulfillman.exceptions import FulfillError, InvalidQuantity, MaterialNotFound
from fulfillman.models import PurchaseOrder, PurchaseOrderItem

logger = logging.getLogger(__name__)


def create_purchase_order(
    supplier,
    lines,
    *,
    expected_delivery_date=None,
    notes: str = "",
) -> PurchaseOrder:
    """
    Create a draft purchase order.

    Args:
        supplier: Supplier the materials are bought from
        lines: Iterable of (material, quantity, unit_price)
        expected_delivery_date: Optional date
        notes: Free text
    """
    lines = [
        (material, Decimal(str(quantity)), Decimal(str(unit_price)))
        for material, quantity, unit_price in lines
    ]
    if not lines:
        raise FulfillError("EMPTY_PURCHASE_ORDER", supplier=str(supplier))

    for material, quantity, unit_price in lines:
        if quantity <= 0:
            raise InvalidQuantity(material=str(material), quantity=quantity)
        if unit_price < 0:
            raise FulfillError("INVALID_PRICE", material=str(material), unit_price=unit_price)
        if material.shop_id != supplier.shop_id:
            raise MaterialNotFound(material_id=material.pk, shop_id=supplier.shop_id)

    with transaction.atomic():
        po = PurchaseOrder.objects.create(
            shop_id=supplier.shop_id,
            supplier=supplier,
            expected_delivery_date=expected_delivery_date,
            notes=notes,
        )
        total = Decimal("0")
        for material, quantity, unit_price in lines:
            item = PurchaseOrderItem.objects.create(
                purchase_order=po,
                material=material,
                quantity=quantity,
                unit_price=unit_price,
            )
            total += item.subtotal

        po.total_amount = total
        po.save(update_fields=["total_amount"])

    logger.info(
        f"Created purchase order {po.order_number} ({supplier}, {total})",
        extra={"purchase_order": po.order_number, "supplier_id": supplier.pk},
    )
    return po


def set_purchase_order_status(purchase_order: PurchaseOrder, status: str) -> PurchaseOrder:
    """Move a purchase order to ``status`` (``received`` books the stock)."""
    purchase_order.set_status(status)
    return purchase_order
