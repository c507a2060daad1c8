"""
Material allocator -- debits BOM materials for a manufacturing run.

All-or-nothing: every shortage is collected first; if any material is
short nothing is written, otherwise one ``out`` ledger entry is written per
BOM entry inside a single transaction.
"""

import logging

from django.db import transaction

from fulfillman.exceptions import BomNotConfigured, InsufficientMaterials, InvalidQuantity
from fulfillman.models import Material, MaterialTransaction, TransactionType
from fulfillman.results import MaterialShortage
from fulfillman.services import bom, ledger

logger = logging.getLogger(__name__)


def allocate(product, quantity, order=None) -> list[MaterialTransaction]:
    """
    Consume materials for ``quantity`` units of ``product``.

    Args:
        product: Product being manufactured
        quantity: Units to manufacture (> 0)
        order: Order the run belongs to (tags the ledger entries)

    Returns:
        Created ``out`` transactions, one per BOM entry

    Raises:
        InvalidQuantity: quantity is not positive
        BomNotConfigured: product has no BOM entries
        InsufficientMaterials: one or more materials are short (all listed)
    """
    try:
        quantity = ledger._to_quantity(quantity)
    except InvalidQuantity:
        raise InvalidQuantity(product=str(product), quantity=quantity)

    return ledger.run_with_retries(_allocate, product, quantity, order)


def _allocate(product, quantity, order):
    with transaction.atomic():
        needed = bom.requirements(product, quantity)
        if not needed:
            raise BomNotConfigured(product=str(product), product_id=product.pk)

        # Lock in pk order so concurrent runs sharing materials cannot deadlock.
        material_ids = sorted(entry.material_id for entry, _ in needed)
        locked = {
            m.pk: m
            for m in Material.objects.select_for_update().filter(pk__in=material_ids).order_by("pk")
        }

        shortages = []
        for entry, required in needed:
            material = locked[entry.material_id]
            if material.current_stock < required:
                shortages.append(
                    MaterialShortage(
                        material_id=material.pk,
                        material=material.name,
                        unit=material.unit,
                        required=required,
                        available=material.current_stock,
                    )
                )

        if shortages:
            logger.info(
                f"Cannot manufacture {quantity} × {product}: "
                f"{len(shortages)} material(s) short",
                extra={
                    "product_id": product.pk,
                    "quantity": quantity,
                    "order": getattr(order, "order_number", None),
                },
            )
            raise InsufficientMaterials(
                product=str(product),
                quantity=quantity,
                shortages=[s.as_dict() for s in shortages],
            )

        run = f"Manufacturing {quantity} × {product}"
        if order is not None:
            run = f"{run} for order {order.order_number}"

        created = [
            ledger.record(
                locked[entry.material_id],
                TransactionType.OUT,
                required,
                order=order,
                notes=run,
            )
            for entry, required in needed
        ]

    logger.info(
        f"Allocated materials: {run}",
        extra={
            "product_id": product.pk,
            "quantity": quantity,
            "transactions": len(created),
            "order": getattr(order, "order_number", None),
        },
    )
    return created
