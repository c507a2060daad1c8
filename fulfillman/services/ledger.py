"""
Material ledger -- the only writer of ``Material.current_stock``.

Every stock movement is an immutable MaterialTransaction plus an atomic
``±quantity`` on the material row. Debits use a conditional UPDATE
(``WHERE current_stock >= quantity``) under a row lock, so two concurrent
debits can never both pass the check.
"""

import logging
import time
from decimal import Decimal, InvalidOperation

from django.db import OperationalError, connection, transaction
from django.db.models import DecimalField, F, Q, Sum
from django.db.models.functions import Coalesce

from fulfillman.conf import get_setting
from fulfillman.exceptions import (
    ConcurrentModification,
    FulfillError,
    InsufficientStock,
    InvalidQuantity,
    MaterialNotFound,
)
from fulfillman.models import Material, MaterialTransaction, TransactionType

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def run_with_retries(func, *args, **kwargs):
    """
    Call ``func`` retrying lock conflicts (``OperationalError``).

    Retries only happen at the outermost transaction boundary: inside an
    enclosing ``atomic()`` block the transaction is already broken, so the
    conflict is surfaced immediately as ConcurrentModification and the
    caller that owns the transaction decides. The outermost call retries
    both raw conflicts and ConcurrentModification raised by nested calls.
    """
    attempts = max(1, int(get_setting("STOCK_LOCK_RETRIES")))

    for attempt in range(1, attempts + 1):
        try:
            return func(*args, **kwargs)
        except (OperationalError, ConcurrentModification) as e:
            nested = isinstance(e, ConcurrentModification)
            if nested and connection.in_atomic_block:
                raise
            if connection.in_atomic_block or attempt == attempts:
                error = e.details.get("error") if nested else str(e)
                raise ConcurrentModification(attempts=attempt, error=error) from e
            logger.warning(
                f"Lock conflict in {func.__name__} (attempt {attempt}/{attempts}): {e}",
                extra={"attempt": attempt, "attempts": attempts},
            )
            time.sleep(0.05 * attempt)


def _to_quantity(quantity) -> Decimal:
    try:
        value = Decimal(str(quantity))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidQuantity(quantity=quantity)
    if not value.is_finite() or value <= 0:
        raise InvalidQuantity(quantity=quantity)
    return value


def record(
    material,
    type: str,
    quantity,
    *,
    order=None,
    purchase_order=None,
    unit_price=None,
    notes: str = "",
    date=None,
) -> MaterialTransaction:
    """
    Append a ledger entry and apply it to the material's stock.

    Args:
        material: Material instance or primary key
        type: ``in`` or ``out``
        quantity: Positive quantity in the material's unit
        order: Order whose manufacturing run consumed the material (optional)
        purchase_order: PurchaseOrder being received (optional)
        unit_price: Purchase price per unit (optional)
        notes: Free text
        date: Movement date (defaults to today)

    Returns:
        The created MaterialTransaction

    Raises:
        InvalidQuantity: quantity is not a positive number
        MaterialNotFound: material does not exist
        InsufficientStock: an ``out`` would drive stock below zero
        ConcurrentModification: lock conflict outlived the retries
    """
    quantity = _to_quantity(quantity)
    try:
        type = TransactionType(type)
    except ValueError:
        raise FulfillError("INVALID_TRANSACTION_TYPE", type=type)

    material_id = material.pk if isinstance(material, Material) else material

    entry, stock = run_with_retries(
        _record,
        material_id,
        type,
        quantity,
        order=order,
        purchase_order=purchase_order,
        unit_price=unit_price,
        notes=notes,
        date=date,
    )

    if isinstance(material, Material):
        material.current_stock = stock
    return entry


def _record(material_id, type, quantity, *, order, purchase_order, unit_price, notes, date):
    with transaction.atomic():
        try:
            locked = Material.objects.select_for_update().get(pk=material_id)
        except Material.DoesNotExist:
            raise MaterialNotFound(material_id=material_id)

        rows = Material.objects.filter(pk=locked.pk)
        if type == TransactionType.OUT:
            updated = rows.filter(current_stock__gte=quantity).update(
                current_stock=F("current_stock") - quantity
            )
            if not updated:
                raise InsufficientStock(
                    material=locked.name,
                    material_id=locked.pk,
                    required=quantity,
                    available=locked.current_stock,
                )
            stock = locked.current_stock - quantity
        else:
            rows.update(current_stock=F("current_stock") + quantity)
            stock = locked.current_stock + quantity

        fields = {
            "material": locked,
            "type": type,
            "quantity": quantity,
            "order": order,
            "purchase_order": purchase_order,
            "unit_price": unit_price,
            "notes": notes or "",
        }
        if date is not None:
            fields["date"] = date
        entry = MaterialTransaction.objects.create(**fields)

    logger.info(
        f"Ledger {type} {quantity} {locked.unit} of {locked.name} → {stock}",
        extra={
            "material": locked.name,
            "material_id": locked.pk,
            "type": type,
            "quantity": quantity,
            "current_stock": stock,
            "order": getattr(order, "order_number", None),
        },
    )

    if type == TransactionType.OUT and locked.safety_stock > 0 and stock <= locked.safety_stock:
        logger.warning(
            f"Material {locked.name} at {stock} {locked.unit}, "
            f"safety stock is {locked.safety_stock}",
            extra={
                "material": locked.name,
                "material_id": locked.pk,
                "current_stock": stock,
                "safety_stock": locked.safety_stock,
            },
        )

    return entry, stock


def receive(material, quantity, *, notes: str = "", **kwargs) -> MaterialTransaction:
    """Register an inbound movement (manual receipt, opening stock)."""
    return record(material, TransactionType.IN, quantity, notes=notes, **kwargs)


def issue(material, quantity, *, order=None, notes: str = "", **kwargs) -> MaterialTransaction:
    """Register an outbound movement (manual consumption, scrap)."""
    return record(material, TransactionType.OUT, quantity, order=order, notes=notes, **kwargs)


def _ledger_sums(prefix: str = "") -> dict:
    quantity = f"{prefix}quantity"
    type_field = f"{prefix}type"
    return {
        "total_in": Coalesce(
            Sum(quantity, filter=Q(**{type_field: TransactionType.IN})),
            ZERO,
            output_field=DecimalField(max_digits=20, decimal_places=4),
        ),
        "total_out": Coalesce(
            Sum(quantity, filter=Q(**{type_field: TransactionType.OUT})),
            ZERO,
            output_field=DecimalField(max_digits=20, decimal_places=4),
        ),
    }


def ledger_balance(material) -> Decimal:
    """Recompute Σin − Σout for a material from its transactions."""
    material_id = material.pk if isinstance(material, Material) else material
    if not Material.objects.filter(pk=material_id).exists():
        raise MaterialNotFound(material_id=material_id)

    totals = MaterialTransaction.objects.filter(material_id=material_id).aggregate(
        **_ledger_sums()
    )
    return totals["total_in"] - totals["total_out"]


def drifted_materials(shop=None) -> list[tuple[Material, Decimal]]:
    """
    Materials whose cached ``current_stock`` differs from their ledger.

    Returns:
        List of (material, ledger balance) pairs; empty when consistent
    """
    qs = Material.objects.annotate(**_ledger_sums("transactions__")).order_by("pk")
    if shop is not None:
        qs = qs.filter(shop=shop)

    drifted = []
    for material in qs:
        balance = material.total_in - material.total_out
        if balance != material.current_stock:
            drifted.append((material, balance))
    return drifted
