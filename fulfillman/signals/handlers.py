"""
Fulfillman Signal Handlers.

Post-commit side effects of order events:
- Push finished-goods deltas to the external inventory system
- Send order notifications

Failures here are logged (and sync failures recorded on the order); they
never undo the committed transition.

This module is imported in apps.py to register handlers.
"""

import logging

from django.db import transaction
from django.dispatch import receiver
from django.utils import timezone

from fulfillman.conf import get_notifier
from fulfillman.exceptions import InventorySyncError
from fulfillman.signals import order_placed, order_status_changed

logger = logging.getLogger(__name__)


@receiver(order_status_changed)
def push_inventory_adjustments(sender, order, status, adjustments, **kwargs):
    """
    Push each line's delta to the external inventory system.

    Best-effort per line: one failure does not stop the next push. Failures
    are appended to ``order.metadata["inventory_sync_errors"]``.
    """
    if not adjustments:
        return

    from fulfillman.models import Product
    from fulfillman.services.inventory_sync import push

    errors = []
    for adjustment in adjustments:
        try:
            product = Product.objects.select_related("shop").get(pk=adjustment.product_id)
            push(product, adjustment.delta)
        except (InventorySyncError, Product.DoesNotExist) as e:
            code = getattr(e, "code", "PRODUCT_NOT_FOUND")
            logger.error(
                f"Inventory sync failed for order {order.order_number}, "
                f"product {adjustment.sku or adjustment.product_id} ({adjustment.delta:+d}): {e}",
                extra={
                    "order": order.order_number,
                    "product_id": adjustment.product_id,
                    "delta": adjustment.delta,
                    "error": code,
                },
            )
            errors.append({
                "product_id": adjustment.product_id,
                "sku": adjustment.sku,
                "delta": adjustment.delta,
                "status": str(status),
                "error": code,
                "message": str(e),
                "timestamp": timezone.now().isoformat(),
            })

    if errors:
        _record_sync_errors(order, errors)


def _record_sync_errors(order, errors: list[dict]) -> None:
    from fulfillman.models import Order

    with transaction.atomic():
        locked = Order.objects.select_for_update().get(pk=order.pk)
        metadata = dict(locked.metadata or {})
        metadata["inventory_sync_errors"] = [
            *metadata.get("inventory_sync_errors", []),
            *errors,
        ]
        locked.metadata = metadata
        locked.save(update_fields=["metadata", "updated_at"])

    order.metadata = locked.metadata


@receiver(order_status_changed)
def notify_status_changed(sender, order, status, **kwargs):
    """Notify order number, new status and customer."""
    from fulfillman.models import OrderStatus

    message = (
        "Order status updated\n"
        f"Order: {order.order_number}\n"
        f"Status: {OrderStatus(status).label}\n"
        f"Customer: {order.customer_name}"
    )
    _notify(message, order)


@receiver(order_placed)
def notify_order_placed(sender, order, **kwargs):
    """Notify order number, customer and total."""
    message = (
        "New order received\n"
        f"Order: {order.order_number}\n"
        f"Customer: {order.customer_name}\n"
        f"Total: {order.total_amount:,}"
    )
    _notify(message, order)


def _notify(message: str, order) -> None:
    try:
        get_notifier().notify(message)
    except Exception as e:
        logger.error(
            f"Notification failed for order {order.order_number}: {e}",
            extra={"order": order.order_number},
        )
        # Don't raise - the order change is already committed
