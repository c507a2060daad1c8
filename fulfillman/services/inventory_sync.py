"""
Inventory sync -- pushes finished-goods deltas to the system of record.

One read and one adjustment per push, no retries. Any backend failure is
surfaced as an InventorySyncError subclass so callers deal with exactly
two error types.
"""

import logging

from fulfillman.conf import get_inventory_backend
from fulfillman.exceptions import ExternalSystemUnavailable, InventorySyncError
from fulfillman.results import SyncResult

logger = logging.getLogger(__name__)


def push(product, delta: int, backend=None) -> SyncResult:
    """
    Apply ``delta`` to the product's quantity in the external system.

    Args:
        product: fulfillman Product
        delta: Signed finished-goods change (non-zero)
        backend: InventoryBackend (defaults to the configured one)

    Raises:
        ProductNotMapped: product has no external counterpart
        ExternalSystemUnavailable: network failure, timeout or error response
    """
    backend = backend or get_inventory_backend()

    try:
        before = backend.get_quantity(product)
        backend.adjust_quantity(product, delta)
    except InventorySyncError:
        raise
    except Exception as e:
        raise ExternalSystemUnavailable(
            product_id=product.pk, sku=product.sku, delta=delta, error=str(e)
        ) from e

    result = SyncResult(product_id=product.pk, delta=delta, external_before=before)
    logger.info(
        f"Pushed {delta:+d} for {product.sku or product.pk}: "
        f"{result.external_before} → {result.external_after}",
        extra={"product_id": product.pk, "sku": product.sku, "delta": delta},
    )
    return result


# TODO: periodic reconciliation that pulls external quantities back into
# Product.inventory_quantity and replays Order.metadata["inventory_sync_errors"].
