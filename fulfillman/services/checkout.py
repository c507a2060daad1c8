"""
Order placement.

Creates an Order with immutable line snapshots in one transaction and
announces it with ``order_placed`` after commit.
"""

import logging
from decimal import Decimal
from functools import partial

from django.db import transaction

from fulfillman.exceptions import FulfillError, InvalidQuantity, ProductNotFound
from fulfillman.models import Order, OrderItem

logger = logging.getLogger(__name__)


def place_order(customer, lines, notes: str = "") -> Order:
    """
    Create an order for ``customer``.

    Args:
        customer: Customer placing the order
        lines: Iterable of (product, quantity) pairs; quantity is a positive int
        notes: Free text

    Returns:
        The saved Order (status ``new``)

    Raises:
        InvalidQuantity: a quantity is not a positive integer
        ProductNotFound: a product does not belong to the customer's shop
    """
    lines = list(lines)
    if not lines:
        raise FulfillError("EMPTY_ORDER", customer=str(customer))

    for product, quantity in lines:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidQuantity(product=str(product), quantity=quantity)
        if product.shop_id != customer.shop_id:
            raise ProductNotFound(product_id=product.pk, shop_id=customer.shop_id)

    with transaction.atomic():
        order = Order.objects.create(
            shop_id=customer.shop_id,
            customer=customer,
            notes=notes,
        )

        total = Decimal("0")
        for product, quantity in lines:
            item = OrderItem.objects.create(
                order=order,
                product=product,
                product_name=product.title,
                sku=product.sku,
                quantity=quantity,
                unit_price=product.price,
            )
            total += item.subtotal

        order.total_amount = total
        order.save(update_fields=["total_amount", "updated_at"])

        transaction.on_commit(partial(_emit_order_placed, order))

    logger.info(
        f"Placed order {order.order_number} for {customer} ({len(lines)} lines, {total})",
        extra={"order": order.order_number, "customer_id": customer.pk, "total": total},
    )
    return order


def _emit_order_placed(order):
    from fulfillman.signals import order_placed

    responses = order_placed.send_robust(sender=Order, order=order)
    for receiver, response in responses:
        if isinstance(response, Exception):
            logger.error(
                f"order_placed receiver {receiver.__name__} failed for "
                f"order {order.order_number}: {response}",
                extra={"order": order.order_number},
            )
