"""
Fulfillman Signals.

All communication with external systems happens via signals, sent only
after the originating transaction commits (``transaction.on_commit``) and
with ``send_robust`` so a failing receiver never reaches the caller.

Signals:
    order_placed: A new order was committed
    order_status_changed: An order transition was committed
"""

from django.dispatch import Signal

# New order committed
# Sent by place_order() after commit
# Args: order
order_placed = Signal()

# Order status changed
# Sent by Order.set_status() after commit
# Args: order, previous_status, status, adjustments (list[StockAdjustment])
order_status_changed = Signal()

__all__ = ["order_placed", "order_status_changed"]
