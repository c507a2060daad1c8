"""
Order and OrderItem models.

Order = customer purchase request with a forward-only status lifecycle.
OrderItem = immutable snapshot of a product at order time.

✅ STATUS TRANSITIONS ENCAPSULATED IN MODEL (Order.set_status)
"""

import logging
from decimal import Decimal
from functools import partial

from django.db import models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from fulfillman.conf import get_setting
from fulfillman.exceptions import FulfillError, InvalidStatus
from fulfillman.results import StockAdjustment

logger = logging.getLogger(__name__)


class OrderStatus(models.TextChoices):
    """Order lifecycle status."""

    NEW = "new", _("New")
    MANUFACTURING = "manufacturing", _("Manufacturing")
    COMPLETED = "completed", _("Completed")
    SHIPPED = "shipped", _("Shipped")


STATUS_SEQUENCE = [
    OrderStatus.NEW,
    OrderStatus.MANUFACTURING,
    OrderStatus.COMPLETED,
    OrderStatus.SHIPPED,
]


class Order(models.Model):
    """
    Customer order.

    Status: NEW → MANUFACTURING → COMPLETED → SHIPPED (terminal)

    Metadata structure:
        {
            'inventory_sync_errors': [
                {
                    'product_id': 12,
                    'sku': 'TOTE-01',
                    'delta': -2,
                    'status': 'shipped',
                    'error': 'EXTERNAL_SYSTEM_UNAVAILABLE',
                    'message': '...',
                    'timestamp': '2026-10-19T05:00:00+00:00',
                },
                ...
            ]
        }
    """

    shop = models.ForeignKey(
        "fulfillman.Shop",
        on_delete=models.PROTECT,
        related_name="orders",
        verbose_name=_("Shop"),
    )
    customer = models.ForeignKey(
        "fulfillman.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
        verbose_name=_("Customer"),
    )
    order_number = models.CharField(
        max_length=30,
        unique=True,
        blank=True,
        verbose_name=_("Order number"),
        help_text=_("Auto-generated as YYYYMMDD-NNNN if empty"),
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.NEW,
        db_index=True,
        verbose_name=_("Status"),
    )
    total_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0"),
        verbose_name=_("Total amount"),
    )
    notes = models.TextField(blank=True, verbose_name=_("Notes"))
    ordered_at = models.DateTimeField(default=timezone.now, verbose_name=_("ordered at"))
    shipped_at = models.DateTimeField(null=True, blank=True, verbose_name=_("shipped at"))
    metadata = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_("Metadata"),
        help_text=_("Inventory sync errors and other side-channel data"),
    )
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "fulfillman_order"
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        ordering = ["-ordered_at"]
        indexes = [
            models.Index(fields=["shop", "status"], name="fulfillman_ord_shop_st_idx"),
            models.Index(fields=["customer", "ordered_at"], name="fulfillman_ord_cust_date_idx"),
        ]

    def __str__(self) -> str:
        return self.order_number or f"Order-{self.pk}"

    def save(self, *args, **kwargs):
        """Override save to auto-generate order_number."""
        if not self.order_number:
            self.order_number = self._generate_number()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.status == OrderStatus.SHIPPED:
            raise InvalidStatus(
                order=self.order_number,
                current=self.status,
                message="Shipped orders cannot be deleted",
            )
        return super().delete(*args, **kwargs)

    def _generate_number(self) -> str:
        from fulfillman.models.sequence import CodeSequence

        day = timezone.localdate(self.ordered_at) if self.ordered_at else timezone.localdate()
        return CodeSequence.next_code(f"{day:%Y%m%d}-")

    # ══════════════════════════════════════════════════════════════
    # BUSINESS LOGIC (encapsulated in model!)
    # ══════════════════════════════════════════════════════════════

    def set_status(
        self,
        status: str,
        *,
        allocate_materials: bool = False,
        user=None,
    ) -> list[StockAdjustment]:
        """
        Move the order to ``status``.

        Args:
            status: Target status (new, manufacturing, completed, shipped)
            allocate_materials: On ``manufacturing``, debit BOM materials for
                every line within the same transaction
            user: User recorded in the order history (optional)

        Behavior:
            - Status and finished-goods cache change in ONE transaction
            - ``completed`` adds each line's quantity to the product cache
            - ``shipped`` removes it (clamped at zero) and stamps shipped_at once
            - Backward transitions are rejected; ``shipped`` is terminal
            - Setting the current status again is a no-op
            - After commit, emits ``order_status_changed`` (inventory sync +
              notification; failures there never undo the transition)

        Returns:
            Finished-goods adjustments applied to the local cache
        """
        from fulfillman.services.ledger import run_with_retries

        try:
            status = OrderStatus(status)
        except ValueError:
            raise InvalidStatus(order=self.order_number, requested=status)

        return run_with_retries(
            self._transition, status, allocate_materials=allocate_materials, user=user
        )

    def _transition(self, status, *, allocate_materials, user) -> list[StockAdjustment]:
        with transaction.atomic():
            locked = Order.objects.select_for_update().get(pk=self.pk)
            previous = OrderStatus(locked.status)

            if status == previous:
                logger.info(
                    f"Order {locked.order_number} already {status}, nothing to do",
                    extra={"order": locked.order_number, "status": status},
                )
                self._copy_state(locked)
                return []

            self._check_transition(locked, previous, status)

            locked.status = status
            update_fields = ["status", "updated_at"]
            if status == OrderStatus.SHIPPED and locked.shipped_at is None:
                locked.shipped_at = timezone.now()
                update_fields.append("shipped_at")
            if user is not None:
                locked._history_user = user
            locked.save(update_fields=update_fields)

            if allocate_materials and status == OrderStatus.MANUFACTURING:
                locked._allocate_materials()

            adjustments = locked._apply_finished_goods(status)

            transaction.on_commit(
                partial(locked._emit_status_changed, previous, status, adjustments)
            )

        self._copy_state(locked)

        logger.info(
            f"Order {locked.order_number}: {previous} → {status}",
            extra={
                "order": locked.order_number,
                "previous_status": previous,
                "status": status,
                "adjustments": len(adjustments),
            },
        )
        return adjustments

    def _copy_state(self, other: "Order") -> None:
        self.status = other.status
        self.shipped_at = other.shipped_at
        self.updated_at = other.updated_at

    @staticmethod
    def _check_transition(order, previous: OrderStatus, status: OrderStatus) -> None:
        current_index = STATUS_SEQUENCE.index(previous)
        target_index = STATUS_SEQUENCE.index(status)

        if target_index < current_index:
            raise InvalidStatus(
                order=order.order_number,
                current=previous,
                requested=status,
                message="Orders never move backward",
            )

        strict = get_setting("STRICT_STATUS_TRANSITIONS")
        if strict and target_index != current_index + 1:
            raise InvalidStatus(
                order=order.order_number,
                current=previous,
                requested=status,
                expected=STATUS_SEQUENCE[current_index + 1],
            )

    def _allocate_materials(self) -> None:
        """Debit BOM materials for every line (all-or-nothing with the status)."""
        from fulfillman.exceptions import BomNotConfigured
        from fulfillman.services.allocation import allocate

        for item in self.items.select_related("product"):
            if item.product is None:
                logger.warning(
                    f"Order {self.order_number}: line '{item.product_name}' has no product, "
                    "skipping material allocation"
                )
                continue
            try:
                allocate(item.product, item.quantity, order=self)
            except BomNotConfigured:
                logger.info(
                    f"Order {self.order_number}: no BOM for {item.product}, skipping allocation",
                    extra={"order": self.order_number, "product_id": item.product_id},
                )

    def _apply_finished_goods(self, status: OrderStatus) -> list[StockAdjustment]:
        """Update the local finished-goods cache for ``completed`` / ``shipped``."""
        from fulfillman.models.catalog import Product

        if status == OrderStatus.COMPLETED:
            sign = 1
        elif status == OrderStatus.SHIPPED:
            sign = -1
        else:
            return []

        adjustments = []
        for item in self.items.all():
            if item.product_id is None:
                logger.warning(
                    f"Order {self.order_number}: line '{item.product_name}' has no product, "
                    "skipping stock adjustment"
                )
                continue

            product = Product.objects.select_for_update().get(pk=item.product_id)
            before = product.inventory_quantity
            delta = sign * item.quantity
            after = before + delta

            if after < 0:
                logger.warning(
                    f"Order {self.order_number}: shipping {item.quantity} of {product} "
                    f"exceeds cached stock {before}, clamping at 0",
                    extra={
                        "order": self.order_number,
                        "product_id": product.pk,
                        "cached": before,
                        "shipped": item.quantity,
                    },
                )
                after = 0

            Product.objects.filter(pk=product.pk).update(inventory_quantity=after)
            adjustments.append(
                StockAdjustment(
                    product_id=product.pk,
                    sku=product.sku,
                    delta=delta,
                    cached_before=before,
                    cached_after=after,
                )
            )

        return adjustments

    def _emit_status_changed(self, previous, status, adjustments):
        """Send order_status_changed (runs only after commit)."""
        from fulfillman.signals import order_status_changed

        responses = order_status_changed.send_robust(
            sender=self.__class__,
            order=self,
            previous_status=previous,
            status=status,
            adjustments=adjustments,
        )
        for receiver, response in responses:
            if isinstance(response, Exception):
                logger.error(
                    f"order_status_changed receiver {receiver.__name__} failed for "
                    f"order {self.order_number}: {response}",
                    extra={"order": self.order_number},
                )

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def is_shipped(self) -> bool:
        return self.status == OrderStatus.SHIPPED

    @property
    def customer_name(self) -> str:
        return self.customer.company_name if self.customer_id else ""

    @property
    def inventory_sync_errors(self) -> list[dict]:
        return self.metadata.get("inventory_sync_errors", [])


class OrderItem(models.Model):
    """
    Snapshot of a product at order time.

    product_name / sku / unit_price are copied so later catalog edits do not
    rewrite historical orders. Never mutated after creation.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("Order"),
    )
    product = models.ForeignKey(
        "fulfillman.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
        verbose_name=_("Product"),
    )
    product_name = models.CharField(max_length=255, verbose_name=_("Product name"))
    sku = models.CharField(max_length=100, blank=True, verbose_name=_("SKU"))
    quantity = models.PositiveIntegerField(verbose_name=_("Quantity"))
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_("Unit price"),
    )
    subtotal = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        verbose_name=_("Subtotal"),
    )

    class Meta:
        db_table = "fulfillman_order_item"
        verbose_name = _("Order item")
        verbose_name_plural = _("Order items")
        ordering = ["order", "id"]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise FulfillError("ORDER_ITEM_IMMUTABLE", order_item_id=self.pk)
        self.subtotal = self.unit_price * self.quantity
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product_name} × {self.quantity}"
