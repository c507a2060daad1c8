"""
Supplier, PurchaseOrder and PurchaseOrderItem models.

Receiving a purchase order is the inbound counterpart of BOM allocation:
every line becomes an ``in`` ledger entry and refreshes the material's
unit price (last purchase price wins).
"""

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from fulfillman.exceptions import InvalidStatus

logger = logging.getLogger(__name__)


class PurchaseOrderStatus(models.TextChoices):
    """PurchaseOrder lifecycle status."""

    DRAFT = "draft", _("Draft")
    ORDERED = "ordered", _("Ordered")
    RECEIVED = "received", _("Received")
    CANCELLED = "cancelled", _("Cancelled")


ALLOWED_TRANSITIONS = {
    PurchaseOrderStatus.DRAFT: {
        PurchaseOrderStatus.ORDERED,
        PurchaseOrderStatus.RECEIVED,
        PurchaseOrderStatus.CANCELLED,
    },
    PurchaseOrderStatus.ORDERED: {
        PurchaseOrderStatus.RECEIVED,
        PurchaseOrderStatus.CANCELLED,
    },
    PurchaseOrderStatus.RECEIVED: set(),
    PurchaseOrderStatus.CANCELLED: set(),
}


class Supplier(models.Model):
    """Raw material supplier."""

    shop = models.ForeignKey(
        "fulfillman.Shop",
        on_delete=models.CASCADE,
        related_name="suppliers",
        verbose_name=_("Shop"),
    )
    name = models.CharField(max_length=200, verbose_name=_("Name"))
    email = models.EmailField(blank=True, verbose_name=_("Email"))
    phone = models.CharField(max_length=50, blank=True, verbose_name=_("Phone"))

    class Meta:
        db_table = "fulfillman_supplier"
        verbose_name = _("Supplier")
        verbose_name_plural = _("Suppliers")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class PurchaseOrder(models.Model):
    """
    Purchase order for raw materials.

    Status: DRAFT → ORDERED → RECEIVED
                  ↘ CANCELLED
    RECEIVED and CANCELLED are terminal, so stock is never received twice.
    """

    shop = models.ForeignKey(
        "fulfillman.Shop",
        on_delete=models.PROTECT,
        related_name="purchase_orders",
        verbose_name=_("Shop"),
    )
    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="purchase_orders",
        verbose_name=_("Supplier"),
    )
    order_number = models.CharField(
        max_length=30,
        unique=True,
        blank=True,
        verbose_name=_("PO number"),
        help_text=_("Auto-generated as PO-YYYYMM-NNNN if empty"),
    )
    status = models.CharField(
        max_length=20,
        choices=PurchaseOrderStatus.choices,
        default=PurchaseOrderStatus.DRAFT,
        db_index=True,
        verbose_name=_("Status"),
    )
    total_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0"),
        verbose_name=_("Total amount"),
    )
    expected_delivery_date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_("Expected delivery"),
    )
    notes = models.TextField(blank=True, verbose_name=_("Notes"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    ordered_at = models.DateTimeField(null=True, blank=True, verbose_name=_("ordered at"))
    received_at = models.DateTimeField(null=True, blank=True, verbose_name=_("received at"))

    class Meta:
        db_table = "fulfillman_purchase_order"
        verbose_name = _("Purchase order")
        verbose_name_plural = _("Purchase orders")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.order_number or f"PO-{self.pk}"

    def save(self, *args, **kwargs):
        if not self.order_number:
            from fulfillman.models.sequence import CodeSequence

            self.order_number = CodeSequence.next_code(
                f"PO-{timezone.localdate():%Y%m}-"
            )
        super().save(*args, **kwargs)

    def set_status(self, status: str) -> None:
        """
        Move the purchase order to ``status``.

        ``received`` writes one ``in`` ledger entry per line and refreshes
        each material's unit price, in the same transaction as the status.
        """
        from fulfillman.services.ledger import run_with_retries

        try:
            status = PurchaseOrderStatus(status)
        except ValueError:
            raise InvalidStatus(purchase_order=self.order_number, requested=status)

        run_with_retries(self._transition, status)

    def _transition(self, status) -> None:
        with transaction.atomic():
            locked = PurchaseOrder.objects.select_for_update().get(pk=self.pk)
            current = PurchaseOrderStatus(locked.status)

            if status not in ALLOWED_TRANSITIONS[current]:
                raise InvalidStatus(
                    purchase_order=locked.order_number,
                    current=current,
                    requested=status,
                )

            locked.status = status
            update_fields = ["status"]
            if status == PurchaseOrderStatus.ORDERED:
                locked.ordered_at = timezone.now()
                update_fields.append("ordered_at")
            elif status == PurchaseOrderStatus.RECEIVED:
                locked.received_at = timezone.now()
                update_fields.append("received_at")
                locked._receive_items()

            locked.save(update_fields=update_fields)

        self.status = locked.status
        self.ordered_at = locked.ordered_at
        self.received_at = locked.received_at

        logger.info(
            f"Purchase order {locked.order_number}: {current} → {status}",
            extra={"purchase_order": locked.order_number, "status": status},
        )

    def _receive_items(self) -> None:
        from fulfillman.models.material import Material, TransactionType
        from fulfillman.services import ledger

        for item in self.items.select_related("material"):
            ledger.record(
                item.material,
                TransactionType.IN,
                item.quantity,
                purchase_order=self,
                unit_price=item.unit_price,
                notes=f"Purchase order receipt ({self.order_number})",
            )
            # Last purchase price wins (no weighted average).
            Material.objects.filter(pk=item.material_id).update(unit_price=item.unit_price)


class PurchaseOrderItem(models.Model):
    """Line of a purchase order."""

    purchase_order = models.ForeignKey(
        PurchaseOrder,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("Purchase order"),
    )
    material = models.ForeignKey(
        "fulfillman.Material",
        on_delete=models.PROTECT,
        related_name="purchase_order_items",
        verbose_name=_("Material"),
    )
    quantity = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        verbose_name=_("Quantity"),
    )
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
        db_table = "fulfillman_purchase_order_item"
        verbose_name = _("Purchase order item")
        verbose_name_plural = _("Purchase order items")
        ordering = ["purchase_order", "id"]

    def clean(self):
        super().clean()
        if self.quantity is not None and self.quantity <= 0:
            raise ValidationError({"quantity": _("Must be greater than zero.")})
        if self.unit_price is not None and self.unit_price < 0:
            raise ValidationError({"unit_price": _("Must not be negative.")})

    def save(self, *args, **kwargs):
        self.subtotal = (self.quantity * self.unit_price).quantize(Decimal("0.01"))
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.material} × {self.quantity}"
