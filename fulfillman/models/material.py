"""
Material and MaterialTransaction models.

Material = raw good tracked by the shop.
MaterialTransaction = immutable ledger entry (``in`` / ``out``).

``Material.current_stock`` is a materialized view of the ledger: it is only
written by ``fulfillman.services.ledger`` and ``Material.save()`` never
persists it for existing rows.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from fulfillman.exceptions import FulfillError


class TransactionType(models.TextChoices):
    """Ledger movement direction."""

    IN = "in", _("In")
    OUT = "out", _("Out")


class Material(models.Model):
    """
    Raw material with ledger-derived stock.

    Invariant: current_stock == Σ in − Σ out over its transactions, and
    never negative.
    """

    shop = models.ForeignKey(
        "fulfillman.Shop",
        on_delete=models.CASCADE,
        related_name="materials",
        verbose_name=_("Shop"),
    )
    name = models.CharField(max_length=200, verbose_name=_("Name"))
    code = models.CharField(max_length=50, blank=True, verbose_name=_("Code"))
    unit = models.CharField(
        max_length=20,
        default="kg",
        verbose_name=_("Unit"),
        help_text=_("kg, m, pcs, L..."),
    )
    current_stock = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal("0"),
        editable=False,
        verbose_name=_("Current stock"),
        help_text=_("Derived from the transaction ledger"),
    )
    safety_stock = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal("0"),
        verbose_name=_("Safety stock"),
        help_text=_("Low-stock alert threshold"),
    )
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_("Unit price"),
        help_text=_("Latest purchase price"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # The ledger is the stock history.
    history = HistoricalRecords(excluded_fields=["current_stock"])

    class Meta:
        db_table = "fulfillman_material"
        verbose_name = _("Material")
        verbose_name_plural = _("Materials")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["shop", "name"], name="fulfillman_mat_shop_name_idx"),
        ]

    def clean(self):
        super().clean()
        if self._state.adding and self.current_stock:
            raise ValidationError({
                "current_stock": _("Opening stock must be registered as an 'in' transaction.")
            })
        if self.safety_stock is not None and self.safety_stock < 0:
            raise ValidationError({"safety_stock": _("Must not be negative.")})
        if self.unit_price is not None and self.unit_price < 0:
            raise ValidationError({"unit_price": _("Must not be negative.")})

    def save(self, *args, **kwargs):
        self.full_clean()
        if not self._state.adding:
            update_fields = kwargs.get("update_fields")
            if update_fields is None:
                update_fields = [
                    f.name
                    for f in self._meta.concrete_fields
                    if not f.primary_key and f.name != "current_stock"
                ]
            kwargs["update_fields"] = [f for f in update_fields if f != "current_stock"]
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.name

    @property
    def is_below_safety_stock(self) -> bool:
        return self.safety_stock > 0 and self.current_stock <= self.safety_stock


class MaterialTransaction(models.Model):
    """
    Immutable ledger entry.

    Created on every stock-affecting event (manual in/out, BOM allocation,
    purchase-order receipt). Never updated or deleted.
    """

    material = models.ForeignKey(
        Material,
        on_delete=models.PROTECT,
        related_name="transactions",
        verbose_name=_("Material"),
    )
    type = models.CharField(
        max_length=3,
        choices=TransactionType.choices,
        verbose_name=_("Type"),
    )
    quantity = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        verbose_name=_("Quantity"),
    )
    date = models.DateField(default=timezone.localdate, verbose_name=_("Date"))
    order = models.ForeignKey(
        "fulfillman.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="material_transactions",
        verbose_name=_("Order"),
        help_text=_("Order whose manufacturing run consumed this material"),
    )
    purchase_order = models.ForeignKey(
        "fulfillman.PurchaseOrder",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="material_transactions",
        verbose_name=_("Purchase order"),
    )
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_("Unit price"),
    )
    notes = models.TextField(blank=True, verbose_name=_("Notes"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        db_table = "fulfillman_material_transaction"
        verbose_name = _("Material transaction")
        verbose_name_plural = _("Material transactions")
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["material", "type"], name="fulfillman_mtx_mat_type_idx"),
            models.Index(fields=["order"], name="fulfillman_mtx_order_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise FulfillError("TRANSACTION_IMMUTABLE", transaction_id=self.pk)
        if self.quantity is None or self.quantity <= 0:
            raise ValidationError({"quantity": _("Must be greater than zero.")})
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise FulfillError("TRANSACTION_IMMUTABLE", transaction_id=self.pk)

    def __str__(self) -> str:
        sign = "+" if self.type == TransactionType.IN else "-"
        return f"{self.material} {sign}{self.quantity} ({self.date})"

    @property
    def signed_quantity(self) -> Decimal:
        return self.quantity if self.type == TransactionType.IN else -self.quantity
