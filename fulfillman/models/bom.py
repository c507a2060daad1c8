"""
BOMEntry model.

BOMEntry = one line of a product's Bill of Materials: the amount of a
material consumed to manufacture ONE unit of the product.
"""

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords


class BOMEntry(models.Model):
    """
    (product, material) pairing with quantity_per_unit.

    At most one entry per pair.
    """

    product = models.ForeignKey(
        "fulfillman.Product",
        on_delete=models.CASCADE,
        related_name="bom_entries",
        verbose_name=_("Product"),
    )
    material = models.ForeignKey(
        "fulfillman.Material",
        on_delete=models.PROTECT,
        related_name="bom_entries",
        verbose_name=_("Material"),
    )
    quantity_per_unit = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        verbose_name=_("Quantity per unit"),
        help_text=_("Material consumed per manufactured unit"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "fulfillman_bom_entry"
        verbose_name = _("BOM entry")
        verbose_name_plural = _("BOM entries")
        ordering = ["product", "material"]
        unique_together = [["product", "material"]]

    def clean(self):
        super().clean()
        if self.quantity_per_unit is not None and self.quantity_per_unit <= 0:
            raise ValidationError({
                "quantity_per_unit": _("Must be greater than zero.")
            })
        if (
            self.product_id
            and self.material_id
            and self.product.shop_id != self.material.shop_id
        ):
            raise ValidationError(_("Product and material must belong to the same shop."))

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product} ← {self.material} ({self.quantity_per_unit} {self.material.unit})"
