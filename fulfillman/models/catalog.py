"""
Shop, Customer and Product models.

Product is a local mirror of an item sold through the external commerce
platform. Its ``inventory_quantity`` is an advisory cache of finished goods;
the platform remains the system of record.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _


class Shop(models.Model):
    """A manufacturer storefront connected to the commerce platform."""

    name = models.CharField(
        max_length=200,
        verbose_name=_("Company name"),
    )
    shop_domain = models.CharField(
        max_length=255,
        unique=True,
        verbose_name=_("Shop domain"),
        help_text=_("Platform domain, e.g. example.myshopify.com"),
    )
    access_token = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_("Access token"),
        help_text=_("Admin API token used for inventory sync"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        db_table = "fulfillman_shop"
        verbose_name = _("Shop")
        verbose_name_plural = _("Shops")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Customer(models.Model):
    """B2B customer ordering from a shop."""

    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="customers",
        verbose_name=_("Shop"),
    )
    company_name = models.CharField(
        max_length=200,
        verbose_name=_("Company name"),
    )
    email = models.EmailField(blank=True, verbose_name=_("Email"))
    phone = models.CharField(max_length=50, blank=True, verbose_name=_("Phone"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        db_table = "fulfillman_customer"
        verbose_name = _("Customer")
        verbose_name_plural = _("Customers")
        ordering = ["company_name"]

    def __str__(self) -> str:
        return self.company_name


class Product(models.Model):
    """
    Sellable item mirrored from the commerce platform.

    ``external_id`` is the platform's product id; products without it are
    local-only and cannot be pushed to the external inventory.
    """

    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="products",
        verbose_name=_("Shop"),
    )
    external_id = models.BigIntegerField(
        null=True,
        blank=True,
        verbose_name=_("External ID"),
        help_text=_("Product id in the commerce platform"),
    )
    title = models.CharField(max_length=255, verbose_name=_("Title"))
    sku = models.CharField(max_length=100, blank=True, verbose_name=_("SKU"))
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        verbose_name=_("Price"),
    )
    inventory_quantity = models.IntegerField(
        default=0,
        verbose_name=_("Finished goods (cached)"),
        help_text=_("Local mirror of the platform quantity"),
    )
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))
    synced_at = models.DateTimeField(null=True, blank=True, verbose_name=_("synced at"))

    class Meta:
        db_table = "fulfillman_product"
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ["title"]
        indexes = [
            models.Index(fields=["shop", "sku"], name="fulfillman_prod_shop_sku_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "external_id"],
                name="fulfillman_product_unique_external_id",
            ),
        ]

    def clean(self):
        super().clean()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": _("Must not be negative.")})

    def __str__(self) -> str:
        if self.sku:
            return f"{self.title} ({self.sku})"
        return self.title
