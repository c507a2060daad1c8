"""
Initial migration for Fulfillman.

Creates:
- Shop, Customer, Product (catalog mirror)
- Material, MaterialTransaction (ledger), BOMEntry
- Order, OrderItem
- Supplier, PurchaseOrder, PurchaseOrderItem
- CodeSequence
- History tables for Material, BOMEntry and Order
"""

import django.db.models.deletion
import django.utils.timezone
import simple_history.models
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # ══════════════════════════════════════════════════════════════
        # CATALOG
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Shop",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="Company name")),
                (
                    "shop_domain",
                    models.CharField(
                        help_text="Platform domain, e.g. example.myshopify.com",
                        max_length=255,
                        unique=True,
                        verbose_name="Shop domain",
                    ),
                ),
                (
                    "access_token",
                    models.CharField(
                        blank=True,
                        help_text="Admin API token used for inventory sync",
                        max_length=255,
                        verbose_name="Access token",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "Shop",
                "verbose_name_plural": "Shops",
                "db_table": "fulfillman_shop",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("company_name", models.CharField(max_length=200, verbose_name="Company name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="Email")),
                ("phone", models.CharField(blank=True, max_length=50, verbose_name="Phone")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "shop",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="customers",
                        to="fulfillman.shop",
                        verbose_name="Shop",
                    ),
                ),
            ],
            options={
                "verbose_name": "Customer",
                "verbose_name_plural": "Customers",
                "db_table": "fulfillman_customer",
                "ordering": ["company_name"],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "external_id",
                    models.BigIntegerField(
                        blank=True,
                        help_text="Product id in the commerce platform",
                        null=True,
                        verbose_name="External ID",
                    ),
                ),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("sku", models.CharField(blank=True, max_length=100, verbose_name="SKU")),
                (
                    "price",
                    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12, verbose_name="Price"),
                ),
                (
                    "inventory_quantity",
                    models.IntegerField(
                        default=0,
                        help_text="Local mirror of the platform quantity",
                        verbose_name="Finished goods (cached)",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("synced_at", models.DateTimeField(blank=True, null=True, verbose_name="synced at")),
                (
                    "shop",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="products",
                        to="fulfillman.shop",
                        verbose_name="Shop",
                    ),
                ),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "db_table": "fulfillman_product",
                "ordering": ["title"],
                "indexes": [models.Index(fields=["shop", "sku"], name="fulfillman_prod_shop_sku_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("shop", "external_id"),
                        name="fulfillman_product_unique_external_id",
                    )
                ],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # PURCHASING (suppliers first: referenced by the ledger)
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Supplier",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="Email")),
                ("phone", models.CharField(blank=True, max_length=50, verbose_name="Phone")),
                (
                    "shop",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="suppliers",
                        to="fulfillman.shop",
                        verbose_name="Shop",
                    ),
                ),
            ],
            options={
                "verbose_name": "Supplier",
                "verbose_name_plural": "Suppliers",
                "db_table": "fulfillman_supplier",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "order_number",
                    models.CharField(
                        blank=True,
                        help_text="Auto-generated as PO-YYYYMM-NNNN if empty",
                        max_length=30,
                        unique=True,
                        verbose_name="PO number",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("ordered", "Ordered"),
                            ("received", "Received"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="draft",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0"), max_digits=14, verbose_name="Total amount"
                    ),
                ),
                (
                    "expected_delivery_date",
                    models.DateField(blank=True, null=True, verbose_name="Expected delivery"),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("ordered_at", models.DateTimeField(blank=True, null=True, verbose_name="ordered at")),
                ("received_at", models.DateTimeField(blank=True, null=True, verbose_name="received at")),
                (
                    "shop",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchase_orders",
                        to="fulfillman.shop",
                        verbose_name="Shop",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchase_orders",
                        to="fulfillman.supplier",
                        verbose_name="Supplier",
                    ),
                ),
            ],
            options={
                "verbose_name": "Purchase order",
                "verbose_name_plural": "Purchase orders",
                "db_table": "fulfillman_purchase_order",
                "ordering": ["-created_at"],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # MATERIALS
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Material",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("code", models.CharField(blank=True, max_length=50, verbose_name="Code")),
                (
                    "unit",
                    models.CharField(default="kg", help_text="kg, m, pcs, L...", max_length=20, verbose_name="Unit"),
                ),
                (
                    "current_stock",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        editable=False,
                        help_text="Derived from the transaction ledger",
                        max_digits=14,
                        verbose_name="Current stock",
                    ),
                ),
                (
                    "safety_stock",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        help_text="Low-stock alert threshold",
                        max_digits=14,
                        verbose_name="Safety stock",
                    ),
                ),
                (
                    "unit_price",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Latest purchase price",
                        max_digits=12,
                        null=True,
                        verbose_name="Unit price",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "shop",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="materials",
                        to="fulfillman.shop",
                        verbose_name="Shop",
                    ),
                ),
            ],
            options={
                "verbose_name": "Material",
                "verbose_name_plural": "Materials",
                "db_table": "fulfillman_material",
                "ordering": ["name"],
                "indexes": [models.Index(fields=["shop", "name"], name="fulfillman_mat_shop_name_idx")],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # ORDERS
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "order_number",
                    models.CharField(
                        blank=True,
                        help_text="Auto-generated as YYYYMMDD-NNNN if empty",
                        max_length=30,
                        unique=True,
                        verbose_name="Order number",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("new", "New"),
                            ("manufacturing", "Manufacturing"),
                            ("completed", "Completed"),
                            ("shipped", "Shipped"),
                        ],
                        db_index=True,
                        default="new",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0"), max_digits=14, verbose_name="Total amount"
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("ordered_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="ordered at")),
                ("shipped_at", models.DateTimeField(blank=True, null=True, verbose_name="shipped at")),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Inventory sync errors and other side-channel data",
                        verbose_name="Metadata",
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="fulfillman.customer",
                        verbose_name="Customer",
                    ),
                ),
                (
                    "shop",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="fulfillman.shop",
                        verbose_name="Shop",
                    ),
                ),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "db_table": "fulfillman_order",
                "ordering": ["-ordered_at"],
                "indexes": [
                    models.Index(fields=["shop", "status"], name="fulfillman_ord_shop_st_idx"),
                    models.Index(fields=["customer", "ordered_at"], name="fulfillman_ord_cust_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(max_length=255, verbose_name="Product name")),
                ("sku", models.CharField(blank=True, max_length=100, verbose_name="SKU")),
                ("quantity", models.PositiveIntegerField(verbose_name="Quantity")),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="Unit price")),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="Subtotal")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="fulfillman.order",
                        verbose_name="Order",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="order_items",
                        to="fulfillman.product",
                        verbose_name="Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Order item",
                "verbose_name_plural": "Order items",
                "db_table": "fulfillman_order_item",
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseOrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=4, max_digits=14, verbose_name="Quantity")),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="Unit price")),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="Subtotal")),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchase_order_items",
                        to="fulfillman.material",
                        verbose_name="Material",
                    ),
                ),
                (
                    "purchase_order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="fulfillman.purchaseorder",
                        verbose_name="Purchase order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Purchase order item",
                "verbose_name_plural": "Purchase order items",
                "db_table": "fulfillman_purchase_order_item",
                "ordering": ["purchase_order", "id"],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # LEDGER + BOM
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="MaterialTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "type",
                    models.CharField(choices=[("in", "In"), ("out", "Out")], max_length=3, verbose_name="Type"),
                ),
                ("quantity", models.DecimalField(decimal_places=4, max_digits=14, verbose_name="Quantity")),
                ("date", models.DateField(default=django.utils.timezone.localdate, verbose_name="Date")),
                (
                    "unit_price",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=12, null=True, verbose_name="Unit price"
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="fulfillman.material",
                        verbose_name="Material",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        help_text="Order whose manufacturing run consumed this material",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="material_transactions",
                        to="fulfillman.order",
                        verbose_name="Order",
                    ),
                ),
                (
                    "purchase_order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="material_transactions",
                        to="fulfillman.purchaseorder",
                        verbose_name="Purchase order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Material transaction",
                "verbose_name_plural": "Material transactions",
                "db_table": "fulfillman_material_transaction",
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["material", "type"], name="fulfillman_mtx_mat_type_idx"),
                    models.Index(fields=["order"], name="fulfillman_mtx_order_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BOMEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "quantity_per_unit",
                    models.DecimalField(
                        decimal_places=4,
                        help_text="Material consumed per manufactured unit",
                        max_digits=12,
                        verbose_name="Quantity per unit",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bom_entries",
                        to="fulfillman.material",
                        verbose_name="Material",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bom_entries",
                        to="fulfillman.product",
                        verbose_name="Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "BOM entry",
                "verbose_name_plural": "BOM entries",
                "db_table": "fulfillman_bom_entry",
                "ordering": ["product", "material"],
                "unique_together": {("product", "material")},
            },
        ),
        migrations.CreateModel(
            name="CodeSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("prefix", models.CharField(max_length=50, unique=True, verbose_name="Prefix")),
                ("last_value", models.PositiveIntegerField(default=0, verbose_name="Last value")),
            ],
            options={
                "verbose_name": "Code sequence",
                "verbose_name_plural": "Code sequences",
                "db_table": "fulfillman_code_sequence",
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # HISTORY (django-simple-history)
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="HistoricalMaterial",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("code", models.CharField(blank=True, max_length=50, verbose_name="Code")),
                (
                    "unit",
                    models.CharField(default="kg", help_text="kg, m, pcs, L...", max_length=20, verbose_name="Unit"),
                ),
                (
                    "safety_stock",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        help_text="Low-stock alert threshold",
                        max_digits=14,
                        verbose_name="Safety stock",
                    ),
                ),
                (
                    "unit_price",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Latest purchase price",
                        max_digits=12,
                        null=True,
                        verbose_name="Unit price",
                    ),
                ),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(
                        choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                        max_length=1,
                    ),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "shop",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="fulfillman.shop",
                        verbose_name="Shop",
                    ),
                ),
            ],
            options={
                "verbose_name": "historical Material",
                "verbose_name_plural": "historical Materials",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalBOMEntry",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                (
                    "quantity_per_unit",
                    models.DecimalField(
                        decimal_places=4,
                        help_text="Material consumed per manufactured unit",
                        max_digits=12,
                        verbose_name="Quantity per unit",
                    ),
                ),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(
                        choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                        max_length=1,
                    ),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "material",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="fulfillman.material",
                        verbose_name="Material",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="fulfillman.product",
                        verbose_name="Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "historical BOM entry",
                "verbose_name_plural": "historical BOM entries",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalOrder",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                (
                    "order_number",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Auto-generated as YYYYMMDD-NNNN if empty",
                        max_length=30,
                        verbose_name="Order number",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("new", "New"),
                            ("manufacturing", "Manufacturing"),
                            ("completed", "Completed"),
                            ("shipped", "Shipped"),
                        ],
                        db_index=True,
                        default="new",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0"), max_digits=14, verbose_name="Total amount"
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("ordered_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="ordered at")),
                ("shipped_at", models.DateTimeField(blank=True, null=True, verbose_name="shipped at")),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Inventory sync errors and other side-channel data",
                        verbose_name="Metadata",
                    ),
                ),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(
                        choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                        max_length=1,
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="fulfillman.customer",
                        verbose_name="Customer",
                    ),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "shop",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="fulfillman.shop",
                        verbose_name="Shop",
                    ),
                ),
            ],
            options={
                "verbose_name": "historical Order",
                "verbose_name_plural": "historical Orders",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
