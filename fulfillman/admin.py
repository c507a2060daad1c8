"""
Fulfillman Admin - Django admin for catalog, materials, orders and purchasing.

``Material.current_stock`` is read-only everywhere: stock only changes
through ledger entries, which are created (never edited) from the
transaction admin or the inline on the material page.
"""

from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from fulfillman.models import (
    BOMEntry,
    Customer,
    Material,
    MaterialTransaction,
    Order,
    OrderItem,
    Product,
    PurchaseOrder,
    PurchaseOrderItem,
    Shop,
    Supplier,
)
from fulfillman.services import ledger


# ── Catalog ──


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = ("name", "shop_domain", "created_at")
    search_fields = ("name", "shop_domain")


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("company_name", "shop", "email", "phone")
    list_filter = ("shop",)
    search_fields = ("company_name", "email")


class BOMEntryInline(admin.TabularInline):
    """Inline for the product's Bill of Materials."""

    model = BOMEntry
    extra = 1
    fields = ("material", "quantity_per_unit")
    raw_id_fields = ("material",)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("title", "sku", "price", "inventory_quantity", "is_active", "synced_at")
    list_filter = ("shop", "is_active")
    search_fields = ("title", "sku")
    readonly_fields = ("synced_at",)
    inlines = [BOMEntryInline]


# ── Materials ──


class MaterialTransactionInline(admin.TabularInline):
    """Read-only view of the ledger on the material page."""

    model = MaterialTransaction
    extra = 0
    fields = ("date", "type", "quantity", "order", "purchase_order", "unit_price", "notes")
    readonly_fields = fields
    can_delete = False
    show_change_link = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Material)
class MaterialAdmin(SimpleHistoryAdmin):
    list_display = ("name", "code", "unit", "current_stock", "safety_stock", "unit_price")
    list_filter = ("shop", "unit")
    search_fields = ("name", "code")
    readonly_fields = ("current_stock", "created_at", "updated_at")
    inlines = [MaterialTransactionInline]


@admin.register(MaterialTransaction)
class MaterialTransactionAdmin(admin.ModelAdmin):
    """Ledger entries: create only, through the ledger service."""

    list_display = ("date", "material", "type", "quantity", "order", "purchase_order")
    list_filter = ("type", "date")
    search_fields = ("material__name", "notes")
    raw_id_fields = ("material", "order", "purchase_order")
    date_hierarchy = "date"

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return [f.name for f in self.model._meta.fields]
        return ("created_at",)

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        entry = ledger.record(
            obj.material,
            obj.type,
            obj.quantity,
            order=obj.order,
            purchase_order=obj.purchase_order,
            unit_price=obj.unit_price,
            notes=obj.notes,
            date=obj.date,
        )
        obj.pk = entry.pk
        obj._state.adding = False


@admin.register(BOMEntry)
class BOMEntryAdmin(SimpleHistoryAdmin):
    list_display = ("product", "material", "quantity_per_unit")
    list_filter = ("product__shop",)
    raw_id_fields = ("product", "material")


# ── Orders ──


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("product", "product_name", "sku", "quantity", "unit_price", "subtotal")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(SimpleHistoryAdmin):
    """
    Orders. Status is read-only here; use the ``set_status_*`` actions so
    transitions run through Order.set_status().
    """

    list_display = ("order_number", "customer", "status", "total_amount", "ordered_at", "shipped_at")
    list_filter = ("status", "shop")
    search_fields = ("order_number", "customer__company_name")
    date_hierarchy = "ordered_at"
    readonly_fields = ("order_number", "status", "total_amount", "shipped_at", "metadata", "updated_at")
    inlines = [OrderItemInline]
    actions = ["mark_manufacturing", "mark_completed", "mark_shipped"]

    def _set_status(self, request, queryset, status):
        for order in queryset:
            order.set_status(status, user=request.user)
        self.message_user(request, f"{queryset.count()} order(s) → {status}")

    @admin.action(description="Mark as manufacturing (allocate materials)")
    def mark_manufacturing(self, request, queryset):
        for order in queryset:
            order.set_status("manufacturing", allocate_materials=True, user=request.user)
        self.message_user(request, f"{queryset.count()} order(s) → manufacturing")

    @admin.action(description="Mark as completed")
    def mark_completed(self, request, queryset):
        self._set_status(request, queryset, "completed")

    @admin.action(description="Mark as shipped")
    def mark_shipped(self, request, queryset):
        self._set_status(request, queryset, "shipped")


# ── Purchasing ──


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "shop", "email", "phone")
    list_filter = ("shop",)
    search_fields = ("name",)


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 1
    fields = ("material", "quantity", "unit_price", "subtotal")
    readonly_fields = ("subtotal",)
    raw_id_fields = ("material",)


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "supplier", "status", "total_amount", "expected_delivery_date")
    list_filter = ("status", "shop")
    search_fields = ("order_number", "supplier__name")
    readonly_fields = ("order_number", "status", "ordered_at", "received_at", "created_at")
    inlines = [PurchaseOrderItemInline]
    actions = ["mark_received"]

    @admin.action(description="Receive (books stock into the ledger)")
    def mark_received(self, request, queryset):
        for purchase_order in queryset:
            purchase_order.set_status("received")
        self.message_user(request, f"{queryset.count()} purchase order(s) received")
