"""
Labman Admin - Django admin for the lab catalog, orders and invoices.

RawMaterial and Product keep their change history (SimpleHistoryAdmin).
"""

from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from labman.models import (
    AccessGroup,
    Client,
    Employee,
    Invoice,
    InvoiceLine,
    Order,
    OrderLine,
    Product,
    ProductComponent,
    RawMaterial,
)

# ── Catalog ──


@admin.register(RawMaterial)
class RawMaterialAdmin(SimpleHistoryAdmin):
    """Admin for raw materials."""

    list_display = ("name", "unit", "unit_price", "stock", "updated_at")
    search_fields = ("name",)
    readonly_fields = ("created_at", "updated_at")


class ProductComponentInline(admin.TabularInline):
    """Inline for a product's own materials."""

    model = ProductComponent
    extra = 1
    fields = ("material", "quantity")
    raw_id_fields = ("material",)


@admin.register(Product)
class ProductAdmin(SimpleHistoryAdmin):
    """Admin for products and services."""

    list_display = ("name", "kind", "parent", "labor_price", "price")
    list_filter = ("kind",)
    search_fields = ("name", "description")
    raw_id_fields = ("parent",)
    inlines = [ProductComponentInline]
    readonly_fields = ("created_at", "updated_at")

    @admin.display(description="Price")
    def price(self, obj):
        from labman.service import Lab

        return round(Lab.price(obj).total, 2)


# ── People ──


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "national_id", "phone", "email")
    search_fields = ("last_name", "first_name", "national_id", "phone")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "job_title", "is_active", "user")
    list_filter = ("is_active",)
    search_fields = ("last_name", "first_name")
    raw_id_fields = ("user",)


# ── Orders ──


class OrderLineInline(admin.TabularInline):
    """Read-only lines; edit through the API so the total stays in sync."""

    model = OrderLine
    extra = 0
    fields = ("product", "quantity", "notes")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin for client orders."""

    list_display = ("code", "client", "status", "ordered_on", "total", "advance")
    list_filter = ("status", "payment_method")
    search_fields = ("code", "client__last_name", "client__first_name")
    date_hierarchy = "ordered_on"
    raw_id_fields = ("client", "technician")
    inlines = [OrderLineInline]
    readonly_fields = ("code", "total", "delivered_at", "created_at", "updated_at")
    actions = ["recalculate_totals"]

    @admin.action(description="Recalculate totals")
    def recalculate_totals(self, request, queryset):
        from labman.services.orders import recalculate_order

        for order in queryset:
            recalculate_order(order)
        self.message_user(request, f"{queryset.count()} order(s) recalculated.")


# ── Invoices ──


class InvoiceLineInline(admin.TabularInline):
    model = InvoiceLine
    extra = 0
    fields = ("name", "quantity", "unit_price", "total")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """Admin for invoices (documents are not edited after issue)."""

    list_display = ("code", "order_code", "client_name", "issued_on", "total", "balance_due", "status")
    list_filter = ("status", "payment_method")
    search_fields = ("code", "order_code", "client_last_name")
    date_hierarchy = "issued_on"
    inlines = [InvoiceLineInline]
    readonly_fields = (
        "code",
        "order",
        "order_code",
        "subtotal",
        "vat_total",
        "total",
        "balance_due",
        "created_at",
        "updated_at",
    )


# ── Access ──


@admin.register(AccessGroup)
class AccessGroupAdmin(admin.ModelAdmin):
    list_display = ("name", "modules")
    search_fields = ("name",)
    filter_horizontal = ("users",)
