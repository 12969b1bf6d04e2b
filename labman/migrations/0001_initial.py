"""
Initial Labman schema.

- Catalog: RawMaterial, Product, ProductComponent (+ history)
- People: Client, Employee
- Orders: Order, OrderLine
- Invoices: Invoice, InvoiceLine
- AccessGroup, CodeSequence
"""

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import simple_history.models
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


PRODUCT_KINDS = [("product", "Product"), ("service", "Service")]
ORDER_STATUSES = [
    ("new", "New"),
    ("in_progress", "In progress"),
    ("finished", "Finished"),
    ("delivered", "Delivered"),
    ("cancelled", "Cancelled"),
]
PAYMENT_METHODS = [("cash", "Cash"), ("card", "Card"), ("cas_decision", "CAS decision")]
INVOICE_STATUSES = [("issued", "Issued"), ("paid", "Paid"), ("cancelled", "Cancelled")]
HISTORY_TYPES = [("+", "Created"), ("~", "Changed"), ("-", "Deleted")]


def _id():
    return models.BigAutoField(
        auto_created=True,
        primary_key=True,
        serialize=False,
        verbose_name="ID",
    )


def _history_id():
    return models.BigIntegerField(
        auto_created=True, blank=True, db_index=True, verbose_name="ID"
    )


def _money(verbose_name):
    return models.DecimalField(
        decimal_places=2,
        default=Decimal("0"),
        max_digits=14,
        verbose_name=verbose_name,
    )


def _history_fields():
    return [
        ("history_id", models.AutoField(primary_key=True, serialize=False)),
        ("history_date", models.DateTimeField(db_index=True)),
        ("history_change_reason", models.CharField(max_length=100, null=True)),
        ("history_type", models.CharField(choices=HISTORY_TYPES, max_length=1)),
        (
            "history_user",
            models.ForeignKey(
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


HISTORY_OPTIONS = {
    "ordering": ("-history_date", "-history_id"),
    "get_latest_by": ("history_date", "history_id"),
}


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
            name="RawMaterial",
            fields=[
                ("id", _id()),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                (
                    "unit_price",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="Unit price",
                    ),
                ),
                (
                    "unit",
                    models.CharField(
                        default="buc",
                        help_text="buc, kg, m, l...",
                        max_length=20,
                        verbose_name="Unit of measure",
                    ),
                ),
                (
                    "stock",
                    models.DecimalField(
                        decimal_places=3,
                        default=Decimal("0"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="Stock",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "Raw material",
                "verbose_name_plural": "Raw materials",
                "db_table": "labman_raw_material",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", _id()),
                (
                    "kind",
                    models.CharField(
                        choices=PRODUCT_KINDS,
                        db_index=True,
                        default="product",
                        max_length=20,
                        verbose_name="Kind",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                (
                    "labor_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="Labor price",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="derived",
                        to="labman.product",
                        verbose_name="Base product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "db_table": "labman_product",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["kind"], name="labman_product_kind_idx"),
                    models.Index(fields=["parent"], name="labman_product_parent_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductComponent",
            fields=[
                ("id", _id()),
                (
                    "quantity",
                    models.DecimalField(decimal_places=4, max_digits=12, verbose_name="Quantity"),
                ),
                (
                    "material",
                    models.ForeignKey(
                        db_constraint=False,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="labman.rawmaterial",
                        verbose_name="Raw material",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="components",
                        to="labman.product",
                        verbose_name="Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Component",
                "verbose_name_plural": "Components",
                "db_table": "labman_product_component",
                "ordering": ["product", "id"],
            },
        ),
        migrations.CreateModel(
            name="HistoricalRawMaterial",
            fields=[
                ("id", _history_id()),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                (
                    "unit_price",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="Unit price",
                    ),
                ),
                (
                    "unit",
                    models.CharField(
                        default="buc",
                        help_text="buc, kg, m, l...",
                        max_length=20,
                        verbose_name="Unit of measure",
                    ),
                ),
                (
                    "stock",
                    models.DecimalField(
                        decimal_places=3,
                        default=Decimal("0"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="Stock",
                    ),
                ),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
                *_history_fields(),
            ],
            options={
                "verbose_name": "historical Raw material",
                "verbose_name_plural": "historical Raw materials",
                **HISTORY_OPTIONS,
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalProduct",
            fields=[
                ("id", _history_id()),
                (
                    "kind",
                    models.CharField(
                        choices=PRODUCT_KINDS,
                        db_index=True,
                        default="product",
                        max_length=20,
                        verbose_name="Kind",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                (
                    "labor_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="Labor price",
                    ),
                ),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="labman.product",
                        verbose_name="Base product",
                    ),
                ),
                *_history_fields(),
            ],
            options={
                "verbose_name": "historical Product",
                "verbose_name_plural": "historical Products",
                **HISTORY_OPTIONS,
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        # ══════════════════════════════════════════════════════════════
        # PEOPLE
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Client",
            fields=[
                ("id", _id()),
                ("last_name", models.CharField(max_length=100, verbose_name="Last name")),
                ("first_name", models.CharField(max_length=100, verbose_name="First name")),
                (
                    "national_id",
                    models.CharField(
                        blank=True, help_text="CNP", max_length=20, verbose_name="National ID"
                    ),
                ),
                ("phone", models.CharField(blank=True, max_length=30, verbose_name="Phone")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="Email")),
                ("address", models.TextField(blank=True, verbose_name="Address")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "Client",
                "verbose_name_plural": "Clients",
                "db_table": "labman_client",
                "ordering": ["last_name", "first_name"],
            },
        ),
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", _id()),
                ("last_name", models.CharField(max_length=100, verbose_name="Last name")),
                ("first_name", models.CharField(max_length=100, verbose_name="First name")),
                ("job_title", models.CharField(blank=True, max_length=100, verbose_name="Job title")),
                ("phone", models.CharField(blank=True, max_length=30, verbose_name="Phone")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="Email")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "user",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="employee",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "Employee",
                "verbose_name_plural": "Employees",
                "db_table": "labman_employee",
                "ordering": ["last_name", "first_name"],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # ORDERS
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", _id()),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        help_text="Auto-generated if empty (CMD-YYYY-NNNN)",
                        max_length=50,
                        unique=True,
                        verbose_name="Code",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=ORDER_STATUSES,
                        db_index=True,
                        default="new",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        choices=PAYMENT_METHODS,
                        default="cash",
                        max_length=20,
                        verbose_name="Payment method",
                    ),
                ),
                (
                    "ordered_on",
                    models.DateField(
                        default=django.utils.timezone.localdate, verbose_name="Order date"
                    ),
                ),
                (
                    "estimated_delivery",
                    models.DateField(blank=True, null=True, verbose_name="Estimated delivery"),
                ),
                (
                    "delivered_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Delivered at"),
                ),
                (
                    "advance",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="Advance",
                    ),
                ),
                (
                    "cas_number",
                    models.CharField(blank=True, max_length=50, verbose_name="CAS decision number"),
                ),
                (
                    "cas_date",
                    models.DateField(blank=True, null=True, verbose_name="CAS decision date"),
                ),
                (
                    "cas_value",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="CAS decision value",
                    ),
                ),
                (
                    "total",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        editable=False,
                        max_digits=14,
                        verbose_name="Computed total",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "client",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="labman.client",
                        verbose_name="Client",
                    ),
                ),
                (
                    "technician",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to="labman.employee",
                        verbose_name="Technician",
                    ),
                ),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "db_table": "labman_order",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["status", "ordered_on"], name="labman_order_status_date_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderLine",
            fields=[
                ("id", _id()),
                (
                    "quantity",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("1"),
                        max_digits=10,
                        verbose_name="Quantity",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="labman.order",
                        verbose_name="Order",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        db_constraint=False,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="labman.product",
                        verbose_name="Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Order line",
                "verbose_name_plural": "Order lines",
                "db_table": "labman_order_line",
                "ordering": ["order", "id"],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # INVOICES
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("id", _id()),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        help_text="Auto-generated if empty (FACT-YYYY-NNNN)",
                        max_length=50,
                        unique=True,
                        verbose_name="Code",
                    ),
                ),
                ("order_code", models.CharField(blank=True, max_length=50, verbose_name="Order code")),
                ("client_last_name", models.CharField(max_length=100, verbose_name="Client last name")),
                ("client_first_name", models.CharField(max_length=100, verbose_name="Client first name")),
                (
                    "client_national_id",
                    models.CharField(blank=True, max_length=20, verbose_name="Client national ID"),
                ),
                ("client_phone", models.CharField(blank=True, max_length=30, verbose_name="Client phone")),
                (
                    "client_email",
                    models.EmailField(blank=True, max_length=254, verbose_name="Client email"),
                ),
                ("client_address", models.TextField(blank=True, verbose_name="Client address")),
                ("subtotal", _money("Subtotal")),
                (
                    "vat_percent",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("19"),
                        max_digits=5,
                        verbose_name="VAT %",
                    ),
                ),
                ("vat_total", _money("VAT")),
                ("total", _money("Total")),
                (
                    "payment_method",
                    models.CharField(
                        choices=PAYMENT_METHODS,
                        default="cash",
                        max_length=20,
                        verbose_name="Payment method",
                    ),
                ),
                ("advance", _money("Advance")),
                ("cas_value", _money("CAS decision value")),
                ("balance_due", _money("Balance due")),
                (
                    "issued_on",
                    models.DateField(
                        default=django.utils.timezone.localdate, verbose_name="Issue date"
                    ),
                ),
                ("due_on", models.DateField(blank=True, null=True, verbose_name="Due date")),
                (
                    "status",
                    models.CharField(
                        choices=INVOICE_STATUSES,
                        db_index=True,
                        default="issued",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="labman.order",
                        verbose_name="Order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Invoice",
                "verbose_name_plural": "Invoices",
                "db_table": "labman_invoice",
                "ordering": ["-issued_on", "-id"],
            },
        ),
        migrations.CreateModel(
            name="InvoiceLine",
            fields=[
                ("id", _id()),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                (
                    "quantity",
                    models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Quantity"),
                ),
                ("unit_price", _money("Unit price")),
                ("total", _money("Total")),
                (
                    "invoice",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="labman.invoice",
                        verbose_name="Invoice",
                    ),
                ),
            ],
            options={
                "verbose_name": "Invoice line",
                "verbose_name_plural": "Invoice lines",
                "db_table": "labman_invoice_line",
                "ordering": ["invoice", "id"],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # ACCESS & SEQUENCES
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="AccessGroup",
            fields=[
                ("id", _id()),
                ("name", models.CharField(max_length=100, unique=True, verbose_name="Name")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                (
                    "modules",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="List of module codes: ['orders', 'clients']",
                        verbose_name="Modules",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "users",
                    models.ManyToManyField(
                        blank=True,
                        related_name="access_groups",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Users",
                    ),
                ),
            ],
            options={
                "verbose_name": "Access group",
                "verbose_name_plural": "Access groups",
                "db_table": "labman_access_group",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="CodeSequence",
            fields=[
                ("id", _id()),
                ("prefix", models.CharField(max_length=50, unique=True, verbose_name="Prefix")),
                ("last_value", models.PositiveIntegerField(default=0, verbose_name="Last value")),
            ],
            options={
                "verbose_name": "Code sequence",
                "verbose_name_plural": "Code sequences",
                "db_table": "labman_code_sequence",
            },
        ),
    ]
