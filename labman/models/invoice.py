"""
Invoice and InvoiceLine models.

An invoice is a frozen document: lines, prices and client data are
copied from the order at issue time and never recomputed.
"""

import logging
from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from labman.exceptions import LabError
from labman.models.order import PaymentMethod

logger = logging.getLogger(__name__)


class InvoiceStatus(models.TextChoices):
    ISSUED = "issued", _("Issued")
    PAID = "paid", _("Paid")
    CANCELLED = "cancelled", _("Cancelled")


def _money(**kwargs):
    return models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0"),
        **kwargs,
    )


class Invoice(models.Model):
    """Invoice issued for an order."""

    code = models.CharField(
        unique=True,
        max_length=50,
        blank=True,
        verbose_name=_("Code"),
        help_text=_("Auto-generated if empty (FACT-YYYY-NNNN)"),
    )
    order = models.ForeignKey(
        "labman.Order",
        on_delete=models.PROTECT,
        related_name="invoices",
        verbose_name=_("Order"),
    )
    order_code = models.CharField(max_length=50, blank=True, verbose_name=_("Order code"))

    # Client data at issue time
    client_last_name = models.CharField(max_length=100, verbose_name=_("Client last name"))
    client_first_name = models.CharField(max_length=100, verbose_name=_("Client first name"))
    client_national_id = models.CharField(max_length=20, blank=True, verbose_name=_("Client national ID"))
    client_phone = models.CharField(max_length=30, blank=True, verbose_name=_("Client phone"))
    client_email = models.EmailField(blank=True, verbose_name=_("Client email"))
    client_address = models.TextField(blank=True, verbose_name=_("Client address"))

    subtotal = _money(verbose_name=_("Subtotal"))
    vat_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("19"),
        verbose_name=_("VAT %"),
    )
    vat_total = _money(verbose_name=_("VAT"))
    total = _money(verbose_name=_("Total"))

    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
        verbose_name=_("Payment method"),
    )
    advance = _money(verbose_name=_("Advance"))
    cas_value = _money(verbose_name=_("CAS decision value"))
    balance_due = _money(verbose_name=_("Balance due"))

    issued_on = models.DateField(default=timezone.localdate, verbose_name=_("Issue date"))
    due_on = models.DateField(null=True, blank=True, verbose_name=_("Due date"))

    status = models.CharField(
        max_length=20,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.ISSUED,
        db_index=True,
        verbose_name=_("Status"),
    )
    notes = models.TextField(blank=True, verbose_name=_("Notes"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        db_table = "labman_invoice"
        verbose_name = _("Invoice")
        verbose_name_plural = _("Invoices")
        ordering = ["-issued_on", "-id"]

    def __str__(self) -> str:
        return self.code or f"FACT-{self.pk}"

    def save(self, *args, **kwargs):
        """Override save to auto-generate code."""
        if not self.code:
            self.code = self._generate_code()
        super().save(*args, **kwargs)

    def _generate_code(self) -> str:
        """Invoice code FACT-YYYY-NNNN; numbering restarts every year."""
        from labman.conf import get_setting
        from labman.models.sequence import CodeSequence

        prefix = f"{get_setting('INVOICE_CODE_PREFIX')}-{self.issued_on.year}"
        seq_val = CodeSequence.next_value(prefix)
        return f"{prefix}-{seq_val:04d}"

    @property
    def client_name(self) -> str:
        return f"{self.client_last_name} {self.client_first_name}".strip()

    def set_status(self, status: str, user=None) -> None:
        if status not in InvoiceStatus.values:
            raise LabError("INVALID_STATUS", current=self.status, requested=status)

        previous = self.status
        self.status = status
        self.save(update_fields=["status", "updated_at"])

        logger.info(
            f"Invoice {self.code}: {previous} → {status}",
            extra={
                "invoice": self.pk,
                "code": self.code,
                "from": previous,
                "to": status,
                "user": user.username if user else None,
            },
        )


class InvoiceLine(models.Model):
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name="lines",
        verbose_name=_("Invoice"),
    )
    name = models.CharField(max_length=200, verbose_name=_("Name"))
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        verbose_name=_("Quantity"),
    )
    unit_price = _money(verbose_name=_("Unit price"))
    total = _money(verbose_name=_("Total"))

    class Meta:
        db_table = "labman_invoice_line"
        verbose_name = _("Invoice line")
        verbose_name_plural = _("Invoice lines")
        ordering = ["invoice", "id"]

    def __str__(self) -> str:
        return f"{self.name} x {self.quantity}"
