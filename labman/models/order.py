"""
Order and OrderLine models.

Order = a client's request for one or more products/services.
The stored total is only ever written together with the lines it was
computed from (see labman.services.orders).
"""

import logging
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from labman.exceptions import LabError

logger = logging.getLogger(__name__)


class OrderStatus(models.TextChoices):
    """Order lifecycle status."""

    NEW = "new", _("New")
    IN_PROGRESS = "in_progress", _("In progress")
    FINISHED = "finished", _("Finished")
    DELIVERED = "delivered", _("Delivered")
    CANCELLED = "cancelled", _("Cancelled")


class PaymentMethod(models.TextChoices):
    CASH = "cash", _("Cash")
    CARD = "card", _("Card")
    CAS_DECISION = "cas_decision", _("CAS decision")


class Order(models.Model):
    """
    Client order.

    Status: NEW → IN_PROGRESS → FINISHED → DELIVERED (or CANCELLED)
    """

    code = models.CharField(
        unique=True,
        max_length=50,
        blank=True,
        verbose_name=_("Code"),
        help_text=_("Auto-generated if empty (CMD-YYYY-NNNN)"),
    )

    client = models.ForeignKey(
        "labman.Client",
        on_delete=models.PROTECT,
        related_name="orders",
        verbose_name=_("Client"),
    )
    technician = models.ForeignKey(
        "labman.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
        verbose_name=_("Technician"),
    )

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.NEW,
        db_index=True,
        verbose_name=_("Status"),
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
        verbose_name=_("Payment method"),
    )

    ordered_on = models.DateField(default=timezone.localdate, verbose_name=_("Order date"))
    estimated_delivery = models.DateField(
        null=True,
        blank=True,
        verbose_name=_("Estimated delivery"),
    )
    delivered_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Delivered at"),
    )

    advance = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("Advance"),
    )

    # Health-insurance (CAS) funding decision
    cas_number = models.CharField(max_length=50, blank=True, verbose_name=_("CAS decision number"))
    cas_date = models.DateField(null=True, blank=True, verbose_name=_("CAS decision date"))
    cas_value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("CAS decision value"),
    )

    total = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal("0"),
        editable=False,
        verbose_name=_("Computed total"),
    )

    notes = models.TextField(blank=True, verbose_name=_("Notes"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        db_table = "labman_order"
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "ordered_on"], name="labman_order_status_date_idx"),
        ]

    def __str__(self) -> str:
        return self.code or f"CMD-{self.pk}"

    def save(self, *args, **kwargs):
        """Override save to auto-generate code."""
        if not self.code:
            self.code = self._generate_code()
        super().save(*args, **kwargs)

    def _generate_code(self) -> str:
        """Order code CMD-YYYY-NNNN; the counter never resets."""
        from labman.conf import get_setting
        from labman.models.sequence import CodeSequence

        prefix = get_setting("ORDER_CODE_PREFIX")
        seq_val = CodeSequence.next_value(prefix)
        return f"{prefix}-{timezone.now().year}-{seq_val:04d}"

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    @property
    def has_cas_decision(self) -> bool:
        return bool(self.cas_number) or self.cas_value > 0

    def set_status(self, status: str, user=None) -> None:
        """
        Move the order to a new status.

        Delivering stamps delivered_at.
        """
        if status not in OrderStatus.values:
            raise LabError("INVALID_STATUS", current=self.status, requested=status)

        previous = self.status
        self.status = status
        update_fields = ["status", "updated_at"]
        if status == OrderStatus.DELIVERED:
            self.delivered_at = timezone.now()
            update_fields.append("delivered_at")
        self.save(update_fields=update_fields)

        logger.info(
            f"Order {self.code}: {previous} → {status}",
            extra={
                "order": self.pk,
                "code": self.code,
                "from": previous,
                "to": status,
                "user": user.username if user else None,
            },
        )


class OrderLine(models.Model):
    """One product/service on an order."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="lines",
        verbose_name=_("Order"),
    )
    # No DB constraint: a deleted product is priced as zero.
    product = models.ForeignKey(
        "labman.Product",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="+",
        verbose_name=_("Product"),
    )
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("1"),
        verbose_name=_("Quantity"),
    )
    notes = models.TextField(blank=True, verbose_name=_("Notes"))

    class Meta:
        db_table = "labman_order_line"
        verbose_name = _("Order line")
        verbose_name_plural = _("Order lines")
        ordering = ["order", "id"]

    def __str__(self) -> str:
        return f"{self.product_id} x {self.quantity}"
