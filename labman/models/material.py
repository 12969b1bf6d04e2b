"""
RawMaterial model.

Raw materials are priced per unit of measure and referenced by product
components.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords


class RawMaterial(models.Model):
    """
    Raw material (plaster, resin, straps...).

    Deleting a material leaves its product components in place; pricing
    then counts them as zero.
    """

    name = models.CharField(
        max_length=200,
        verbose_name=_("Name"),
    )
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("Unit price"),
    )
    unit = models.CharField(
        max_length=20,
        default="buc",
        verbose_name=_("Unit of measure"),
        help_text=_("buc, kg, m, l..."),
    )
    stock = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("Stock"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # Price history
    history = HistoricalRecords()

    class Meta:
        db_table = "labman_raw_material"
        verbose_name = _("Raw material")
        verbose_name_plural = _("Raw materials")
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.unit})"

    @property
    def stock_value(self) -> Decimal:
        return self.unit_price * self.stock
