"""
Product and ProductComponent models.

Product = something the lab sells. A product may derive from a base
(parent) product and inherits its materials and labor. A service is
labor only.
ProductComponent = one raw material line of a product's own BOM.
"""

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from labman.protocols.catalog import KIND_PRODUCT, KIND_SERVICE, Component

logger = logging.getLogger(__name__)


class ProductKind(models.TextChoices):
    """What is being sold."""

    PRODUCT = KIND_PRODUCT, _("Product")
    SERVICE = KIND_SERVICE, _("Service")


class Product(models.Model):
    """
    Product or service.

    Invariants (enforced in clean()):
    - A service has no parent and no components.
    - A product's parent is another existing product, never a service,
      and the parent links never form a cycle.
    """

    kind = models.CharField(
        max_length=20,
        choices=ProductKind.choices,
        default=ProductKind.PRODUCT,
        db_index=True,
        verbose_name=_("Kind"),
    )
    name = models.CharField(
        max_length=200,
        verbose_name=_("Name"),
    )
    description = models.TextField(
        blank=True,
        verbose_name=_("Description"),
    )

    # Base product. No DB constraint: a deleted base leaves the id behind
    # and pricing treats it as a root.
    parent = models.ForeignKey(
        "self",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True,
        blank=True,
        related_name="derived",
        verbose_name=_("Base product"),
    )

    labor_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("Labor price"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "labman_product"
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["kind"], name="labman_product_kind_idx"),
            models.Index(fields=["parent"], name="labman_product_parent_idx"),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def is_service(self) -> bool:
        return self.kind == ProductKind.SERVICE

    def clean(self):
        super().clean()
        if self.is_service:
            self.parent = None
            if self.pk is not None:
                from labman.conf import get_catalog
                from labman.services.catalog import validate_kind

                validate_kind(self.pk, self.kind, get_catalog())
            return
        if self.parent_id is not None:
            from labman.conf import get_catalog
            from labman.services.catalog import validate_parent

            validate_parent(self.pk, self.kind, self.parent_id, get_catalog())

    def save(self, *args, **kwargs):
        if self.is_service:
            self.parent = None
        self.full_clean()
        super().save(*args, **kwargs)
        if self.is_service:
            self.components.all().delete()

    # ══════════════════════════════════════════════════════════════
    # BOM
    # ══════════════════════════════════════════════════════════════

    def set_components(self, components) -> None:
        """
        Replace the product's own components.

        Args:
            components: Iterable of Component or (material_id, quantity)
                        pairs. Quantities must be > 0.

        Services keep no components; the call only clears them.
        """
        pairs = []
        for comp in components:
            if isinstance(comp, Component):
                material_id, quantity = comp.material_id, comp.quantity
            else:
                material_id, quantity = comp
            quantity = Decimal(str(quantity))
            if quantity <= 0:
                raise ValidationError(
                    {"components": _("Component quantity must be greater than zero.")}
                )
            pairs.append((material_id, quantity))

        with transaction.atomic():
            self.components.all().delete()
            if self.is_service:
                if pairs:
                    logger.warning(
                        f"Ignoring {len(pairs)} components for service {self.pk}",
                        extra={"product": self.pk},
                    )
                return
            ProductComponent.objects.bulk_create(
                ProductComponent(product=self, material_id=mid, quantity=qty)
                for mid, qty in pairs
            )

    def as_info(self):
        """Snapshot of this product for the pricing resolver."""
        from labman.adapters.orm import product_info

        return product_info(self)


class ProductComponent(models.Model):
    """Raw material line of a product's own BOM."""

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="components",
        verbose_name=_("Product"),
    )
    # No DB constraint: a deleted material is priced as zero.
    material = models.ForeignKey(
        "labman.RawMaterial",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="+",
        verbose_name=_("Raw material"),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        verbose_name=_("Quantity"),
    )

    class Meta:
        db_table = "labman_product_component"
        verbose_name = _("Component")
        verbose_name_plural = _("Components")
        ordering = ["product", "id"]

    def __str__(self) -> str:
        return f"{self.material_id} x {self.quantity}"

    def clean(self):
        super().clean()
        if self.quantity is not None and self.quantity <= 0:
            raise ValidationError({"quantity": _("Must be greater than zero.")})
