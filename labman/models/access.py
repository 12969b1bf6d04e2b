"""
AccessGroup model.

Role-based access: every user group lists the application modules its
members may open.
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _


class Module(models.TextChoices):
    """Application modules guarded by AccessGroup."""

    DASHBOARD = "dashboard", _("Dashboard")
    ORDERS = "orders", _("Orders")
    INVOICES = "invoices", _("Invoices")
    CLIENTS = "clients", _("Clients")
    EMPLOYEES = "employees", _("Employees")
    PRODUCTS = "products", _("Products")
    MATERIALS = "materials", _("Raw materials")
    ADMIN = "admin", _("Administration")


class AccessGroup(models.Model):
    """User group with its allowed modules."""

    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name=_("Name"),
    )
    description = models.TextField(blank=True, verbose_name=_("Description"))
    modules = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_("Modules"),
        help_text=_("List of module codes: ['orders', 'clients']"),
    )
    users = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="access_groups",
        verbose_name=_("Users"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        db_table = "labman_access_group"
        verbose_name = _("Access group")
        verbose_name_plural = _("Access groups")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def clean(self):
        super().clean()
        if not isinstance(self.modules, list):
            raise ValidationError({"modules": _("Must be a list of module codes.")})
        unknown = [m for m in self.modules if m not in Module.values]
        if unknown:
            raise ValidationError({
                "modules": _("Unknown modules: %(modules)s") % {"modules": ", ".join(map(str, unknown))}
            })

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)
