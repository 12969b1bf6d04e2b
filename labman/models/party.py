"""
Client and Employee models.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Client(models.Model):
    """Patient / customer of the lab."""

    last_name = models.CharField(max_length=100, verbose_name=_("Last name"))
    first_name = models.CharField(max_length=100, verbose_name=_("First name"))
    national_id = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_("National ID"),
        help_text=_("CNP"),
    )
    phone = models.CharField(max_length=30, blank=True, verbose_name=_("Phone"))
    email = models.EmailField(blank=True, verbose_name=_("Email"))
    address = models.TextField(blank=True, verbose_name=_("Address"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        db_table = "labman_client"
        verbose_name = _("Client")
        verbose_name_plural = _("Clients")
        ordering = ["last_name", "first_name"]

    def __str__(self) -> str:
        return self.full_name

    @property
    def full_name(self) -> str:
        return f"{self.last_name} {self.first_name}".strip()


class Employee(models.Model):
    """Technician or office employee."""

    last_name = models.CharField(max_length=100, verbose_name=_("Last name"))
    first_name = models.CharField(max_length=100, verbose_name=_("First name"))
    job_title = models.CharField(max_length=100, blank=True, verbose_name=_("Job title"))
    phone = models.CharField(max_length=30, blank=True, verbose_name=_("Phone"))
    email = models.EmailField(blank=True, verbose_name=_("Email"))
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    # Login account, when the employee uses the system
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employee",
        verbose_name=_("User"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        db_table = "labman_employee"
        verbose_name = _("Employee")
        verbose_name_plural = _("Employees")
        ordering = ["last_name", "first_name"]

    def __str__(self) -> str:
        return self.full_name

    @property
    def full_name(self) -> str:
        return f"{self.last_name} {self.first_name}".strip()
