"""
Django Labman app configuration.
"""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class LabmanConfig(AppConfig):
    """Labman application configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "labman"
    verbose_name = _("Lab management")
