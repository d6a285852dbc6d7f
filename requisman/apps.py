"""Django app configuration for Requisman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class RequismanConfig(AppConfig):
    """Configuration for Requisman app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "requisman"
    verbose_name = _("Almoxarifado e Requisições")
