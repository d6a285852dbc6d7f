"""
Enums for Requisman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class MovementKind(models.TextChoices):
    """Direction of a stock movement."""
    ENTRY = 'entry', _('Entrada')            # Quantity added to the item
    WITHDRAWAL = 'withdrawal', _('Saída')    # Quantity taken from the item


class RequisitionStatus(models.TextChoices):
    """
    Requisition lifecycle status.

    PENDING is the only non-terminal status:
    PENDING -> APPROVED | REJECTED
    """
    PENDING = 'pending', _('Pendente')
    APPROVED = 'approved', _('Aprovado')
    REJECTED = 'rejected', _('Rejeitado')


class PackageStatus(models.TextChoices):
    """
    Package aggregate status, derived from its requisitions.

    See requisman.status.derive_package_status.
    """
    PENDING = 'pending', _('Pendente')
    APPROVED = 'approved', _('Aprovado')
    REJECTED = 'rejected', _('Rejeitado')
    PARTIALLY_APPROVED = 'partially_approved', _('Parcialmente aprovado')


class StockLevel(models.TextChoices):
    """Item quantity relative to its thresholds."""
    CRITICAL = 'critical', _('Crítico')    # quantity <= minimum
    LOW = 'low', _('Baixo')                # quantity < ideal
    OK = 'ok', _('Normal')
