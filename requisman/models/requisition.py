"""
Requisition model — A request to withdraw a quantity of one item.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from requisman.models.enums import RequisitionStatus


class RequisitionQuerySet(models.QuerySet):
    """Convenience filters for Requisition."""

    def pending(self):
        return self.filter(status=RequisitionStatus.PENDING)

    def individual(self):
        """Requisitions not created as part of a package."""
        return self.filter(package__isnull=True)

    def for_user(self, user_id):
        return self.filter(requester_id=user_id)


class Requisition(models.Model):
    """
    Request for one item/quantity, tied to a cost center and project.

    LIFECYCLE:

        PENDING ──approve──► APPROVED   (stock debited, one withdrawal Movement)
           │
           └────reject────► REJECTED   (no stock effect)

    Both APPROVED and REJECTED are terminal.

    When created inside a Package the requisition is a member of it, and
    every status change recomputes the package status.
    """

    requester = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='requisitions',
        verbose_name=_('Solicitante'),
    )
    package = models.ForeignKey(
        'requisman.Package',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='requisitions',
        verbose_name=_('Pacote'),
    )

    item = models.ForeignKey(
        'requisman.Item',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='requisitions',
        verbose_name=_('Item'),
    )
    item_name = models.CharField(max_length=200, verbose_name=_('Nome do Item'))
    quantity = models.PositiveIntegerField(verbose_name=_('Quantidade'))

    cost_center = models.CharField(max_length=200, verbose_name=_('Centro de Custo'))
    project = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Projeto'))
    justification = models.TextField(blank=True, default='', verbose_name=_('Justificativa'))

    status = models.CharField(
        max_length=20,
        choices=RequisitionStatus.choices,
        default=RequisitionStatus.PENDING,
        db_index=True,
        verbose_name=_('Status'),
    )
    notes = models.TextField(
        blank=True,
        default='',
        verbose_name=_('Observações'),
        help_text=_('Motivo da rejeição ou anotação do administrador.'),
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data'))
    resolved_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Resolvido em'))
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Resolvido por'),
    )

    objects = RequisitionQuerySet.as_manager()

    class Meta:
        verbose_name = _('Requisição')
        verbose_name_plural = _('Requisições')
        ordering = ['created_at', 'pk']
        indexes = [
            models.Index(fields=['status', 'package'], name='requisman_req_status_pkg_idx'),
            models.Index(fields=['requester', 'created_at'], name='requisman_req_user_date_idx'),
        ]

    @property
    def is_pending(self) -> bool:
        return self.status == RequisitionStatus.PENDING

    def __str__(self) -> str:
        return f"#{self.pk} {self.quantity}x {self.item_name} ({self.get_status_display()})"
