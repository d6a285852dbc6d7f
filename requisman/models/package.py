"""
Package model — Requisitions submitted and resolved together.
"""

from django.conf import settings
from django.db import models
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from requisman.models.enums import PackageStatus


class PackageQuerySet(models.QuerySet):
    """Convenience filters for Package."""

    def pending(self):
        return self.filter(status=PackageStatus.PENDING)

    def for_user(self, user_id):
        return self.filter(requester_id=user_id)

    def with_totals(self):
        """Annotate member count and requested quantity."""
        return self.annotate(
            total_items=models.Count('requisitions'),
            total_quantity=Coalesce(
                models.Sum('requisitions__quantity'), 0, output_field=models.IntegerField()
            ),
        )


class Package(models.Model):
    """
    A bundle of requisitions created atomically by one requester.

    LIFECYCLE:

        PENDING ──► APPROVED            all members approved
           │
           ├──────► REJECTED            all members rejected
           │
           └──────► PARTIALLY_APPROVED  members resolved, mixed

    The status is DERIVED from the members (see requisman.status) every time
    a member changes. It is never set by hand except PENDING at creation.
    """

    requester = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='requisition_packages',
        verbose_name=_('Solicitante'),
    )
    cost_center = models.CharField(max_length=200, verbose_name=_('Centro de Custo'))
    project = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Projeto'))
    justification = models.TextField(blank=True, default='', verbose_name=_('Justificativa'))

    status = models.CharField(
        max_length=20,
        choices=PackageStatus.choices,
        default=PackageStatus.PENDING,
        db_index=True,
        verbose_name=_('Status'),
    )
    notes = models.TextField(blank=True, default='', verbose_name=_('Observações'))

    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Criado em'))
    resolved_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Resolvido em'),
        help_text=_('Data em que o pacote atingiu um status final'),
    )
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Aprovador'),
    )

    objects = PackageQuerySet.as_manager()

    class Meta:
        verbose_name = _('Pacote de Requisições')
        verbose_name_plural = _('Pacotes de Requisições')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='requisman_pkg_status_date_idx'),
            models.Index(fields=['requester', 'created_at'], name='requisman_pkg_user_date_idx'),
        ]

    @property
    def is_pending(self) -> bool:
        return self.status == PackageStatus.PENDING

    def __str__(self) -> str:
        return f"Pacote #{self.pk} - {self.cost_center} ({self.get_status_display()})"
