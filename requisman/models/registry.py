"""
Registry models — projects and cost centers offered to requesters.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class RegistryQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)


class RegistryEntry(models.Model):
    """Named entry that can be deactivated but never deleted."""

    name = models.CharField(max_length=200, unique=True, verbose_name=_('Nome'))
    description = models.TextField(blank=True, default='', verbose_name=_('Descrição'))
    is_active = models.BooleanField(default=True, verbose_name=_('Ativo'))
    created_at = models.DateTimeField(default=timezone.now, verbose_name=_('Criado em'))

    objects = RegistryQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class Project(RegistryEntry):

    class Meta(RegistryEntry.Meta):
        verbose_name = _('Projeto')
        verbose_name_plural = _('Projetos')


class CostCenter(RegistryEntry):

    class Meta(RegistryEntry.Meta):
        verbose_name = _('Centro de Custo')
        verbose_name_plural = _('Centros de Custo')
