"""
Item model — A stocked inventory line.
"""

from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from requisman.models.enums import StockLevel


class ItemQuerySet(models.QuerySet):
    """Convenience filters for Item."""

    def below_minimum(self):
        """Items at or under their minimum threshold."""
        return self.filter(quantity__lte=models.F('minimum'))

    def below_ideal(self):
        """Items under their ideal threshold."""
        return self.filter(quantity__lt=models.F('ideal'))

    def by_identity(self, name, series=''):
        """Items sharing the same name and series (the merge key)."""
        return self.filter(name=name, series=series or '')


class Item(models.Model):
    """
    A stocked item with its current quantity and threshold levels.

    Rules:
    - quantity is NEVER written directly; only the stock ledger changes it
      (see requisman.services.ledger)
    - quantity never goes negative
    """

    name = models.CharField(
        max_length=200,
        db_index=True,
        verbose_name=_('Nome'),
    )
    series = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name=_('Série/Código'),
    )
    description = models.TextField(blank=True, default='', verbose_name=_('Descrição'))
    origin = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Origem'))
    destination = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Destino'))
    value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Valor'),
    )
    invoice = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Nota Fiscal'))

    quantity = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Quantidade'),
        help_text=_('Alterada apenas por entradas e saídas registradas.'),
    )
    minimum = models.PositiveIntegerField(default=0, verbose_name=_('Mínimo'))
    ideal = models.PositiveIntegerField(default=0, verbose_name=_('Ideal'))

    notes = models.TextField(blank=True, default='', verbose_name=_('Informações'))
    created_at = models.DateTimeField(default=timezone.now, verbose_name=_('Cadastrado em'))

    objects = ItemQuerySet.as_manager()

    class Meta:
        verbose_name = _('Item')
        verbose_name_plural = _('Itens')
        ordering = ['name']
        indexes = [
            models.Index(fields=['name', 'series'], name='requisman_item_identity_idx'),
        ]

    @property
    def stock_level(self) -> str:
        """Quantity relative to the minimum/ideal thresholds."""
        if self.quantity <= self.minimum:
            return StockLevel.CRITICAL
        if self.quantity < self.ideal:
            return StockLevel.LOW
        return StockLevel.OK

    def __str__(self) -> str:
        series = f" ({self.series})" if self.series else ""
        return f"{self.name}{series}"
