"""
Movement model — Immutable log of stock quantity changes.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from requisman.models.enums import MovementKind


class MovementQuerySet(models.QuerySet):
    """Convenience filters for Movement."""

    def entries(self):
        return self.filter(kind=MovementKind.ENTRY)

    def withdrawals(self):
        return self.filter(kind=MovementKind.WITHDRAWAL)

    def since(self, moment):
        return self.filter(timestamp__gte=moment)


class Movement(models.Model):
    """
    Immutable record of one stock quantity change.

    Rules:
    - NEVER update() or delete()
    - Corrections are new Movements in the opposite direction
    - Written only by the stock ledger, in the same transaction
      that changes Item.quantity
    """

    item = models.ForeignKey(
        'requisman.Item',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='movements',
        verbose_name=_('Item'),
    )
    item_name = models.CharField(
        max_length=200,
        verbose_name=_('Nome do Item'),
        help_text=_('Cópia do nome no momento do movimento.'),
    )

    kind = models.CharField(
        max_length=20,
        choices=MovementKind.choices,
        db_index=True,
        verbose_name=_('Tipo'),
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Quantidade'))

    counterpart = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Origem/Destino'),
        help_text=_('Origem para entradas, destino para saídas.'),
    )
    description = models.CharField(
        max_length=255,
        blank=True,
        default='',
        verbose_name=_('Descrição'),
    )

    requisition = models.ForeignKey(
        'requisman.Requisition',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='movements',
        verbose_name=_('Requisição'),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Usuário'),
    )
    approver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Aprovador'),
    )

    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))

    objects = MovementQuerySet.as_manager()

    class Meta:
        verbose_name = _('Movimentação')
        verbose_name_plural = _('Movimentações')
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['item', 'timestamp'], name='requisman_mov_item_ts_idx'),
        ]

    @property
    def signed_quantity(self) -> int:
        """Quantity with sign: positive for entries, negative for withdrawals."""
        if self.kind == MovementKind.WITHDRAWAL:
            return -self.quantity
        return self.quantity

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(
                "Movimentações são imutáveis. "
                "Para corrigir, registre uma movimentação no sentido inverso."
            )
        if not self.quantity or self.quantity <= 0:
            raise ValueError("Quantidade da movimentação deve ser positiva")
        if not self.item_name and self.item_id:
            self.item_name = self.item.name
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError(
            "Movimentações são imutáveis. "
            "Para estornar, registre uma movimentação no sentido inverso."
        )

    def __str__(self) -> str:
        signal = '-' if self.kind == MovementKind.WITHDRAWAL else '+'
        return f"{signal}{self.quantity} {self.item_name} | {self.description}"
