"""
Stock ledger — the only code allowed to change Item.quantity.

Every quantity change writes exactly one Movement in the same transaction.
Debits are a single conditional update ("decrease by q where quantity >= q"),
so the availability check and the write can never be separated by another
transaction.
"""

import logging

from django.db.models import F

from requisman.db import unit_of_work
from requisman.exceptions import InventoryError
from requisman.models.enums import MovementKind
from requisman.models.item import Item
from requisman.models.movement import Movement

logger = logging.getLogger('requisman')


def validate_quantity(quantity) -> int:
    """Return quantity as a positive int or raise INVALID_QUANTITY."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InventoryError('INVALID_QUANTITY', requested=quantity)
    return quantity


def validate_item_id(item_id) -> int:
    """Return item_id as an int or raise INVALID_INPUT."""
    if isinstance(item_id, bool) or not isinstance(item_id, (int, str)):
        raise InventoryError('INVALID_INPUT', "Identificador de item inválido", field='item_id')
    try:
        return int(item_id)
    except ValueError:
        raise InventoryError('INVALID_INPUT', "Identificador de item inválido", field='item_id') from None


def _item_name(item_id) -> str:
    return Item.objects.filter(pk=item_id).values_list('name', flat=True).first() or ''


class StockLedger:
    """Quantity accounting methods."""

    @classmethod
    def quantity_of(cls, item_id) -> int:
        """
        Current quantity snapshot.

        Not linked to any later write: callers needing consistency
        re-check inside their own transaction (debit() does).

        Raises:
            InventoryError('NOT_FOUND'): If item doesn't exist
        """
        item_id = validate_item_id(item_id)
        quantity = Item.objects.filter(pk=item_id).values_list('quantity', flat=True).first()
        if quantity is None:
            raise InventoryError('NOT_FOUND', item_id=item_id)
        return quantity

    @classmethod
    def credit(cls, item_id, quantity, origin='', note='', user_id=None) -> Movement:
        """
        Stock entry.

        Raises:
            InventoryError('INVALID_QUANTITY'): If quantity <= 0
            InventoryError('NOT_FOUND'): If item doesn't exist
        """
        item_id = validate_item_id(item_id)
        quantity = validate_quantity(quantity)

        with unit_of_work('credit', item_id=item_id):
            updated = Item.objects.filter(pk=item_id).update(quantity=F('quantity') + quantity)
            if not updated:
                raise InventoryError('NOT_FOUND', item_id=item_id)

            movement = Movement.objects.create(
                item_id=item_id,
                item_name=_item_name(item_id),
                kind=MovementKind.ENTRY,
                quantity=quantity,
                counterpart=(origin or '')[:200],
                description=(note or '')[:255],
                user_id=user_id,
            )

        logger.info(
            "requisman.stock.credit",
            extra={"item_id": item_id, "qty": quantity, "origin": origin},
        )
        return movement

    @classmethod
    def debit(cls, item_id, quantity, destination='', note='', user_id=None,
              approver_id=None, requisition_id=None) -> Movement:
        """
        Stock exit.

        Raises:
            InventoryError('INVALID_QUANTITY'): If quantity <= 0
            InventoryError('NOT_FOUND'): If item doesn't exist
            InventoryError('INSUFFICIENT_STOCK'): If quantity > item.quantity

        Concurrency:
            - Check and decrement are one UPDATE ... WHERE quantity >= q
            - Zero affected rows means the check failed; nothing was written
        """
        item_id = validate_item_id(item_id)
        quantity = validate_quantity(quantity)

        with unit_of_work('debit', item_id=item_id):
            updated = Item.objects.filter(pk=item_id, quantity__gte=quantity).update(
                quantity=F('quantity') - quantity
            )
            if not updated:
                current = Item.objects.filter(pk=item_id).values_list('quantity', flat=True).first()
                if current is None:
                    raise InventoryError('NOT_FOUND', item_id=item_id)
                raise InventoryError(
                    'INSUFFICIENT_STOCK',
                    item_id=item_id,
                    item_name=_item_name(item_id),
                    available=current,
                    requested=quantity,
                )

            movement = Movement.objects.create(
                item_id=item_id,
                item_name=_item_name(item_id),
                kind=MovementKind.WITHDRAWAL,
                quantity=quantity,
                counterpart=(destination or '')[:200],
                description=(note or '')[:255],
                user_id=user_id,
                approver_id=approver_id,
                requisition_id=requisition_id,
            )

        logger.info(
            "requisman.stock.debit",
            extra={"item_id": item_id, "qty": quantity, "destination": destination},
        )
        return movement

    @classmethod
    def adjust(cls, item_id, new_quantity, reason, user_id=None) -> Movement | None:
        """
        Inventory adjustment (physical count).

        Writes a credit or debit for the difference; None when unchanged.

        Raises:
            InventoryError('REASON_REQUIRED'): If reason is empty
            InventoryError('INVALID_QUANTITY'): If new_quantity < 0
        """
        if not reason:
            raise InventoryError('REASON_REQUIRED')
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int) or new_quantity < 0:
            raise InventoryError('INVALID_QUANTITY', requested=new_quantity)
        item_id = validate_item_id(item_id)

        with unit_of_work('adjust', item_id=item_id):
            try:
                item = Item.objects.select_for_update().get(pk=item_id)
            except Item.DoesNotExist:
                raise InventoryError('NOT_FOUND', item_id=item_id) from None

            delta = new_quantity - item.quantity
            if delta == 0:
                return None

            note = f"Ajuste: {reason}"
            if delta > 0:
                return cls.credit(item.pk, delta, origin='Ajuste de inventário', note=note, user_id=user_id)
            return cls.debit(item.pk, -delta, destination='Ajuste de inventário', note=note, user_id=user_id)
