"""
Item catalog — registration, spreadsheet import, edits, removal and
duplicate merging.

Quantities are never written here: every change goes through StockLedger
so the movement log stays complete.
"""

import logging
from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation

from django.db.models import Count, Min

from requisman.context import Actor
from requisman.db import unit_of_work
from requisman.exceptions import InventoryError
from requisman.models.item import Item
from requisman.models.requisition import Requisition
from requisman.services.ledger import StockLedger
from requisman.services.requisitions import require_admin, require_text
from requisman.services.spreadsheets import map_item_row

logger = logging.getLogger('requisman')

MERGE_COUNTERPART = 'Unificação de itens'


@dataclass(frozen=True)
class ItemPatch:
    """
    Fields an administrator may edit on an item. None means "keep".

    Quantity is deliberately absent: use StockLedger.adjust().
    """

    name: str | None = None
    series: str | None = None
    description: str | None = None
    origin: str | None = None
    destination: str | None = None
    value: Decimal | None = None
    invoice: str | None = None
    minimum: int | None = None
    ideal: int | None = None
    notes: str | None = None

    def changes(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def _threshold(field: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InventoryError('INVALID_INPUT', f"{field} deve ser um inteiro não negativo", field=field)
    return value


def _money(value) -> Decimal:
    try:
        value = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InventoryError('INVALID_INPUT', "Valor inválido", field='value') from None
    if value < 0:
        raise InventoryError('INVALID_INPUT', "Valor inválido", field='value')
    return value


class ItemCatalog:
    """Item registration and maintenance."""

    @classmethod
    def register_item(cls, actor: Actor, name, quantity=0, series='', **attrs) -> tuple[Item, bool]:
        """
        Register stock for an item, merging with an existing name+series.

        An existing item only receives the quantity as an entry movement;
        its other attributes are left alone.

        Args:
            actor: Who is registering (recorded on the movement)
            name: Item name
            quantity: Initial or added quantity (0 allowed for a new item)
            series: Optional series/code, part of the identity
            **attrs: description, origin, destination, value, invoice,
                minimum, ideal, notes

        Returns:
            (item, created)

        Raises:
            InventoryError('INVALID_INPUT'): Missing name or bad attribute
            InventoryError('INVALID_QUANTITY'): Negative quantity
        """
        name = require_text('name', name)
        series = (series or '').strip()
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise InventoryError('INVALID_QUANTITY', requested=quantity)

        try:
            values = cls._clean(ItemPatch(**attrs).changes())
        except TypeError:
            raise InventoryError('INVALID_INPUT', fields=sorted(attrs)) from None
        origin = values.get('origin', '')

        with unit_of_work('register_item', name=name):
            item = Item.objects.by_identity(name, series).order_by('pk').first()
            created = item is None

            if created:
                item = Item.objects.create(name=name, series=series, **values)
                note = "Cadastro inicial do item"
            else:
                note = "Adição ao estoque existente"

            if quantity:
                StockLedger.credit(item.pk, quantity, origin=origin, note=note, user_id=actor.user_id)
                item.refresh_from_db(fields=['quantity'])

        logger.info(
            "requisman.item.registered",
            extra={"item_id": item.pk, "qty": quantity, "is_new": created},
        )
        return item, created

    @classmethod
    def update_item(cls, item_id, patch: ItemPatch, actor: Actor) -> Item:
        """
        Apply a whitelisted patch to an item.

        Raises:
            InventoryError('PERMISSION_DENIED'): Actor is not an administrator
            InventoryError('NOT_FOUND'): Unknown item
            InventoryError('INVALID_INPUT'): Empty patch or bad value
        """
        require_admin(actor)
        changes = cls._clean(patch.changes())
        if not changes:
            raise InventoryError('INVALID_INPUT', "Nenhum campo para atualizar")
        if 'name' in changes:
            changes['name'] = require_text('name', changes['name'])

        with unit_of_work('update_item', item_id=item_id):
            try:
                item = Item.objects.select_for_update().get(pk=item_id)
            except Item.DoesNotExist:
                raise InventoryError('NOT_FOUND', item_id=item_id) from None

            for field, value in changes.items():
                setattr(item, field, value)
            item.save(update_fields=list(changes))

        logger.info("requisman.item.updated", extra={"item_id": item.pk, "fields": list(changes)})
        return item

    @classmethod
    def remove_item(cls, item_id, actor: Actor) -> None:
        """
        Delete an item that no pending requisition references.

        Past movements and requisitions keep the item name snapshot.

        Raises:
            InventoryError('PERMISSION_DENIED'): Actor is not an administrator
            InventoryError('NOT_FOUND'): Unknown item
            InventoryError('ITEM_IN_USE'): Pending requisitions reference the item
        """
        require_admin(actor)

        with unit_of_work('remove_item', item_id=item_id):
            try:
                item = Item.objects.select_for_update().get(pk=item_id)
            except Item.DoesNotExist:
                raise InventoryError('NOT_FOUND', item_id=item_id) from None

            pending = Requisition.objects.pending().filter(item=item).count()
            if pending:
                raise InventoryError('ITEM_IN_USE', item_id=item_id, pending=pending)
            item.delete()

        logger.info("requisman.item.removed", extra={"item_id": item_id})

    @classmethod
    def merge_duplicate_items(cls, actor: Actor) -> int:
        """
        Fold items sharing name+series into the oldest one.

        Each duplicate's quantity moves to the kept item as a withdrawal/entry
        pair, its requisitions are re-pointed, and the duplicate is deleted.

        Returns:
            Number of items removed
        """
        require_admin(actor)
        removed = 0

        with unit_of_work('merge_duplicate_items'):
            groups = (
                Item.objects.values('name', 'series')
                .order_by()
                .annotate(count=Count('pk'), keep=Min('pk'))
                .filter(count__gt=1)
            )
            for group in groups:
                keep = group['keep']
                duplicates = (
                    Item.objects.by_identity(group['name'], group['series'])
                    .exclude(pk=keep)
                    .select_for_update()
                )
                for duplicate in duplicates:
                    if duplicate.quantity:
                        note = f"Unificação do item #{duplicate.pk} em #{keep}"
                        StockLedger.debit(
                            duplicate.pk, duplicate.quantity,
                            destination=MERGE_COUNTERPART, note=note, user_id=actor.user_id,
                        )
                        StockLedger.credit(
                            keep, duplicate.quantity,
                            origin=MERGE_COUNTERPART, note=note, user_id=actor.user_id,
                        )
                    Requisition.objects.filter(item=duplicate).update(item_id=keep)
                    duplicate.delete()
                    removed += 1

        logger.info("requisman.item.duplicates_merged", extra={"removed": removed})
        return removed

    @classmethod
    def import_items(cls, actor: Actor, rows) -> dict:
        """
        Register every spreadsheet row through register_item().

        Rows come from spreadsheets.read_rows(). A row that fails is reported
        and skipped; the other rows are still registered. Row numbers count
        the header as row 1.

        Returns:
            {'created': int, 'merged': int, 'failed': [{'row', 'name', 'error'}]}

        Raises:
            InventoryError('INVALID_INPUT'): No rows at all
        """
        if not rows:
            raise InventoryError('INVALID_INPUT', "Nenhum dado encontrado na planilha", field='rows')

        created = merged = 0
        failed = []

        with unit_of_work('import_items', rows=len(rows)):
            for number, row in enumerate(rows, start=2):
                attrs = map_item_row(row)
                if not attrs['name']:
                    failed.append({'row': number, 'name': '', 'error': "Linha sem nome, ignorada."})
                    continue
                try:
                    _, is_new = cls.register_item(actor, **attrs)
                except InventoryError as exc:
                    failed.append({'row': number, 'name': attrs['name'], 'error': exc.message})
                    continue
                if is_new:
                    created += 1
                else:
                    merged += 1

        logger.info(
            "requisman.item.imported",
            extra={"created_count": created, "merged_count": merged, "failed_count": len(failed)},
        )
        return {'created': created, 'merged': merged, 'failed': failed}

    @classmethod
    def _clean(cls, changes: dict) -> dict:
        for field in ('minimum', 'ideal'):
            if field in changes:
                changes[field] = _threshold(field, changes[field])
        if 'value' in changes:
            changes['value'] = _money(changes['value'])
        return changes
