"""
Tests for the stock ledger (credit, debit, adjust, quantity_of).
"""

import pytest

from requisman import inventory, InventoryError
from requisman.models import Item, Movement, MovementKind


pytestmark = pytest.mark.django_db


class TestQuantityOf:

    def test_returns_current_quantity(self, item_a):
        assert inventory.quantity_of(item_a.pk) == 10

    def test_unknown_item(self):
        with pytest.raises(InventoryError) as exc:
            inventory.quantity_of(9999)
        assert exc.value.code == 'NOT_FOUND'

    def test_numeric_string_id(self, item_a):
        assert inventory.quantity_of(str(item_a.pk)) == 10

    @pytest.mark.parametrize('item_id', ['abc', None, True, 1.5])
    def test_malformed_id(self, item_id):
        with pytest.raises(InventoryError) as exc:
            inventory.quantity_of(item_id)
        assert exc.value.code == 'INVALID_INPUT'
        assert exc.value.data['field'] == 'item_id'


class TestCredit:

    def test_credit_increases_quantity_and_writes_entry(self, item_a, user):
        movement = inventory.credit(item_a.pk, 5, origin='Fornecedor X', note='NF 123', user_id=user.pk)

        item_a.refresh_from_db()
        assert item_a.quantity == 15
        assert movement.kind == MovementKind.ENTRY
        assert movement.quantity == 5
        assert movement.counterpart == 'Fornecedor X'
        assert movement.description == 'NF 123'
        assert movement.item_name == 'Capacete'
        assert movement.user_id == user.pk

    @pytest.mark.parametrize('quantity', [0, -3, 2.5, '4', True, None])
    def test_rejects_invalid_quantity(self, item_a, quantity):
        with pytest.raises(InventoryError) as exc:
            inventory.credit(item_a.pk, quantity)

        assert exc.value.code == 'INVALID_QUANTITY'
        assert Movement.objects.count() == 0

    def test_unknown_item_writes_nothing(self):
        with pytest.raises(InventoryError) as exc:
            inventory.credit(9999, 5)

        assert exc.value.code == 'NOT_FOUND'
        assert Movement.objects.count() == 0


class TestDebit:

    def test_debit_decreases_quantity_and_writes_withdrawal(self, item_a):
        movement = inventory.debit(item_a.pk, 4, destination='CC1', note='Obra')

        item_a.refresh_from_db()
        assert item_a.quantity == 6
        assert movement.kind == MovementKind.WITHDRAWAL
        assert movement.signed_quantity == -4
        assert movement.counterpart == 'CC1'

    def test_debit_whole_stock(self, item_a):
        inventory.debit(item_a.pk, 10)
        assert inventory.quantity_of(item_a.pk) == 0

    def test_insufficient_stock_identifies_item(self, item_a):
        with pytest.raises(InventoryError) as exc:
            inventory.debit(item_a.pk, 11)

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        assert exc.value.item_id == item_a.pk
        assert exc.value.available == 10
        assert exc.value.requested == 11
        assert inventory.quantity_of(item_a.pk) == 10
        assert Movement.objects.count() == 0

    def test_unknown_item(self):
        with pytest.raises(InventoryError) as exc:
            inventory.debit(9999, 1)
        assert exc.value.code == 'NOT_FOUND'

    def test_invalid_quantity(self, item_a):
        with pytest.raises(InventoryError) as exc:
            inventory.debit(item_a.pk, 0)
        assert exc.value.code == 'INVALID_QUANTITY'

    def test_stale_snapshot_cannot_overdraw(self, item_a):
        """Two callers read 10 and each try to take 6: only the first succeeds."""
        seen_by_first = inventory.quantity_of(item_a.pk)
        seen_by_second = inventory.quantity_of(item_a.pk)
        assert seen_by_first == seen_by_second == 10

        inventory.debit(item_a.pk, 6)
        with pytest.raises(InventoryError) as exc:
            inventory.debit(item_a.pk, 6)

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        assert inventory.quantity_of(item_a.pk) == 4

    def test_competing_debits_exhaust_exactly(self, item_a):
        """Requests summing past the stock: just enough succeed, the rest fail."""
        results = []
        for _ in range(5):
            try:
                inventory.debit(item_a.pk, 3)
                results.append('ok')
            except InventoryError as exc:
                results.append(exc.code)

        assert results == ['ok', 'ok', 'ok', 'INSUFFICIENT_STOCK', 'INSUFFICIENT_STOCK']
        assert inventory.quantity_of(item_a.pk) == 1
        assert Movement.objects.withdrawals().count() == 3


class TestAdjust:

    def test_adjust_up_writes_entry(self, item_a):
        movement = inventory.adjust(item_a.pk, 14, reason='Contagem física')

        assert inventory.quantity_of(item_a.pk) == 14
        assert movement.kind == MovementKind.ENTRY
        assert movement.quantity == 4
        assert 'Contagem física' in movement.description

    def test_adjust_down_writes_withdrawal(self, item_a):
        movement = inventory.adjust(item_a.pk, 7, reason='Perda')

        assert inventory.quantity_of(item_a.pk) == 7
        assert movement.kind == MovementKind.WITHDRAWAL
        assert movement.quantity == 3

    def test_adjust_unchanged_returns_none(self, item_a):
        assert inventory.adjust(item_a.pk, 10, reason='Conferido') is None
        assert Movement.objects.count() == 0

    def test_adjust_requires_reason(self, item_a):
        with pytest.raises(InventoryError) as exc:
            inventory.adjust(item_a.pk, 3, reason='')
        assert exc.value.code == 'REASON_REQUIRED'

    def test_adjust_rejects_negative_target(self, item_a):
        with pytest.raises(InventoryError) as exc:
            inventory.adjust(item_a.pk, -1, reason='Erro')
        assert exc.value.code == 'INVALID_QUANTITY'

    def test_adjust_unknown_item(self):
        with pytest.raises(InventoryError) as exc:
            inventory.adjust(9999, 1, reason='x')
        assert exc.value.code == 'NOT_FOUND'


class TestMovementLogMatchesQuantity:

    def test_entries_minus_withdrawals_equals_change(self, item_a):
        inventory.credit(item_a.pk, 7)
        inventory.debit(item_a.pk, 12)
        inventory.adjust(item_a.pk, 9, reason='Contagem')

        total = sum(m.signed_quantity for m in Movement.objects.filter(item=item_a))
        assert Item.objects.get(pk=item_a.pk).quantity == 10 + total
