"""
Tests for the atomic unit of work.
"""

import pytest
from django.db import DatabaseError

from requisman import InventoryError
from requisman.db import unit_of_work
from requisman.models import Item


pytestmark = pytest.mark.django_db


def test_database_error_becomes_transaction_failure(item_a):
    with pytest.raises(InventoryError) as exc:
        with unit_of_work('explode', item_id=item_a.pk):
            Item.objects.filter(pk=item_a.pk).update(quantity=0)
            raise DatabaseError('disk full')

    assert exc.value.code == 'TRANSACTION_FAILURE'
    assert exc.value.data['operation'] == 'explode'
    assert exc.value.http_status == 500
    assert Item.objects.get(pk=item_a.pk).quantity == 10


def test_domain_error_propagates_after_rollback(item_a):
    with pytest.raises(InventoryError) as exc:
        with unit_of_work('refuse'):
            Item.objects.filter(pk=item_a.pk).update(quantity=0)
            raise InventoryError('INVALID_INPUT')

    assert exc.value.code == 'INVALID_INPUT'
    assert Item.objects.get(pk=item_a.pk).quantity == 10


def test_failure_is_logged(item_a, caplog):
    with pytest.raises(InventoryError):
        with unit_of_work('explode'):
            raise DatabaseError('boom')

    assert 'requisman.transaction_failed' in caplog.text
