"""
Tests for JSON export/import.
"""

import copy

import pytest

from requisman import inventory, InventoryError
from requisman.models import Item, Movement, Package, Project, Requisition, RequisitionStatus
from requisman.services.transfer import compute_hash


pytestmark = pytest.mark.django_db


@pytest.fixture
def populated(make_package, admin, item_a, item_b):
    Project.objects.create(name='P1')
    package = make_package((item_a, 3), (item_b, 1))
    inventory.approve_package_items(package.pk, [package.requisitions.order_by('pk').first().pk], admin)
    return package


class TestExport:

    def test_metadata(self, populated):
        payload = inventory.export_data()

        meta = payload['metadata']
        assert meta['version'] == '1.1'
        assert meta['total_records'] == {
            'projects': 1, 'cost_centers': 0, 'items': 2,
            'packages': 1, 'requisitions': 2, 'movements': 1,
        }
        assert meta['hash'] == compute_hash(payload)
        assert len(meta['hash']) == 64

    def test_values_are_json_native(self, populated):
        item = inventory.export_data()['items'][0]
        assert isinstance(item['value'], str)
        assert isinstance(item['created_at'], str)


class TestImport:

    def test_round_trip_restores_state(self, populated, item_a, item_b):
        payload = inventory.export_data()

        inventory.debit(item_a.pk, 7)
        Project.objects.all().delete()
        Item.objects.create(name='Extra')

        counts = inventory.import_data(payload)

        assert counts['items'] == 2
        assert Item.objects.get(pk=item_a.pk).quantity == 7
        assert Item.objects.get(pk=item_b.pk).quantity == 10
        assert not Item.objects.filter(name='Extra').exists()
        assert Project.objects.filter(name='P1').exists()
        assert Movement.objects.count() == 1
        package = Package.objects.get(pk=populated.pk)
        assert sorted(package.requisitions.values_list('status', flat=True)) == [
            RequisitionStatus.APPROVED, RequisitionStatus.PENDING,
        ]

    def test_tampered_payload_is_refused(self, populated, item_a):
        payload = inventory.export_data()
        tampered = copy.deepcopy(payload)
        tampered['items'][0]['quantity'] = 999
        inventory.debit(item_a.pk, 1)

        with pytest.raises(InventoryError) as exc:
            inventory.import_data(tampered)

        assert exc.value.code == 'CORRUPTED_DATA'
        assert Item.objects.get(pk=item_a.pk).quantity == 6
        assert Movement.objects.count() == 2

    @pytest.mark.parametrize('payload', [None, [], {}, {'metadata': {}}, {'metadata': 'x', 'items': []}])
    def test_malformed_payload(self, payload):
        with pytest.raises(InventoryError) as exc:
            inventory.import_data(payload)
        assert exc.value.code == 'INVALID_PAYLOAD'

    def test_unknown_field_rolls_back(self, populated, item_a):
        payload = inventory.export_data()
        payload['items'][0]['colour'] = 'red'
        payload['metadata']['hash'] = compute_hash(payload)

        with pytest.raises(InventoryError) as exc:
            inventory.import_data(payload)

        assert exc.value.code == 'INVALID_PAYLOAD'
        assert Item.objects.count() == 2
        assert Requisition.objects.count() == 2

    def test_dry_run_writes_nothing(self, populated):
        payload = inventory.export_data()
        Item.objects.create(name='Extra')

        counts = inventory.import_data(payload, dry_run=True)

        assert counts['requisitions'] == 2
        assert Item.objects.filter(name='Extra').exists()

    def test_unknown_users_are_cleared(self, populated, user):
        payload = inventory.export_data()
        for row in payload['packages']:
            row['requester_id'] = 424242
        payload['metadata']['hash'] = compute_hash(payload)

        inventory.import_data(payload)

        assert Package.objects.get(pk=populated.pk).requester_id is None
