"""
Tests for individual requisitions.
"""

import pytest

from requisman import inventory, InventoryError
from requisman.models import Item, Movement, PackageStatus, RequisitionStatus


pytestmark = pytest.mark.django_db


@pytest.fixture
def requisition(requester, item_a):
    return inventory.create_requisition(requester, item_a.pk, 4, 'CC2', 'P9', 'Manutenção')


class TestCreateRequisition:

    def test_creates_standalone_pending(self, requisition, user, item_a):
        assert requisition.package_id is None
        assert requisition.status == RequisitionStatus.PENDING
        assert requisition.requester_id == user.pk
        assert requisition.item_name == 'Capacete'
        assert Item.objects.get(pk=item_a.pk).quantity == 10

    def test_insufficient_stock(self, requester, item_a):
        with pytest.raises(InventoryError) as exc:
            inventory.create_requisition(requester, item_a.pk, 11, 'CC1')
        assert exc.value.code == 'INSUFFICIENT_STOCK'
        assert exc.value.item_id == item_a.pk

    def test_invalid_input(self, requester, item_a):
        with pytest.raises(InventoryError) as exc:
            inventory.create_requisition(requester, item_a.pk, 1, '')
        assert exc.value.code == 'INVALID_INPUT'

        with pytest.raises(InventoryError) as exc:
            inventory.create_requisition(requester, item_a.pk, 0, 'CC1')
        assert exc.value.code == 'INVALID_QUANTITY'

    def test_item_id_as_string(self, requester, item_a):
        requisition = inventory.create_requisition(requester, str(item_a.pk), 1, 'CC1')
        assert requisition.item_id == item_a.pk

        with pytest.raises(InventoryError) as exc:
            inventory.create_requisition(requester, 'abc', 1, 'CC1')
        assert exc.value.code == 'INVALID_INPUT'
        assert exc.value.data['field'] == 'item_id'

    def test_unknown_item(self, requester):
        with pytest.raises(InventoryError) as exc:
            inventory.create_requisition(requester, 9999, 1, 'CC1')
        assert exc.value.code == 'NOT_FOUND'


class TestApproveRequisition:

    def test_approve_debits_stock(self, requisition, admin, admin_user, item_a):
        inventory.approve_requisition(requisition.pk, admin)

        requisition.refresh_from_db()
        assert requisition.status == RequisitionStatus.APPROVED
        assert requisition.resolved_by_id == admin_user.pk
        assert Item.objects.get(pk=item_a.pk).quantity == 6

        movement = Movement.objects.get(requisition=requisition)
        assert movement.quantity == 4
        assert movement.counterpart == 'CC2'
        assert movement.description == 'Requisição aprovada - Projeto: P9 - Manutenção'

    def test_approve_twice_is_refused(self, requisition, admin, item_a):
        inventory.approve_requisition(requisition.pk, admin)

        with pytest.raises(InventoryError) as exc:
            inventory.approve_requisition(requisition.pk, admin)

        assert exc.value.code == 'INVALID_STATUS'
        assert Item.objects.get(pk=item_a.pk).quantity == 6
        assert Movement.objects.count() == 1

    def test_approve_without_stock(self, requisition, admin, item_a):
        inventory.debit(item_a.pk, 8)

        with pytest.raises(InventoryError) as exc:
            inventory.approve_requisition(requisition.pk, admin)

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        requisition.refresh_from_db()
        assert requisition.status == RequisitionStatus.PENDING

    def test_approve_removed_item(self, requisition, admin, item_a):
        Item.objects.filter(pk=item_a.pk).delete()

        with pytest.raises(InventoryError) as exc:
            inventory.approve_requisition(requisition.pk, admin)
        assert exc.value.code == 'NOT_FOUND'

    def test_requires_admin(self, requisition, requester):
        with pytest.raises(InventoryError) as exc:
            inventory.approve_requisition(requisition.pk, requester)
        assert exc.value.code == 'PERMISSION_DENIED'

    def test_unknown_requisition(self, admin):
        with pytest.raises(InventoryError) as exc:
            inventory.approve_requisition(9999, admin)
        assert exc.value.code == 'NOT_FOUND'

    def test_member_approval_recomputes_package(self, make_package, admin, item_a):
        package = make_package((item_a, 2))
        member = package.requisitions.get()

        inventory.approve_requisition(member.pk, admin)

        package.refresh_from_db()
        assert package.status == PackageStatus.APPROVED
        movement = Movement.objects.get(requisition=member)
        assert movement.description.startswith('Requisição em pacote aprovada')


class TestRejectRequisition:

    def test_reject_with_reason(self, requisition, admin, item_a):
        inventory.reject_requisition(requisition.pk, admin, 'Duplicada')

        requisition.refresh_from_db()
        assert requisition.status == RequisitionStatus.REJECTED
        assert requisition.notes == 'Duplicada'
        assert requisition.resolved_at is not None
        assert Item.objects.get(pk=item_a.pk).quantity == 10
        assert Movement.objects.count() == 0

    def test_default_reason(self, requisition, admin):
        inventory.reject_requisition(requisition.pk, admin)

        requisition.refresh_from_db()
        assert requisition.notes == 'Negado pelo administrador'

    def test_reject_resolved(self, requisition, admin):
        inventory.reject_requisition(requisition.pk, admin, 'x')

        with pytest.raises(InventoryError) as exc:
            inventory.reject_requisition(requisition.pk, admin, 'y')
        assert exc.value.code == 'INVALID_STATUS'

    def test_member_rejection_recomputes_package(self, make_package, admin, item_a, item_b):
        package = make_package((item_a, 2), (item_b, 1))
        first, second = package.requisitions.order_by('pk')

        inventory.reject_requisition(first.pk, admin, 'x')
        package.refresh_from_db()
        assert package.status == PackageStatus.PENDING

        inventory.reject_requisition(second.pk, admin, 'y')
        package.refresh_from_db()
        assert package.status == PackageStatus.REJECTED
