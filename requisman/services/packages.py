"""
Packages — multi-item requisitions created and resolved as a group.

Creation is all-or-nothing. Approval debits every approved member's item
through StockLedger inside a single unit of work: one failing member rolls
the whole operation back.
"""

import logging
from collections.abc import Iterable, Mapping

from requisman.conf import requisman_settings
from requisman.context import Actor
from requisman.db import unit_of_work
from requisman.exceptions import InventoryError
from requisman.models.enums import PackageStatus, RequisitionStatus
from requisman.models.package import Package
from requisman.models.requisition import Requisition
from requisman.services.ledger import validate_quantity
from requisman.services.requisitions import (
    approve_member,
    check_availability,
    lock_package,
    normalize_ids,
    normalize_lines,
    package_note,
    refresh_package_status,
    reject_member,
    require_admin,
    require_text,
    validate_registry,
)

logger = logging.getLogger('requisman')


def _ensure_package_pending(package: Package) -> None:
    if package.status != PackageStatus.PENDING:
        raise InventoryError(
            'INVALID_STATUS',
            package_id=package.pk,
            current=package.status,
            expected=PackageStatus.PENDING,
        )


class PackageWorkflow:
    """Package creation, approval and rejection."""

    @classmethod
    def create_package(cls, actor: Actor, cost_center, project, justification, items) -> Package:
        """
        Create a pending package with one pending requisition per line.

        Quantities are summed per item before checking stock, so two lines
        for the same item cannot together exceed what is on hand. Nothing
        is debited.

        Args:
            actor: Requester
            cost_center: Destination recorded on approval
            project: Free-text project name (may be empty)
            justification: Why the items are needed
            items: [{"item_id": int, "quantity": int}, ...]

        Raises:
            InventoryError('INVALID_INPUT'): Missing field or empty list
            InventoryError('INVALID_QUANTITY'): Non-positive quantity
            InventoryError('NOT_FOUND'): Unknown item
            InventoryError('INSUFFICIENT_STOCK'): First line that cannot be served
        """
        cost_center = require_text('cost_center', cost_center)
        justification = require_text('justification', justification)
        lines = normalize_lines(items)
        project = (project or '').strip()
        validate_registry(cost_center, project)

        try:
            with unit_of_work('create_package', requester_id=actor.user_id):
                stock = check_availability(lines)

                package = Package.objects.create(
                    requester_id=actor.user_id,
                    cost_center=cost_center,
                    project=project,
                    justification=justification,
                )
                Requisition.objects.bulk_create([
                    Requisition(
                        requester_id=actor.user_id,
                        package=package,
                        item_id=item_id,
                        item_name=stock[item_id].name,
                        quantity=quantity,
                        cost_center=cost_center,
                        project=project,
                        justification=justification,
                    )
                    for item_id, quantity in lines
                ])
        except InventoryError as exc:
            logger.warning(
                "requisman.package.create_refused",
                extra={"requester_id": actor.user_id, "code": exc.code, **exc.data},
            )
            raise

        logger.info(
            "requisman.package.created",
            extra={"package_id": package.pk, "lines": len(lines), "requester_id": actor.user_id},
        )
        return package

    @classmethod
    def approve_package(cls, package_id, actor: Actor) -> Package:
        """
        Approve every pending member of a pending package.

        A package that already left PENDING is refused, so a repeated
        call never debits twice.

        Raises:
            InventoryError('PERMISSION_DENIED'): Actor is not an administrator
            InventoryError('NOT_FOUND'): Unknown package
            InventoryError('INVALID_STATUS'): Package is not pending
            InventoryError('INSUFFICIENT_STOCK'): Some member cannot be served
        """
        require_admin(actor)

        try:
            with unit_of_work('approve_package', package_id=package_id):
                package = lock_package(package_id)
                _ensure_package_pending(package)

                members = (
                    package.requisitions
                    .select_for_update()
                    .filter(status=RequisitionStatus.PENDING)
                    .order_by('pk')
                )
                note = package_note(package)
                for requisition in members:
                    approve_member(requisition, actor, destination=package.cost_center, note=note)

                refresh_package_status(package, actor)
        except InventoryError as exc:
            logger.warning(
                "requisman.package.approve_refused",
                extra={"package_id": package_id, "code": exc.code, **exc.data},
            )
            raise

        logger.info(
            "requisman.package.approved",
            extra={"package_id": package.pk, "status": package.status, "approver_id": actor.user_id},
        )
        return package

    @classmethod
    def reject_package(cls, package_id, actor: Actor, reason=None) -> Package:
        """
        Reject every pending member of a pending package. No stock effect.

        Members already approved individually stay approved, so the derived
        status is then partially_approved rather than rejected.

        Raises:
            InventoryError('PERMISSION_DENIED'): Actor is not an administrator
            InventoryError('NOT_FOUND'): Unknown package
            InventoryError('INVALID_STATUS'): Package is not pending
        """
        require_admin(actor)
        reason = reason or requisman_settings.DEFAULT_REJECTION_REASON

        with unit_of_work('reject_package', package_id=package_id):
            package = lock_package(package_id)
            _ensure_package_pending(package)

            members = package.requisitions.select_for_update().filter(status=RequisitionStatus.PENDING)
            for requisition in members:
                reject_member(requisition, actor, reason)

            package.notes = reason
            package.save(update_fields=['notes'])
            refresh_package_status(package, actor)

        logger.info(
            "requisman.package.rejected",
            extra={"package_id": package.pk, "reason": reason},
        )
        return package

    @classmethod
    def approve_package_items(cls, package_id, requisition_ids: Iterable, actor: Actor) -> Package:
        """
        Approve the listed members only; the others stay as they are.

        Raises:
            InventoryError('PERMISSION_DENIED'): Actor is not an administrator
            InventoryError('INVALID_INPUT'): Empty id list
            InventoryError('NOT_FOUND'): Unknown package, or id not in package
            InventoryError('INVALID_STATUS'): Package or a listed member not pending
            InventoryError('INSUFFICIENT_STOCK'): Some listed member cannot be served
        """
        require_admin(actor)
        ids = normalize_ids(requisition_ids)

        try:
            with unit_of_work('approve_package_items', package_id=package_id):
                package = lock_package(package_id)
                _ensure_package_pending(package)

                note = package_note(package)
                for requisition in cls._members(package, ids):
                    approve_member(requisition, actor, destination=package.cost_center, note=note)

                refresh_package_status(package, actor)
        except InventoryError as exc:
            logger.warning(
                "requisman.package.approve_items_refused",
                extra={"package_id": package_id, "code": exc.code, **exc.data},
            )
            raise

        logger.info(
            "requisman.package.items_approved",
            extra={"package_id": package.pk, "requisition_ids": ids, "status": package.status},
        )
        return package

    @classmethod
    def reject_package_items(cls, package_id, requisition_ids: Iterable, actor: Actor,
                             reason=None) -> Package:
        """
        Reject the listed members only. No stock effect.

        Raises:
            InventoryError('PERMISSION_DENIED'): Actor is not an administrator
            InventoryError('INVALID_INPUT'): Empty id list
            InventoryError('NOT_FOUND'): Unknown package, or id not in package
            InventoryError('INVALID_STATUS'): Package or a listed member not pending
        """
        require_admin(actor)
        ids = normalize_ids(requisition_ids)
        reason = reason or requisman_settings.DEFAULT_REJECTION_REASON

        with unit_of_work('reject_package_items', package_id=package_id):
            package = lock_package(package_id)
            _ensure_package_pending(package)

            for requisition in cls._members(package, ids):
                reject_member(requisition, actor, reason)

            refresh_package_status(package, actor)

        logger.info(
            "requisman.package.items_rejected",
            extra={"package_id": package.pk, "requisition_ids": ids, "reason": reason},
        )
        return package

    @classmethod
    def edit_package_quantities(cls, package_id, quantities: Mapping, actor: Actor) -> Package:
        """
        Change requested quantities of pending members before approval.

        Args:
            quantities: {requisition_id: new_quantity}

        Raises:
            InventoryError('PERMISSION_DENIED'): Actor is not an administrator
            InventoryError('INVALID_INPUT'): Empty mapping
            InventoryError('INVALID_QUANTITY'): Non-positive quantity
            InventoryError('NOT_FOUND'): Unknown package, or id not in package
            InventoryError('INVALID_STATUS'): Package or a listed member not pending
            InventoryError('INSUFFICIENT_STOCK'): New total exceeds stock
        """
        require_admin(actor)
        if not quantities or not isinstance(quantities, Mapping):
            raise InventoryError('INVALID_INPUT', field='quantities')
        changes = {pk: validate_quantity(qty) for pk, qty in quantities.items()}

        with unit_of_work('edit_package_quantities', package_id=package_id):
            package = lock_package(package_id)
            _ensure_package_pending(package)

            members = cls._members(package, list(changes))
            pending = package.requisitions.filter(status=RequisitionStatus.PENDING)
            check_availability([(r.item_id, changes.get(r.pk, r.quantity)) for r in pending])

            for requisition in members:
                requisition.quantity = changes[requisition.pk]
                requisition.notes = "Quantidade editada pelo administrador"
                requisition.save(update_fields=['quantity', 'notes'])

        logger.info(
            "requisman.package.quantities_edited",
            extra={"package_id": package.pk, "changes": changes},
        )
        return package

    @classmethod
    def _members(cls, package: Package, ids: list) -> list[Requisition]:
        """Lock the listed pending members, in id order."""
        found = {
            r.pk: r
            for r in package.requisitions.select_for_update().filter(pk__in=ids).order_by('pk')
        }
        missing = [pk for pk in ids if pk not in found]
        if missing:
            raise InventoryError('NOT_FOUND', package_id=package.pk, requisition_ids=missing)

        members = list(found.values())
        for requisition in members:
            if requisition.status != RequisitionStatus.PENDING:
                raise InventoryError(
                    'INVALID_STATUS',
                    requisition_id=requisition.pk,
                    current=requisition.status,
                    expected=RequisitionStatus.PENDING,
                )
        return members
