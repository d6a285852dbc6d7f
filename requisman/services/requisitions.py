"""
Requisitions — single-item requests and the member-level transitions
shared with packages.

All state-changing methods run inside one unit of work with the rows
being resolved locked by select_for_update().
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping

from django.utils import timezone

from requisman.conf import requisman_settings
from requisman.context import Actor
from requisman.db import unit_of_work
from requisman.exceptions import InventoryError
from requisman.models.enums import RequisitionStatus
from requisman.models.item import Item
from requisman.models.package import Package
from requisman.models.registry import CostCenter, Project
from requisman.models.requisition import Requisition
from requisman.services.ledger import StockLedger, validate_item_id, validate_quantity
from requisman.status import derive_package_status, is_terminal

logger = logging.getLogger('requisman')


# ══════════════════════════════════════════════════════════════
# VALIDATION
# ══════════════════════════════════════════════════════════════


def require_admin(actor: Actor) -> None:
    if actor is None or not actor.is_admin:
        raise InventoryError('PERMISSION_DENIED', user_id=getattr(actor, 'user_id', None))


def require_text(field: str, value) -> str:
    value = (value or '').strip() if isinstance(value, str) else value
    if not value:
        raise InventoryError('INVALID_INPUT', f"Campo obrigatório: {field}", field=field)
    return value


def validate_registry(cost_center: str, project: str) -> None:
    """Check names against the active registry when VALIDATE_REGISTRY is on."""
    if not requisman_settings.VALIDATE_REGISTRY:
        return
    if not CostCenter.objects.active().filter(name=cost_center).exists():
        raise InventoryError(
            'INVALID_INPUT', f"Centro de custo desconhecido: {cost_center}", field='cost_center'
        )
    if project and not Project.objects.active().filter(name=project).exists():
        raise InventoryError('INVALID_INPUT', f"Projeto desconhecido: {project}", field='project')


def normalize_lines(items) -> list[tuple[int, int]]:
    """
    Turn [{"item_id": .., "quantity": ..}, ...] into [(item_id, quantity), ...].

    Raises:
        InventoryError('INVALID_INPUT'): Empty list, malformed entry or item id
        InventoryError('INVALID_QUANTITY'): Non-positive quantity
    """
    if not items or isinstance(items, (str, bytes, Mapping)):
        raise InventoryError('INVALID_INPUT', "Lista de itens é obrigatória", field='items')

    lines = []
    for entry in items:
        if not isinstance(entry, Mapping) or entry.get('item_id') is None:
            raise InventoryError('INVALID_INPUT', "Item sem identificador", field='items')
        lines.append((validate_item_id(entry['item_id']), validate_quantity(entry.get('quantity'))))
    return lines


def normalize_ids(ids: Iterable) -> list:
    ids = list(dict.fromkeys(ids or []))
    if not ids:
        raise InventoryError('INVALID_INPUT', "Lista de requisições é obrigatória", field='requisition_ids')
    return ids


def check_availability(lines: list[tuple[int, int]]) -> dict:
    """
    Validate requested quantities against current stock, summing per item.

    Returns:
        Dict[item_id, Item]

    Raises:
        InventoryError('NOT_FOUND'): Unknown item
        InventoryError('INSUFFICIENT_STOCK'): First item that cannot be served
    """
    wanted = defaultdict(int)
    for item_id, quantity in lines:
        wanted[item_id] += quantity

    items = Item.objects.in_bulk(list(wanted))
    for item_id, quantity in wanted.items():
        item = items.get(item_id)
        if item is None:
            raise InventoryError('NOT_FOUND', item_id=item_id)
        if item.quantity < quantity:
            raise InventoryError(
                'INSUFFICIENT_STOCK',
                f"Quantidade indisponível para {item.name}. Disponível: {item.quantity}",
                item_id=item_id,
                item_name=item.name,
                available=item.quantity,
                requested=quantity,
            )
    return items


# ══════════════════════════════════════════════════════════════
# MEMBER TRANSITIONS (caller holds the transaction)
# ══════════════════════════════════════════════════════════════


def _ensure_pending(requisition: Requisition) -> None:
    if requisition.status != RequisitionStatus.PENDING:
        raise InventoryError(
            'INVALID_STATUS',
            requisition_id=requisition.pk,
            current=requisition.status,
            expected=RequisitionStatus.PENDING,
        )


def approve_member(requisition: Requisition, actor: Actor, destination: str, note: str) -> None:
    """Debit the stock for one pending requisition and mark it approved."""
    _ensure_pending(requisition)
    if requisition.item_id is None:
        raise InventoryError('NOT_FOUND', requisition_id=requisition.pk, item_name=requisition.item_name)

    StockLedger.debit(
        requisition.item_id,
        requisition.quantity,
        destination=destination,
        note=note,
        user_id=requisition.requester_id,
        approver_id=actor.user_id,
        requisition_id=requisition.pk,
    )

    requisition.status = RequisitionStatus.APPROVED
    requisition.resolved_at = timezone.now()
    requisition.resolved_by_id = actor.user_id
    requisition.save(update_fields=['status', 'resolved_at', 'resolved_by'])


def reject_member(requisition: Requisition, actor: Actor, reason: str) -> None:
    """Mark one pending requisition rejected. No stock effect."""
    _ensure_pending(requisition)

    requisition.status = RequisitionStatus.REJECTED
    requisition.notes = reason
    requisition.resolved_at = timezone.now()
    requisition.resolved_by_id = actor.user_id
    requisition.save(update_fields=['status', 'notes', 'resolved_at', 'resolved_by'])


def refresh_package_status(package: Package, actor: Actor | None = None) -> str:
    """Recompute the package status from all of its members and persist it."""
    statuses = package.requisitions.values_list('status', flat=True)
    status = derive_package_status(statuses)

    if status != package.status:
        package.status = status
        fields = ['status']
        if is_terminal(status):
            package.resolved_at = timezone.now()
            package.resolved_by_id = actor.user_id if actor else None
            fields += ['resolved_at', 'resolved_by']
        package.save(update_fields=fields)
    return status


def lock_package(package_id) -> Package:
    try:
        return Package.objects.select_for_update().get(pk=package_id)
    except (Package.DoesNotExist, ValueError, TypeError):
        raise InventoryError('NOT_FOUND', package_id=package_id) from None


def package_note(package: Package) -> str:
    return f"Requisição em pacote aprovada - Projeto: {package.project} - {package.justification}"


def _requisition_note(requisition: Requisition) -> str:
    return f"Requisição aprovada - Projeto: {requisition.project} - {requisition.justification}"


# ══════════════════════════════════════════════════════════════
# INDIVIDUAL REQUISITIONS
# ══════════════════════════════════════════════════════════════


class RequisitionWorkflow:
    """Lifecycle of individual requisitions."""

    @classmethod
    def create_requisition(cls, actor: Actor, item_id, quantity, cost_center,
                           project='', justification='') -> Requisition:
        """
        Create a standalone pending requisition.

        Stock is only validated here, never debited.

        Raises:
            InventoryError('INVALID_INPUT'): Missing cost center or malformed item id
            InventoryError('NOT_FOUND'): Unknown item
            InventoryError('INSUFFICIENT_STOCK'): Not enough stock right now
        """
        cost_center = require_text('cost_center', cost_center)
        item_id = validate_item_id(item_id)
        quantity = validate_quantity(quantity)
        validate_registry(cost_center, project)

        with unit_of_work('create_requisition', item_id=item_id):
            items = check_availability([(item_id, quantity)])
            requisition = Requisition.objects.create(
                requester_id=actor.user_id,
                item=items[item_id],
                item_name=items[item_id].name,
                quantity=quantity,
                cost_center=cost_center,
                project=project or '',
                justification=justification or '',
            )

        logger.info(
            "requisman.requisition.created",
            extra={"requisition_id": requisition.pk, "item_id": item_id, "qty": quantity},
        )
        return requisition

    @classmethod
    def approve_requisition(cls, requisition_id, actor: Actor) -> Requisition:
        """
        Approve one requisition: debit stock, write the withdrawal movement.

        If the requisition belongs to a package, the package status is
        recomputed in the same transaction.

        Raises:
            InventoryError('PERMISSION_DENIED'): Actor is not an administrator
            InventoryError('NOT_FOUND'): Unknown requisition
            InventoryError('INVALID_STATUS'): Requisition already resolved
            InventoryError('INSUFFICIENT_STOCK'): Not enough stock
        """
        require_admin(actor)

        try:
            with unit_of_work('approve_requisition', requisition_id=requisition_id):
                package, requisition = cls._lock(requisition_id)
                note = package_note(package) if package else _requisition_note(requisition)
                approve_member(requisition, actor, destination=requisition.cost_center, note=note)
                if package:
                    refresh_package_status(package, actor)
        except InventoryError as exc:
            logger.warning(
                "requisman.requisition.approve_refused",
                extra={"requisition_id": requisition_id, "code": exc.code},
            )
            raise

        logger.info(
            "requisman.requisition.approved",
            extra={"requisition_id": requisition.pk, "qty": requisition.quantity},
        )
        return requisition

    @classmethod
    def reject_requisition(cls, requisition_id, actor: Actor, reason=None) -> Requisition:
        """
        Reject one requisition. No stock effect.

        Raises:
            InventoryError('PERMISSION_DENIED'): Actor is not an administrator
            InventoryError('NOT_FOUND'): Unknown requisition
            InventoryError('INVALID_STATUS'): Requisition already resolved
        """
        require_admin(actor)
        reason = reason or requisman_settings.DEFAULT_REJECTION_REASON

        with unit_of_work('reject_requisition', requisition_id=requisition_id):
            package, requisition = cls._lock(requisition_id)
            reject_member(requisition, actor, reason)
            if package:
                refresh_package_status(package, actor)

        logger.info(
            "requisman.requisition.rejected",
            extra={"requisition_id": requisition.pk, "reason": reason},
        )
        return requisition

    @classmethod
    def _lock(cls, requisition_id) -> tuple[Package | None, Requisition]:
        """Lock the owning package (if any) before the requisition itself."""
        try:
            package_id = Requisition.objects.values_list('package_id', flat=True).get(pk=requisition_id)
        except (Requisition.DoesNotExist, ValueError, TypeError):
            raise InventoryError('NOT_FOUND', requisition_id=requisition_id) from None

        package = lock_package(package_id) if package_id else None
        requisition = Requisition.objects.select_for_update().get(pk=requisition_id)
        return package, requisition
