"""
Inventory queries — read-only operations.

All methods are classmethods and use no locking.
"""

from datetime import timedelta

from django.db.models import F
from django.utils import timezone

from requisman.conf import requisman_settings
from requisman.exceptions import InventoryError
from requisman.models.item import Item
from requisman.models.movement import Movement
from requisman.models.package import Package
from requisman.models.requisition import Requisition


class InventoryQueries:
    """Read-only package, requisition, movement and stock queries."""

    # ══════════════════════════════════════════════════════════════
    # PACKAGES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def pending_packages(cls) -> list[Package]:
        """
        Pending packages, newest first, annotated with total_items and
        total_quantity.
        """
        return list(
            Package.objects.pending()
            .with_totals()
            .select_related('requester')
            .order_by('-created_at', '-pk')
        )

    @classmethod
    def user_packages(cls, user_id) -> list[Package]:
        """Every package of one requester, newest first, with totals."""
        return list(
            Package.objects.for_user(user_id)
            .with_totals()
            .order_by('-created_at', '-pk')
        )

    @classmethod
    def package_items(cls, package_id) -> list[Requisition]:
        """
        Members of a package, each annotated with current_stock.

        current_stock is None when the item has since been removed.

        Raises:
            InventoryError('NOT_FOUND'): Unknown package
        """
        if not Package.objects.filter(pk=package_id).exists():
            raise InventoryError('NOT_FOUND', package_id=package_id)

        return list(
            Requisition.objects.filter(package_id=package_id)
            .select_related('item')
            .annotate(current_stock=F('item__quantity'))
            .order_by('pk')
        )

    @classmethod
    def package_detail(cls, package_id) -> dict:
        """Package header plus its members, in one structure."""
        items = cls.package_items(package_id)
        package = Package.objects.with_totals().select_related('requester', 'resolved_by').get(pk=package_id)
        return {'package': package, 'items': items}

    # ══════════════════════════════════════════════════════════════
    # REQUISITIONS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def pending_requisitions(cls, individual_only: bool = False) -> list[Requisition]:
        """Pending requisitions, oldest first; optionally only standalone ones."""
        qs = Requisition.objects.pending().select_related('requester', 'item')
        if individual_only:
            qs = qs.individual()
        return list(qs.order_by('created_at', 'pk'))

    @classmethod
    def user_requisitions(cls, user_id) -> list[Requisition]:
        return list(Requisition.objects.for_user(user_id).order_by('-created_at', '-pk'))

    # ══════════════════════════════════════════════════════════════
    # MOVEMENTS & STOCK
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def movements(cls, days: int | None = None, user_id=None, item_id=None):
        """
        Movements in the last `days` days, newest first.

        Args:
            days: Window size (None = MOVEMENT_REPORT_DAYS)
            user_id: Only movements requested by this user
            item_id: Only movements of this item
        """
        if days is None:
            days = requisman_settings.MOVEMENT_REPORT_DAYS
        qs = Movement.objects.since(timezone.now() - timedelta(days=days))
        if user_id is not None:
            qs = qs.filter(user_id=user_id)
        if item_id is not None:
            qs = qs.filter(item_id=item_id)
        return qs.order_by('-timestamp', '-pk')

    @classmethod
    def stock_report(cls) -> list[dict]:
        """One row per item with quantity, thresholds and stock level."""
        return [
            {
                'item_id': item.pk,
                'name': item.name,
                'series': item.series,
                'quantity': item.quantity,
                'minimum': item.minimum,
                'ideal': item.ideal,
                'level': str(item.stock_level),
            }
            for item in Item.objects.order_by('name', 'pk')
        ]

    @classmethod
    def low_stock(cls):
        """Items at or below their minimum."""
        return Item.objects.below_minimum().order_by('quantity', 'name')
