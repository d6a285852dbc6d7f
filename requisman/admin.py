"""
Requisman Admin.

- Item: editable attributes; quantity is read-only (changes only via the ledger)
- Movement: read-only audit trail
- Package: inline members with approve/reject actions
- Requisition: approve/reject actions
- Project / CostCenter: editable registry
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from requisman.context import Actor
from requisman.exceptions import InventoryError
from requisman.models import CostCenter, Item, Movement, Package, Project, Requisition, StockLevel

logger = logging.getLogger(__name__)


class ReadOnlyMixin:

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


def _run_for_each(modeladmin, request, queryset, operation, done_message):
    """Apply one inventory operation per selected row, reporting refusals."""
    actor = Actor.from_user(request.user)
    count = 0
    for obj in queryset:
        try:
            operation(obj.pk, actor)
            count += 1
        except InventoryError as exc:
            logger.warning("admin.%s: refused for #%s: %s", operation.__name__, obj.pk, exc)
            modeladmin.message_user(request, f"#{obj.pk}: {exc.message}", level=messages.WARNING)
    modeladmin.message_user(request, done_message.format(count=count))


# =========================================================================
# ITEM ADMIN
# =========================================================================

@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    """Item admin — quantity is read-only."""

    list_display = ['name', 'series', 'quantity', 'minimum', 'ideal', 'level_display']
    search_fields = ['name', 'series', 'description']
    readonly_fields = ['quantity', 'created_at']

    @admin.display(description=_('Nível'))
    def level_display(self, obj):
        return StockLevel(obj.stock_level).label


# =========================================================================
# MOVEMENT ADMIN (read-only audit trail)
# =========================================================================

@admin.register(Movement)
class MovementAdmin(ReadOnlyMixin, admin.ModelAdmin):
    """Movement admin — read-only. Immutable audit trail."""

    list_display = ['timestamp', 'item_name', 'kind', 'quantity', 'counterpart', 'user', 'approver']
    list_filter = ['kind', 'timestamp']
    search_fields = ['item_name', 'counterpart', 'description']
    date_hierarchy = 'timestamp'


# =========================================================================
# PACKAGE ADMIN
# =========================================================================

class RequisitionInline(ReadOnlyMixin, admin.TabularInline):
    model = Requisition
    fields = ['item_name', 'quantity', 'status', 'notes', 'resolved_at']
    readonly_fields = fields
    extra = 0


@admin.register(Package)
class PackageAdmin(admin.ModelAdmin):
    """Package admin — resolution goes through the inventory service."""

    list_display = ['id', 'requester', 'cost_center', 'project', 'status', 'created_at', 'resolved_at']
    list_filter = ['status', 'created_at']
    search_fields = ['cost_center', 'project', 'justification']
    readonly_fields = ['requester', 'status', 'created_at', 'resolved_at', 'resolved_by', 'notes']
    inlines = [RequisitionInline]
    actions = ['approve_packages', 'reject_packages']

    def has_add_permission(self, request):
        return False

    @admin.action(description=_('Aprovar pacotes selecionados'))
    def approve_packages(self, request, queryset):
        from requisman import inventory

        _run_for_each(self, request, queryset.pending(), inventory.approve_package,
                      _('{count} pacote(s) aprovado(s).'))

    @admin.action(description=_('Rejeitar pacotes selecionados'))
    def reject_packages(self, request, queryset):
        from requisman import inventory

        _run_for_each(self, request, queryset.pending(), inventory.reject_package,
                      _('{count} pacote(s) rejeitado(s).'))


# =========================================================================
# REQUISITION ADMIN
# =========================================================================

@admin.register(Requisition)
class RequisitionAdmin(admin.ModelAdmin):

    list_display = ['id', 'item_name', 'quantity', 'requester', 'cost_center', 'package', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['item_name', 'cost_center', 'project']
    readonly_fields = ['requester', 'package', 'item', 'item_name', 'status',
                       'created_at', 'resolved_at', 'resolved_by']
    actions = ['approve_requisitions', 'reject_requisitions']

    def has_add_permission(self, request):
        return False

    @admin.action(description=_('Aprovar requisições selecionadas'))
    def approve_requisitions(self, request, queryset):
        from requisman import inventory

        _run_for_each(self, request, queryset.pending(), inventory.approve_requisition,
                      _('{count} requisição(ões) aprovada(s).'))

    @admin.action(description=_('Rejeitar requisições selecionadas'))
    def reject_requisitions(self, request, queryset):
        from requisman import inventory

        _run_for_each(self, request, queryset.pending(), inventory.reject_requisition,
                      _('{count} requisição(ões) rejeitada(s).'))


# =========================================================================
# REGISTRY ADMIN
# =========================================================================

@admin.register(Project, CostCenter)
class RegistryAdmin(admin.ModelAdmin):

    list_display = ['name', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name']
    readonly_fields = ['created_at']

    def has_delete_permission(self, request, obj=None):
        return False
