"""
Registry — projects and cost centers offered to requesters.

Entries are deactivated, never deleted: packages and requisitions store the
name as text and must keep pointing at something meaningful.
"""

import logging

from requisman.context import Actor
from requisman.db import unit_of_work
from requisman.exceptions import InventoryError
from requisman.models.registry import CostCenter, Project
from requisman.services.requisitions import require_admin, require_text

logger = logging.getLogger('requisman')


class Registry:
    """Create, list, rename and deactivate registry entries."""

    KINDS = {
        'project': Project,
        'cost_center': CostCenter,
    }

    @classmethod
    def _model(cls, kind):
        try:
            return cls.KINDS[kind]
        except KeyError:
            raise InventoryError('INVALID_INPUT', f"Tipo de cadastro desconhecido: {kind}", field='kind') from None

    @classmethod
    def _get(cls, model, entry_id):
        try:
            return model.objects.select_for_update().get(pk=entry_id)
        except model.DoesNotExist:
            raise InventoryError('NOT_FOUND', entry_id=entry_id) from None

    @classmethod
    def _ensure_unique(cls, model, name, exclude=None):
        taken = model.objects.filter(name=name)
        if exclude is not None:
            taken = taken.exclude(pk=exclude)
        if taken.exists():
            raise InventoryError('INVALID_INPUT', f"Nome já cadastrado: {name}", field='name')

    @classmethod
    def create(cls, kind, name, actor: Actor, description=''):
        """
        Raises:
            InventoryError('PERMISSION_DENIED'): Actor is not an administrator
            InventoryError('INVALID_INPUT'): Missing or duplicated name
        """
        require_admin(actor)
        model = cls._model(kind)
        name = require_text('name', name)

        with unit_of_work('registry_create', kind=kind):
            cls._ensure_unique(model, name)
            entry = model.objects.create(name=name, description=description or '')

        logger.info("requisman.registry.created", extra={"kind": kind, "entry_id": entry.pk})
        return entry

    @classmethod
    def active(cls, kind):
        return cls._model(kind).objects.active()

    @classmethod
    def update(cls, kind, entry_id, actor: Actor, name=None, description=None):
        require_admin(actor)
        model = cls._model(kind)
        changes = {}
        if name is not None:
            changes['name'] = require_text('name', name)
        if description is not None:
            changes['description'] = description
        if not changes:
            raise InventoryError('INVALID_INPUT', "Nenhum campo para atualizar")

        with unit_of_work('registry_update', kind=kind, entry_id=entry_id):
            entry = cls._get(model, entry_id)
            if 'name' in changes:
                cls._ensure_unique(model, changes['name'], exclude=entry.pk)
            for field, value in changes.items():
                setattr(entry, field, value)
            entry.save(update_fields=list(changes))

        logger.info("requisman.registry.updated", extra={"kind": kind, "entry_id": entry.pk})
        return entry

    @classmethod
    def deactivate(cls, kind, entry_id, actor: Actor):
        """Soft delete. Deactivating twice is harmless."""
        require_admin(actor)
        model = cls._model(kind)

        with unit_of_work('registry_deactivate', kind=kind, entry_id=entry_id):
            entry = cls._get(model, entry_id)
            if entry.is_active:
                entry.is_active = False
                entry.save(update_fields=['is_active'])

        logger.info("requisman.registry.deactivated", extra={"kind": kind, "entry_id": entry.pk})
        return entry
