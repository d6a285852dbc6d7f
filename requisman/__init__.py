"""
Django Requisman — Almoxarifado com requisições e aprovação em pacotes.

Uso:
    from requisman import inventory, Actor, InventoryError

    pacote = inventory.create_package(actor, "CC1", "P1", "teste", [{"item_id": 1, "quantity": 8}])
    inventory.approve_package(pacote.pk, admin)
    inventory.pending_packages()
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'inventory':
        from requisman.service import Inventory
        return Inventory
    elif name == 'InventoryError':
        from requisman.exceptions import InventoryError
        return InventoryError
    elif name == 'Actor':
        from requisman.context import Actor
        return Actor
    elif name == 'Item':
        from requisman.models.item import Item
        return Item
    elif name == 'Movement':
        from requisman.models.movement import Movement
        return Movement
    elif name == 'Requisition':
        from requisman.models.requisition import Requisition
        return Requisition
    elif name == 'Package':
        from requisman.models.package import Package
        return Package
    elif name == 'PackageStatus':
        from requisman.models.enums import PackageStatus
        return PackageStatus
    elif name == 'RequisitionStatus':
        from requisman.models.enums import RequisitionStatus
        return RequisitionStatus
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'inventory',
    'InventoryError',
    'Actor',
    'Item',
    'Movement',
    'Requisition',
    'Package',
    'PackageStatus',
    'RequisitionStatus',
]

__version__ = '0.1.0'
