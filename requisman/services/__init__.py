"""
Inventory services — modular organization of requisman operations.

    from requisman.services import StockLedger, PackageWorkflow, InventoryQueries
"""

from requisman.services.items import ItemCatalog, ItemPatch
from requisman.services.ledger import StockLedger
from requisman.services.packages import PackageWorkflow
from requisman.services.queries import InventoryQueries
from requisman.services.registry import Registry
from requisman.services.requisitions import RequisitionWorkflow

__all__ = [
    'StockLedger',
    'PackageWorkflow',
    'RequisitionWorkflow',
    'ItemCatalog',
    'ItemPatch',
    'InventoryQueries',
    'Registry',
]
