"""
Requisman Models.

Core models for inventory and requisitions:
- Item: Stocked line with current quantity and thresholds
- Movement: Immutable log of quantity changes
- Requisition: Request to withdraw one item
- Package: Requisitions submitted and resolved together
- Project / CostCenter: Registry offered to requesters
"""

from requisman.models.enums import MovementKind, PackageStatus, RequisitionStatus, StockLevel
from requisman.models.item import Item
from requisman.models.movement import Movement
from requisman.models.package import Package
from requisman.models.registry import CostCenter, Project
from requisman.models.requisition import Requisition

__all__ = [
    'MovementKind',
    'PackageStatus',
    'RequisitionStatus',
    'StockLevel',
    'Item',
    'Movement',
    'Requisition',
    'Package',
    'Project',
    'CostCenter',
]
