"""
Inventory Service — The single public interface for all requisman operations.

Usage:
    from requisman import inventory, Actor, InventoryError

    pacote = inventory.create_package(
        Actor.from_user(request.user), "CC1", "P1", "Obra do galpão",
        [{"item_id": capacete.pk, "quantity": 8}],
    )
    inventory.approve_package(pacote.pk, Actor.from_user(admin))
    inventory.quantity_of(capacete.pk)  # 2
"""

from requisman.services.items import ItemCatalog, ItemPatch
from requisman.services.ledger import StockLedger
from requisman.services.packages import PackageWorkflow
from requisman.services.queries import InventoryQueries
from requisman.services.registry import Registry
from requisman.services.reports import movements_xlsx, package_csv, package_xlsx, stock_xlsx
from requisman.services.spreadsheets import read_rows
from requisman.services.requisitions import RequisitionWorkflow
from requisman.services.transfer import export_data, import_data


class Inventory(
    StockLedger,
    PackageWorkflow,
    RequisitionWorkflow,
    ItemCatalog,
    InventoryQueries,
):
    """
    Single interface for all inventory operations.

    Parameter convention: the subject id first, the Actor after it
    (creation methods take the Actor first, as the requester).

    IMPORTANT: All state-changing methods run in one atomic unit of work
    with the rows they resolve locked. See each method's docstring.
    """

    Patch = ItemPatch
    registry = Registry

    export_data = staticmethod(export_data)
    import_data = staticmethod(import_data)

    package_csv = staticmethod(package_csv)
    package_xlsx = staticmethod(package_xlsx)
    stock_xlsx = staticmethod(stock_xlsx)
    movements_xlsx = staticmethod(movements_xlsx)

    read_spreadsheet = staticmethod(read_rows)
