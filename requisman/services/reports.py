"""
Spreadsheet reports — package detail, stock level and movement exports.

CSV through the csv module, XLSX through openpyxl. Both share the same rows.
"""

import csv
import io

from django.utils import timezone
from openpyxl import Workbook

from requisman.services.queries import InventoryQueries

PACKAGE_HEADER = [
    'ID do Pacote', 'Status', 'Data de Criação', 'Data de Aprovação', 'Solicitante',
    'Email do Solicitante', 'Centro de Custo', 'Projeto', 'Justificativa', 'Observações',
]
ITEM_HEADER = [
    'ID do Item', 'Nome do Item', 'Descrição do Item', 'Quantidade Solicitada',
    'Quantidade Disponível', 'Status do Item', 'Observações',
]
STOCK_HEADER = [
    'Nome do Item', 'Código/WBS', 'Quantidade Atual', 'Quantidade Mínima',
    'Quantidade Ideal', 'Status',
]
MOVEMENT_HEADER = [
    'Data', 'Item', 'Tipo', 'QTDE', 'Origem/Destino', 'Solicitante', 'Aprovador', 'Descrição',
]
STOCK_LEVEL_LABELS = {
    'critical': 'Abaixo do Mínimo',
    'low': 'Abaixo do Ideal',
    'ok': 'Normal',
}


def _date(value) -> str:
    return value.strftime('%d/%m/%Y %H:%M') if value else ''


def _person(user) -> str:
    return (user.get_full_name() or user.get_username()) if user else ''


def package_rows(package_id) -> list[list]:
    """
    Rows for a package report: header block, blank line, member block.

    Raises:
        InventoryError('NOT_FOUND'): Unknown package
    """
    detail = InventoryQueries.package_detail(package_id)
    package = detail['package']
    requester = package.requester

    rows = [
        PACKAGE_HEADER,
        [
            package.pk,
            package.get_status_display(),
            _date(package.created_at),
            _date(package.resolved_at),
            _person(requester),
            requester.email if requester else '',
            package.cost_center,
            package.project,
            package.justification,
            package.notes,
        ],
        [],
        ITEM_HEADER,
    ]
    for requisition in detail['items']:
        item = requisition.item
        rows.append([
            requisition.pk,
            requisition.item_name,
            item.description if item else '',
            requisition.quantity,
            requisition.current_stock or 0,
            requisition.get_status_display(),
            requisition.notes,
        ])
    return rows


def stock_rows() -> list[list]:
    rows = [STOCK_HEADER]
    for line in InventoryQueries.stock_report():
        rows.append([
            line['name'],
            line['series'] or '-',
            line['quantity'],
            line['minimum'],
            line['ideal'],
            STOCK_LEVEL_LABELS[line['level']],
        ])
    return rows


def to_csv(rows: list[list]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerows(rows)
    return output.getvalue()


def to_xlsx(rows: list[list], title: str) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = title[:31]
    for row in rows:
        sheet.append([str(value) if value is not None and not isinstance(value, (int, float)) else value
                      for value in row])
    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


def package_csv(package_id) -> str:
    return to_csv(package_rows(package_id))


def package_xlsx(package_id) -> bytes:
    return to_xlsx(package_rows(package_id), 'Relatório do Pacote')


def stock_xlsx() -> bytes:
    return to_xlsx(stock_rows(), 'Relatório de Estoque')


def movement_rows(days=None, user_id=None, item_id=None) -> list[list]:
    """Rows for the movement report over the same window as movements()."""
    rows = [MOVEMENT_HEADER]
    movements = (
        InventoryQueries.movements(days, user_id=user_id, item_id=item_id)
        .select_related('user', 'approver')
    )
    for movement in movements:
        rows.append([
            _date(timezone.localtime(movement.timestamp)),
            movement.item_name,
            movement.get_kind_display(),
            movement.quantity,
            movement.counterpart or '-',
            _person(movement.user) or '-',
            _person(movement.approver) or '-',
            ' '.join(movement.description.split()) or '-',
        ])
    return rows


def movements_xlsx(days=None, user_id=None, item_id=None) -> bytes:
    return to_xlsx(movement_rows(days, user_id, item_id), 'Relatório de Movimentação')
