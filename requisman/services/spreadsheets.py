"""
Spreadsheet item import — reading CSV/XLSX rows and mapping their columns.

Two layouts are understood: the item export layout ("Nome do Item",
"Código", "Quantidade", ...) and the materials delivery sheet
("Descrição Material Atendido", "Cod. Material Atendido"/"WBS",
"Qtd. Atendida"). Unknown columns are kept in the item notes.
"""

import csv
import io
import zipfile
from decimal import Decimal, InvalidOperation

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from requisman.exceptions import InventoryError

NAME_COLUMNS = ['Descrição Material Atendido', 'nome', 'Nome', 'Nome do Item']
SERIES_COLUMNS = ['Cod. Material Atendido', 'WBS', 'Wbs', 'wbs', 'serie', 'Serie', 'Código']
QUANTITY_COLUMNS = ['quantidade', 'Quantidade', 'Qtd. Atendida']

TEXT_COLUMNS = {
    'description': ['descricao', 'Descrição'],
    'origin': ['origem', 'Origem'],
    'destination': ['destino', 'Destino'],
    'invoice': ['nf', 'Nota Fiscal'],
    'notes': ['infos', 'Informações Adicionais'],
}
THRESHOLD_COLUMNS = {
    'minimum': ['minimo', 'Quantidade Mínima'],
    'ideal': ['ideal', 'Quantidade Ideal'],
}
VALUE_COLUMNS = ['valor', 'Valor']

KNOWN_COLUMNS = {
    *NAME_COLUMNS, *SERIES_COLUMNS, *QUANTITY_COLUMNS, *VALUE_COLUMNS,
    *(column for columns in TEXT_COLUMNS.values() for column in columns),
    *(column for columns in THRESHOLD_COLUMNS.values() for column in columns),
}


def _text(value) -> str:
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _first(row, columns) -> str:
    for column in columns:
        value = _text(row.get(column))
        if value:
            return value
    return ''


def _int(value) -> int:
    """Leading integer of a cell; blank or unreadable cells count as 0."""
    try:
        return int(Decimal(_text(value).replace(',', '.')))
    except (InvalidOperation, ValueError, OverflowError):
        return 0


def map_item_row(row) -> dict:
    """
    Turn one spreadsheet row into register_item() arguments.

    Returns:
        Dict with name, series, quantity, value, minimum, ideal and the
        text attributes. Extra columns are appended to notes as
        "column: value" pairs.
    """
    attrs = {
        'name': _first(row, NAME_COLUMNS),
        'series': _first(row, SERIES_COLUMNS),
        'quantity': _int(_first(row, QUANTITY_COLUMNS)),
    }
    for field, columns in TEXT_COLUMNS.items():
        attrs[field] = _first(row, columns)
    for field, columns in THRESHOLD_COLUMNS.items():
        attrs[field] = max(_int(_first(row, columns)), 0)

    try:
        value = Decimal(_first(row, VALUE_COLUMNS).replace(',', '.') or 0)
    except InvalidOperation:
        value = Decimal(0)
    attrs['value'] = value if value.is_finite() else Decimal(0)

    extras = [f"{column}: {_text(value)}" for column, value in row.items() if column not in KNOWN_COLUMNS]
    if extras:
        attrs['notes'] = '; '.join(filter(None, [attrs['notes'], '; '.join(extras)]))
    return attrs


def _csv_rows(data: bytes) -> list[dict]:
    text = data.decode('utf-8-sig')
    try:
        dialect = csv.Sniffer().sniff(text[:4096], delimiters=',;\t')
    except csv.Error:
        dialect = csv.excel
    reader = csv.DictReader(io.StringIO(text), dialect=dialect)
    return [{column: value for column, value in row.items() if column} for row in reader]


def _xlsx_rows(data: bytes) -> list[dict]:
    workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        rows = workbook.worksheets[0].iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        columns = [_text(cell) for cell in header]
        return [
            {column: value for column, value in zip(columns, values) if column}
            for values in rows
        ]
    finally:
        workbook.close()


def read_rows(data: bytes, filename: str) -> list[dict]:
    """
    Read the first sheet of a CSV or XLSX file as one dict per row.

    The first row is the header. Rows with no value at all are skipped.

    Raises:
        InventoryError('INVALID_INPUT'): File cannot be read as CSV/XLSX
    """
    try:
        if filename.lower().endswith('.csv'):
            rows = _csv_rows(data)
        else:
            rows = _xlsx_rows(data)
    except (InvalidFileException, zipfile.BadZipFile, UnicodeDecodeError, KeyError, OSError):
        raise InventoryError('INVALID_INPUT', "Planilha ilegível", field='file', filename=filename) from None

    return [row for row in rows if any(_text(value) for value in row.values())]
