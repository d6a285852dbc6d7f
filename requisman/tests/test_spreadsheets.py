"""
Tests for reading item spreadsheets and mapping their columns.
"""

import io
from decimal import Decimal

import pytest
from openpyxl import Workbook

from requisman import InventoryError
from requisman.services.spreadsheets import map_item_row, read_rows


def xlsx_bytes(*rows):
    workbook = Workbook()
    for row in rows:
        workbook.active.append(row)
    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


class TestReadRows:

    def test_xlsx_first_row_is_header(self):
        data = xlsx_bytes(
            ['Nome do Item', 'Código', 'Quantidade'],
            ['Capacete', 'A1', 5],
            [None, None, None],
            ['Luva', None, 3],
        )

        rows = read_rows(data, 'epis.xlsx')

        assert rows == [
            {'Nome do Item': 'Capacete', 'Código': 'A1', 'Quantidade': 5},
            {'Nome do Item': 'Luva', 'Código': None, 'Quantidade': 3},
        ]

    def test_csv_with_semicolons(self):
        data = 'Nome;Quantidade\nCapacete;5\nLuva;3\n'.encode('utf-8-sig')

        rows = read_rows(data, 'EPIS.CSV')

        assert rows == [
            {'Nome': 'Capacete', 'Quantidade': '5'},
            {'Nome': 'Luva', 'Quantidade': '3'},
        ]

    def test_csv_with_commas(self):
        rows = read_rows(b'nome,quantidade\nBota,2\n', 'epis.csv')
        assert rows == [{'nome': 'Bota', 'quantidade': '2'}]

    def test_unreadable_file(self):
        with pytest.raises(InventoryError) as exc:
            read_rows(b'not a workbook', 'epis.xlsx')
        assert exc.value.code == 'INVALID_INPUT'
        assert exc.value.data['field'] == 'file'


class TestMapItemRow:

    def test_item_export_layout(self):
        attrs = map_item_row({
            'Nome do Item': ' Capacete ',
            'Código': 'A1',
            'Quantidade': '12',
            'Valor': '19,90',
            'Quantidade Mínima': 2,
            'Quantidade Ideal': 6,
            'Nota Fiscal': 'NF 9',
        })

        assert attrs['name'] == 'Capacete'
        assert attrs['series'] == 'A1'
        assert attrs['quantity'] == 12
        assert attrs['value'] == Decimal('19.90')
        assert attrs['minimum'] == 2
        assert attrs['ideal'] == 6
        assert attrs['invoice'] == 'NF 9'
        assert attrs['notes'] == ''

    def test_delivery_sheet_layout(self):
        attrs = map_item_row({
            'Descrição Material Atendido': 'Luva de raspa',
            'Cod. Material Atendido': 10045.0,
            'WBS': 'W-01',
            'Qtd. Atendida': 7.0,
            'Requisitante': 'Obra 3',
        })

        assert attrs['name'] == 'Luva de raspa'
        assert attrs['series'] == '10045'
        assert attrs['quantity'] == 7
        assert attrs['notes'] == 'Requisitante: Obra 3'

    def test_wbs_when_no_material_code(self):
        attrs = map_item_row({'Descrição Material Atendido': 'Bota', 'wbs': 'W-02'})
        assert attrs['series'] == 'W-02'

    def test_unreadable_numbers_count_as_zero(self):
        attrs = map_item_row({'nome': 'Bota', 'quantidade': 'muitas', 'valor': 'caro', 'minimo': '-3'})

        assert attrs['quantity'] == 0
        assert attrs['value'] == Decimal(0)
        assert attrs['minimum'] == 0

    def test_extra_columns_appended_to_notes(self):
        attrs = map_item_row({'nome': 'Bota', 'infos': 'cano alto', 'Tamanho': 42, 'Cor': None})
        assert attrs['notes'] == 'cano alto; Tamanho: 42; Cor: '
