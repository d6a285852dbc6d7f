"""
Management command to print stock levels.

Usage:
    python manage.py stock_report
    python manage.py stock_report --low
    python manage.py stock_report --xlsx relatorio.xlsx
"""

from django.core.management.base import BaseCommand

from requisman import inventory
from requisman.services.reports import STOCK_LEVEL_LABELS


class Command(BaseCommand):
    """Stock report command."""

    help = 'Mostra a quantidade atual de cada item e seu nível de estoque'

    def add_arguments(self, parser):
        parser.add_argument(
            '--low',
            action='store_true',
            help='Apenas itens abaixo do mínimo'
        )
        parser.add_argument(
            '--xlsx',
            help='Grava o relatório em uma planilha XLSX'
        )

    def handle(self, *args, **options):
        if options['xlsx']:
            with open(options['xlsx'], 'wb') as fh:
                fh.write(inventory.stock_xlsx())
            self.stdout.write(self.style.SUCCESS(f"Relatório gravado em {options['xlsx']}"))
            return

        rows = inventory.stock_report()
        if options['low']:
            rows = [row for row in rows if row['level'] == 'critical']

        for row in rows:
            name = f"{row['name']} ({row['series']})" if row['series'] else row['name']
            line = (f"{name}: {row['quantity']} "
                    f"[mín {row['minimum']}, ideal {row['ideal']}] {STOCK_LEVEL_LABELS[row['level']]}")
            if row['level'] == 'critical':
                self.stdout.write(self.style.WARNING(line))
            else:
                self.stdout.write(line)

        self.stdout.write(f'{len(rows)} item(ns)')
