"""
Management command to replace the inventory with a JSON export.

Usage:
    python manage.py import_inventory estoque.json
    python manage.py import_inventory estoque.json --dry-run
"""

import json

from django.core.management.base import BaseCommand, CommandError

from requisman import inventory
from requisman.exceptions import InventoryError


class Command(BaseCommand):
    """Import inventory command."""

    help = 'Substitui todo o almoxarifado pelo conteúdo de uma exportação JSON'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Arquivo gerado por export_inventory')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Apenas verifica a integridade do arquivo, sem importar'
        )

    def handle(self, *args, **options):
        try:
            with open(options['path'], encoding='utf-8') as fh:
                payload = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise CommandError(f"Não foi possível ler {options['path']}: {exc}") from exc

        try:
            counts = inventory.import_data(payload, dry_run=options['dry_run'])
        except InventoryError as exc:
            raise CommandError(str(exc)) from exc

        summary = ', '.join(f'{name}: {count}' for name, count in counts.items())
        if options['dry_run']:
            self.stdout.write(f'Arquivo íntegro ({summary})')
        else:
            self.stdout.write(self.style.SUCCESS(f'Importação concluída ({summary})'))
