"""
Management command to export the inventory as JSON.

Usage:
    python manage.py export_inventory > estoque.json
    python manage.py export_inventory --output estoque.json
"""

import json

from django.core.management.base import BaseCommand
from django.core.serializers.json import DjangoJSONEncoder

from requisman import inventory


class Command(BaseCommand):
    """Export inventory command."""

    help = 'Exporta itens, movimentações, pacotes e requisições em JSON'

    def add_arguments(self, parser):
        parser.add_argument(
            '--output', '-o',
            help='Arquivo de destino (padrão: saída padrão)'
        )

    def handle(self, *args, **options):
        payload = inventory.export_data()
        content = json.dumps(payload, ensure_ascii=False, indent=2, cls=DjangoJSONEncoder)

        if not options['output']:
            self.stdout.write(content)
            return

        with open(options['output'], 'w', encoding='utf-8') as fh:
            fh.write(content)

        total = sum(payload['metadata']['total_records'].values())
        self.stdout.write(
            self.style.SUCCESS(f"{total} registro(s) exportado(s) para {options['output']}")
        )
