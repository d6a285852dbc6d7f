"""
Management command to register items from a CSV/XLSX spreadsheet.

Usage:
    python manage.py import_items epis.xlsx
    python manage.py import_items epis.csv --user almoxarife
"""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from requisman import inventory
from requisman.context import Actor
from requisman.exceptions import InventoryError


class Command(BaseCommand):
    """Import items command."""

    help = 'Cadastra itens a partir de uma planilha CSV ou XLSX'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Planilha .csv ou .xlsx')
        parser.add_argument(
            '--user',
            help='Usuário registrado nas movimentações de entrada'
        )

    def handle(self, *args, **options):
        actor = Actor.system()
        if options['user']:
            User = get_user_model()
            try:
                actor = Actor.from_user(User.objects.get_by_natural_key(options['user']))
            except User.DoesNotExist as exc:
                raise CommandError(f"Usuário desconhecido: {options['user']}") from exc

        try:
            with open(options['path'], 'rb') as fh:
                data = fh.read()
        except OSError as exc:
            raise CommandError(f"Não foi possível ler {options['path']}: {exc}") from exc

        try:
            result = inventory.import_items(actor, inventory.read_spreadsheet(data, options['path']))
        except InventoryError as exc:
            raise CommandError(str(exc)) from exc

        for failure in result['failed']:
            self.stderr.write(f"Linha {failure['row']}: {failure['error']}")
        self.stdout.write(self.style.SUCCESS(
            f"Importação concluída! Novos: {result['created']}, "
            f"unidos: {result['merged']}, falhas: {len(result['failed'])}"
        ))
