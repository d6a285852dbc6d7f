"""
Initial migration for Requisman models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


USER_FK = dict(
    blank=True,
    null=True,
    on_delete=django.db.models.deletion.SET_NULL,
    to=settings.AUTH_USER_MODEL,
)


class Migration(migrations.Migration):
    """Create Requisman models: Item, Project, CostCenter, Package, Requisition, Movement."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_index=True, max_length=200, verbose_name='Nome')),
                ('series', models.CharField(blank=True, default='', max_length=100, verbose_name='Série/Código')),
                ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
                ('origin', models.CharField(blank=True, default='', max_length=200, verbose_name='Origem')),
                ('destination', models.CharField(blank=True, default='', max_length=200, verbose_name='Destino')),
                ('value', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Valor')),
                ('invoice', models.CharField(blank=True, default='', max_length=100, verbose_name='Nota Fiscal')),
                ('quantity', models.PositiveIntegerField(default=0, help_text='Alterada apenas por entradas e saídas registradas.', verbose_name='Quantidade')),
                ('minimum', models.PositiveIntegerField(default=0, verbose_name='Mínimo')),
                ('ideal', models.PositiveIntegerField(default=0, verbose_name='Ideal')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Informações')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Cadastrado em')),
            ],
            options={
                'verbose_name': 'Item',
                'verbose_name_plural': 'Itens',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['name', 'series'], name='requisman_item_identity_idx')],
            },
        ),
        migrations.CreateModel(
            name='Project',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, unique=True, verbose_name='Nome')),
                ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativo')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Criado em')),
            ],
            options={
                'verbose_name': 'Projeto',
                'verbose_name_plural': 'Projetos',
                'ordering': ['name'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='CostCenter',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, unique=True, verbose_name='Nome')),
                ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativo')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Criado em')),
            ],
            options={
                'verbose_name': 'Centro de Custo',
                'verbose_name_plural': 'Centros de Custo',
                'ordering': ['name'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Package',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('cost_center', models.CharField(max_length=200, verbose_name='Centro de Custo')),
                ('project', models.CharField(blank=True, default='', max_length=200, verbose_name='Projeto')),
                ('justification', models.TextField(blank=True, default='', verbose_name='Justificativa')),
                ('status', models.CharField(choices=[('pending', 'Pendente'), ('approved', 'Aprovado'), ('rejected', 'Rejeitado'), ('partially_approved', 'Parcialmente aprovado')], db_index=True, default='pending', max_length=20, verbose_name='Status')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Observações')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Criado em')),
                ('resolved_at', models.DateTimeField(blank=True, help_text='Data em que o pacote atingiu um status final', null=True, verbose_name='Resolvido em')),
                ('requester', models.ForeignKey(related_name='requisition_packages', verbose_name='Solicitante', **USER_FK)),
                ('resolved_by', models.ForeignKey(related_name='+', verbose_name='Aprovador', **USER_FK)),
            ],
            options={
                'verbose_name': 'Pacote de Requisições',
                'verbose_name_plural': 'Pacotes de Requisições',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'created_at'], name='requisman_pkg_status_date_idx'),
                    models.Index(fields=['requester', 'created_at'], name='requisman_pkg_user_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Requisition',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_name', models.CharField(max_length=200, verbose_name='Nome do Item')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantidade')),
                ('cost_center', models.CharField(max_length=200, verbose_name='Centro de Custo')),
                ('project', models.CharField(blank=True, default='', max_length=200, verbose_name='Projeto')),
                ('justification', models.TextField(blank=True, default='', verbose_name='Justificativa')),
                ('status', models.CharField(choices=[('pending', 'Pendente'), ('approved', 'Aprovado'), ('rejected', 'Rejeitado')], db_index=True, default='pending', max_length=20, verbose_name='Status')),
                ('notes', models.TextField(blank=True, default='', help_text='Motivo da rejeição ou anotação do administrador.', verbose_name='Observações')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data')),
                ('resolved_at', models.DateTimeField(blank=True, null=True, verbose_name='Resolvido em')),
                ('item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='requisitions', to='requisman.item', verbose_name='Item')),
                ('package', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='requisitions', to='requisman.package', verbose_name='Pacote')),
                ('requester', models.ForeignKey(related_name='requisitions', verbose_name='Solicitante', **USER_FK)),
                ('resolved_by', models.ForeignKey(related_name='+', verbose_name='Resolvido por', **USER_FK)),
            ],
            options={
                'verbose_name': 'Requisição',
                'verbose_name_plural': 'Requisições',
                'ordering': ['created_at', 'pk'],
                'indexes': [
                    models.Index(fields=['status', 'package'], name='requisman_req_status_pkg_idx'),
                    models.Index(fields=['requester', 'created_at'], name='requisman_req_user_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Movement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_name', models.CharField(help_text='Cópia do nome no momento do movimento.', max_length=200, verbose_name='Nome do Item')),
                ('kind', models.CharField(choices=[('entry', 'Entrada'), ('withdrawal', 'Saída')], db_index=True, max_length=20, verbose_name='Tipo')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantidade')),
                ('counterpart', models.CharField(blank=True, default='', help_text='Origem para entradas, destino para saídas.', max_length=200, verbose_name='Origem/Destino')),
                ('description', models.CharField(blank=True, default='', max_length=255, verbose_name='Descrição')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='movements', to='requisman.item', verbose_name='Item')),
                ('requisition', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='movements', to='requisman.requisition', verbose_name='Requisição')),
                ('user', models.ForeignKey(related_name='+', verbose_name='Usuário', **USER_FK)),
                ('approver', models.ForeignKey(related_name='+', verbose_name='Aprovador', **USER_FK)),
            ],
            options={
                'verbose_name': 'Movimentação',
                'verbose_name_plural': 'Movimentações',
                'ordering': ['-timestamp'],
                'indexes': [models.Index(fields=['item', 'timestamp'], name='requisman_mov_item_ts_idx')],
            },
        ),
    ]
