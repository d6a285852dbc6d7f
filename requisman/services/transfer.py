"""
Data transfer — JSON export/import for moving the inventory between machines.

Export:
    {
        "items": [...], "movements": [...], "projects": [...],
        "cost_centers": [...], "packages": [...], "requisitions": [...],
        "metadata": {"timestamp": ..., "version": ..., "hash": ..., "total_records": {...}},
    }

The hash is SHA-256 over the canonical JSON of the data tables. Import refuses
a payload whose hash does not match, then replaces every table inside one
unit of work: a failure half-way leaves the previous data in place.

Users are not transferred; references to users that do not exist on the
receiving side are cleared.
"""

import hashlib
import json
import logging

from django.contrib.auth import get_user_model
from django.core.management.color import no_style
from django.core.serializers.json import DjangoJSONEncoder
from django.db import connection
from django.utils import timezone

from requisman.conf import requisman_settings
from requisman.db import unit_of_work
from requisman.exceptions import InventoryError
from requisman.models.item import Item
from requisman.models.movement import Movement
from requisman.models.package import Package
from requisman.models.registry import CostCenter, Project
from requisman.models.requisition import Requisition

logger = logging.getLogger('requisman')

# Insertion order: referenced tables first.
TABLES = (
    ('projects', Project),
    ('cost_centers', CostCenter),
    ('items', Item),
    ('packages', Package),
    ('requisitions', Requisition),
    ('movements', Movement),
)


def compute_hash(tables: dict) -> str:
    canonical = json.dumps(
        {name: tables[name] for name, _ in TABLES},
        sort_keys=True,
        ensure_ascii=False,
        separators=(',', ':'),
        cls=DjangoJSONEncoder,
    )
    return hashlib.sha256(canonical.encode('utf-8')).hexdigest()


def export_data() -> dict:
    """Snapshot every table plus integrity metadata."""
    raw = {name: list(model.objects.order_by('pk').values()) for name, model in TABLES}
    # JSON-native values, so the hash matches what a reader recomputes
    tables = json.loads(json.dumps(raw, cls=DjangoJSONEncoder))

    payload = dict(tables)
    payload['metadata'] = {
        'timestamp': timezone.now().isoformat(),
        'version': requisman_settings.EXPORT_VERSION,
        'hash': compute_hash(tables),
        'total_records': {name: len(rows) for name, rows in tables.items()},
    }

    logger.info("requisman.transfer.exported", extra={"total_records": payload['metadata']['total_records']})
    return payload


def verify_payload(payload) -> dict:
    """
    Check structure and hash.

    Returns:
        The data tables, keyed by name

    Raises:
        InventoryError('INVALID_PAYLOAD'): Missing metadata or table
        InventoryError('CORRUPTED_DATA'): Hash mismatch
    """
    if not isinstance(payload, dict) or not isinstance(payload.get('metadata'), dict):
        raise InventoryError('INVALID_PAYLOAD', field='metadata')

    tables = {}
    for name, _ in TABLES:
        rows = payload.get(name)
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise InventoryError('INVALID_PAYLOAD', field=name)
        tables[name] = rows

    expected = payload['metadata'].get('hash')
    actual = compute_hash(tables)
    if expected != actual:
        logger.warning("requisman.transfer.hash_mismatch", extra={"expected": expected, "actual": actual})
        raise InventoryError('CORRUPTED_DATA', expected=expected, actual=actual)
    return tables


def import_data(payload, dry_run: bool = False) -> dict:
    """
    Replace the whole inventory with the payload's contents.

    Args:
        payload: Dict produced by export_data()
        dry_run: Only verify; write nothing

    Returns:
        Number of records per table

    Raises:
        InventoryError('INVALID_PAYLOAD'): Malformed payload or unknown field
        InventoryError('CORRUPTED_DATA'): Hash mismatch
        InventoryError('TRANSACTION_FAILURE'): Store error; nothing changed
    """
    tables = verify_payload(payload)
    counts = {name: len(rows) for name, rows in tables.items()}
    if dry_run:
        return counts

    user_ids = set(get_user_model().objects.values_list('pk', flat=True))

    with unit_of_work('import_data'):
        for _, model in reversed(TABLES):
            model.objects.all().delete()

        for name, model in TABLES:
            objects = [_build(model, row, user_ids, name) for row in tables[name]]
            model.objects.bulk_create(objects)

        statements = connection.ops.sequence_reset_sql(no_style(), [model for _, model in TABLES])
        if statements:
            with connection.cursor() as cursor:
                for sql in statements:
                    cursor.execute(sql)

    logger.info("requisman.transfer.imported", extra={"total_records": counts})
    return counts


def _build(model, row: dict, user_ids: set, table: str):
    known = {field.attname: field for field in model._meta.concrete_fields}
    unknown = set(row) - set(known)
    if unknown:
        raise InventoryError('INVALID_PAYLOAD', field=table, unknown=sorted(unknown))

    values = dict(row)
    for attname, field in known.items():
        if field.is_relation and field.related_model is get_user_model():
            if values.get(attname) not in user_ids:
                values[attname] = None
    return model(**values)
