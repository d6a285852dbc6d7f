"""
Atomic unit of work shared by every multi-step operation.

Either every write inside the block commits or none does. Domain errors
(InventoryError) propagate unchanged after the rollback; database errors are
logged and reported as TRANSACTION_FAILURE.
"""

import logging
from contextlib import contextmanager

from django.db import DatabaseError, transaction

from requisman.exceptions import InventoryError

logger = logging.getLogger('requisman')


@contextmanager
def unit_of_work(operation: str, **context):
    """
    Run the block inside transaction.atomic().

    Args:
        operation: Short name used in logs and in the error data
        **context: Extra identifiers for the log record
    """
    try:
        with transaction.atomic():
            yield
    except DatabaseError as exc:
        logger.exception(
            "requisman.transaction_failed",
            extra={"operation": operation, **context},
        )
        raise InventoryError('TRANSACTION_FAILURE', operation=operation) from exc
