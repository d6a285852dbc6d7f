"""
Exceptions for Requisman.

All errors are InventoryError with a structured code for programmatic handling.
"""

from typing import Any


class BaseError(Exception):
    """
    Error carrying a machine-readable code, a message and context data.

    Subclasses declare ``_default_messages`` keyed by code; the message is
    taken from there when not given explicitly.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, data={self.data!r})"


class InventoryError(BaseError):
    """
    Structured exception for inventory and requisition operations.

    Usage:
        try:
            inventory.approve_package(pacote.pk, admin)
        except InventoryError as e:
            if e.code == 'INSUFFICIENT_STOCK':
                print(f"Item {e.item_id}: só tem {e.available} disponível")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'NOT_FOUND': 'Registro não encontrado',
        'INVALID_INPUT': 'Dados inválidos',
        'INVALID_QUANTITY': 'Quantidade inválida (deve ser um inteiro positivo)',
        'INSUFFICIENT_STOCK': 'Quantidade insuficiente em estoque',
        'INVALID_STATUS': 'Status inválido para esta operação',
        'REASON_REQUIRED': 'Motivo é obrigatório',
        'PERMISSION_DENIED': 'Operação restrita a administradores',
        'ITEM_IN_USE': 'Item possui requisições pendentes',
        'INVALID_PAYLOAD': 'Dados inválidos para importação',
        'CORRUPTED_DATA': 'Dados corrompidos: hash não corresponde',
        'TRANSACTION_FAILURE': 'Erro interno ao processar a operação',
    }

    _http_statuses = {
        'NOT_FOUND': 404,
        'PERMISSION_DENIED': 403,
        'TRANSACTION_FAILURE': 500,
    }

    @property
    def item_id(self) -> int | None:
        """Shortcut for data['item_id']."""
        return self.data.get('item_id')

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    @property
    def http_status(self) -> int:
        """Status code a transport layer should answer with."""
        return self._http_statuses.get(self.code, 400)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: v if isinstance(v, (int, float, bool, type(None), list)) else str(v)
                for k, v in self.data.items()
            }
        }
