"""
Requisman configuration.

Usage in settings.py:
    REQUISMAN = {
        "DEFAULT_REJECTION_REASON": "Negado pelo administrador",
        "MOVEMENT_REPORT_DAYS": 30,
        "EXPORT_VERSION": "1.1",
        "VALIDATE_REGISTRY": False,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class RequismanSettings:
    """Requisman configuration settings."""

    # Reason stored when an administrator rejects without giving one
    DEFAULT_REJECTION_REASON: str = "Negado pelo administrador"

    # Default window (days) for movement reports and exports
    MOVEMENT_REPORT_DAYS: int = 30

    # Format version written in JSON exports
    EXPORT_VERSION: str = "1.1"

    # Require cost center / project names to exist in the registry
    VALIDATE_REGISTRY: bool = False


def get_requisman_settings() -> RequismanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "REQUISMAN", {})
    return RequismanSettings(**{
        k: v for k, v in user_settings.items()
        if k in RequismanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_requisman_settings(), name)


requisman_settings = _LazySettings()
