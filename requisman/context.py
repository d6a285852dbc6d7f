"""
Caller identity passed explicitly to every state-changing operation.

Requisman does not authenticate anyone. The transport layer (view, admin,
management command) builds an Actor from whatever session it trusts and hands
it to the service layer.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.db import models
from django.utils.translation import gettext_lazy as _


class Role(models.TextChoices):
    """Caller role."""
    ADMIN = 'admin', _('Administrador')
    USER = 'user', _('Usuário')


@dataclass(frozen=True)
class Actor:
    """Who is calling, and with which role."""

    user_id: int | None
    name: str = ''
    role: str = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user) -> Actor:
        """Build an Actor from a Django user (staff users are administrators)."""
        name = user.get_full_name() or user.get_username()
        role = Role.ADMIN if (user.is_staff or user.is_superuser) else Role.USER
        return cls(user_id=user.pk, name=name, role=role)

    @classmethod
    def system(cls, name: str = 'sistema') -> Actor:
        """Administrative actor for maintenance tasks (imports, commands)."""
        return cls(user_id=None, name=name, role=Role.ADMIN)
