"""
Pytest fixtures for Requisman tests.
"""

import pytest
from django.contrib.auth import get_user_model

from requisman.context import Actor
from requisman.models import Item


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a regular requester."""
    return User.objects.create_user(
        username='solicitante',
        password='testpass123',
        first_name='Ana',
        email='ana@example.com',
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(username='outro', password='testpass123')


@pytest.fixture
def admin_user(db):
    """Create a staff user (administrator)."""
    return User.objects.create_user(
        username='almoxarife',
        password='testpass123',
        is_staff=True,
        is_superuser=True,
    )


@pytest.fixture
def requester(user):
    return Actor.from_user(user)


@pytest.fixture
def admin(admin_user):
    return Actor.from_user(admin_user)


@pytest.fixture
def item_a(db):
    """Item A: quantity=10, minimum=2, ideal=5."""
    return Item.objects.create(name='Capacete', quantity=10, minimum=2, ideal=5)


@pytest.fixture
def item_b(db):
    """Item B: quantity=10."""
    return Item.objects.create(name='Luva', series='G', quantity=10, minimum=1, ideal=4)


@pytest.fixture
def item_c(db):
    return Item.objects.create(name='Óculos', quantity=3)


@pytest.fixture
def make_package(requester):
    """Factory: create_package with sensible defaults."""
    from requisman import inventory

    def _make(*lines, actor=None, cost_center='CC1', project='P1', justification='teste'):
        items = [{'item_id': item.pk, 'quantity': quantity} for item, quantity in lines]
        return inventory.create_package(actor or requester, cost_center, project, justification, items)

    return _make
