"""
Tests for package status derivation.
"""

import pytest

from requisman.models import PackageStatus, RequisitionStatus
from requisman.status import derive_package_status, is_terminal


P = RequisitionStatus.PENDING
A = RequisitionStatus.APPROVED
R = RequisitionStatus.REJECTED


@pytest.mark.parametrize('statuses, expected', [
    ([P], PackageStatus.PENDING),
    ([P, P], PackageStatus.PENDING),
    ([A, P], PackageStatus.PENDING),
    ([R, P], PackageStatus.PENDING),
    ([A, R, P], PackageStatus.PENDING),
    ([A], PackageStatus.APPROVED),
    ([A, A, A], PackageStatus.APPROVED),
    ([R], PackageStatus.REJECTED),
    ([R, R], PackageStatus.REJECTED),
    ([A, R], PackageStatus.PARTIALLY_APPROVED),
    ([R, A, A], PackageStatus.PARTIALLY_APPROVED),
])
def test_derive_package_status(statuses, expected):
    assert derive_package_status(statuses) == expected


def test_empty_package_stays_pending():
    assert derive_package_status([]) == PackageStatus.PENDING


def test_accepts_any_iterable():
    assert derive_package_status(s for s in [A, A]) == PackageStatus.APPROVED


def test_terminal_statuses():
    assert not is_terminal(PackageStatus.PENDING)
    assert is_terminal(PackageStatus.APPROVED)
    assert is_terminal(PackageStatus.REJECTED)
    assert is_terminal(PackageStatus.PARTIALLY_APPROVED)
