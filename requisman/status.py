"""
Package status derivation — isolated, testable, reusable.

A package never stores a status of its own choosing: after any member
requisition changes, its status is recomputed from the members.

Examples:
    - [pending, approved]    -> pending
    - [approved, approved]   -> approved
    - [rejected, rejected]   -> rejected
    - [approved, rejected]   -> partially_approved
"""

from collections.abc import Iterable

from requisman.models.enums import PackageStatus, RequisitionStatus


def derive_package_status(statuses: Iterable[str]) -> str:
    """
    Aggregate status of a package from the statuses of its requisitions.

    Args:
        statuses: RequisitionStatus values of every member

    Returns:
        PackageStatus value
    """
    statuses = set(statuses)

    if not statuses or RequisitionStatus.PENDING in statuses:
        return PackageStatus.PENDING
    if statuses == {RequisitionStatus.APPROVED}:
        return PackageStatus.APPROVED
    if statuses == {RequisitionStatus.REJECTED}:
        return PackageStatus.REJECTED
    return PackageStatus.PARTIALLY_APPROVED


def is_terminal(package_status: str) -> bool:
    """Has the package reached a final status?"""
    return package_status != PackageStatus.PENDING
