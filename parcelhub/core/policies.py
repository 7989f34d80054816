"""Ownership-based access policies."""

from collections.abc import Iterable

from parcelhub.core.authorization import Principal
from parcelhub.models.enums import Role


def is_admin_or_owner(principal: Principal, owner_ids: Iterable[int]) -> bool:
    """Admins pass; anyone else must be among ``owner_ids``."""
    if principal.role == Role.ADMIN:
        return True
    return principal.id in set(owner_ids)


def can_view_payment(principal: Principal, owner_ids: Iterable[int]) -> bool:
    """Admins see every payment; anyone else only those of owners they are."""
    return is_admin_or_owner(principal, owner_ids)


def can_view_parcel(principal: Principal, owner_ids: Iterable[int]) -> bool:
    """Admins see every parcel; owners see the parcels they own."""
    return is_admin_or_owner(principal, owner_ids)
