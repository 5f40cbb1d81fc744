"""Role to permission mapping used by the authorization dependencies."""

from __future__ import annotations

import enum
from collections.abc import Mapping

from stockroom.domain.enums import UserRole


class Permission(str, enum.Enum):
    read = "read"
    write = "write"
    update = "update"
    delete_inventory = "delete_inventory"
    manage_sales = "manage_sales"
    manage_rentals = "manage_rentals"


ROLE_PERMISSIONS: Mapping[UserRole, frozenset[Permission]] = {
    UserRole.admin: frozenset(Permission),
    UserRole.manager: frozenset(
        {
            Permission.read,
            Permission.write,
            Permission.update,
            Permission.delete_inventory,
            Permission.manage_sales,
            Permission.manage_rentals,
        }
    ),
    UserRole.operator: frozenset(
        {
            Permission.read,
            Permission.write,
            Permission.manage_sales,
            Permission.manage_rentals,
        }
    ),
    UserRole.viewer: frozenset({Permission.read}),
}

_unmapped = set(UserRole) - set(ROLE_PERMISSIONS)
if _unmapped:
    raise RuntimeError(f"Roles without a permission set: {sorted(role.value for role in _unmapped)}")


def permissions_for(role: UserRole | str) -> frozenset[Permission]:
    return ROLE_PERMISSIONS[UserRole(role)]


def has_permission(role: UserRole | str, permission: Permission) -> bool:
    role = UserRole(role)
    if role is UserRole.admin:
        return True
    return permission in ROLE_PERMISSIONS[role]


def has_role(role: UserRole | str, allowed: frozenset[UserRole] | set[UserRole]) -> bool:
    """Admin passes every role check."""
    role = UserRole(role)
    return role is UserRole.admin or role in allowed
