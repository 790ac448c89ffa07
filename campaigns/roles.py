"""
Permission and role definitions for campaign access control.

This module is the single source of truth for:
- Permission: the closed set of capabilities checked inside a campaign
- RoleLevel: the ordered member roles (the campaign owner is not a role)
- The default permission set of every role
- Normalisation of the older permission spellings ("read", "edit", ...)

Nothing here touches the database.
"""

from typing import Any, Dict, FrozenSet, Mapping, Optional, Union

from django.core.exceptions import ValidationError
from django.db import models


class Permission(models.TextChoices):
    """Capabilities a user may hold inside a campaign."""

    VIEW_ENTITIES = "VIEW_ENTITIES", "View entities"
    CREATE_ENTITIES = "CREATE_ENTITIES", "Create entities"
    EDIT_ENTITIES = "EDIT_ENTITIES", "Edit entities"
    DELETE_ENTITIES = "DELETE_ENTITIES", "Delete entities"
    MEMBERS = "MEMBERS", "Manage members"


class RoleLevel(models.TextChoices):
    """Member roles, lowest privilege first."""

    VIEWER = "VIEWER", "Viewer"
    MEMBER = "MEMBER", "Member"
    ADMIN = "ADMIN", "Admin"


class UnknownPermission(ValueError):
    """Raised when a value cannot be mapped onto a Permission."""


ALL_PERMISSIONS: FrozenSet[Permission] = frozenset(Permission)

ROLE_RANKS: Dict[RoleLevel, int] = {
    RoleLevel.VIEWER: 0,
    RoleLevel.MEMBER: 1,
    RoleLevel.ADMIN: 2,
}

# MEMBERS is reserved for the top role
ROLE_DEFAULT_PERMISSIONS: Dict[RoleLevel, FrozenSet[Permission]] = {
    RoleLevel.VIEWER: frozenset({Permission.VIEW_ENTITIES}),
    RoleLevel.MEMBER: frozenset(
        {
            Permission.VIEW_ENTITIES,
            Permission.CREATE_ENTITIES,
            Permission.EDIT_ENTITIES,
        }
    ),
    RoleLevel.ADMIN: ALL_PERMISSIONS,
}

# Coarse spellings found in older call sites
PERMISSION_ALIASES: Dict[str, Permission] = {
    "read": Permission.VIEW_ENTITIES,
    "view": Permission.VIEW_ENTITIES,
    "create": Permission.CREATE_ENTITIES,
    "edit": Permission.EDIT_ENTITIES,
    "delete": Permission.DELETE_ENTITIES,
    "members": Permission.MEMBERS,
    "manage_members": Permission.MEMBERS,
}


def normalize_permission(value: Union[Permission, str]) -> Permission:
    """Map any accepted permission spelling onto a Permission member.

    Accepts Permission members, canonical names in any case
    ("EDIT_ENTITIES", "edit_entities") and the coarse aliases
    ("read", "create", "edit", "delete", "members").

    Raises:
        UnknownPermission: If the value is not a recognised permission
    """
    if isinstance(value, Permission):
        return value
    if not isinstance(value, str):
        raise UnknownPermission(f"Unknown permission: {value!r}")

    key = value.strip()
    if key.upper() in Permission.values:
        return Permission(key.upper())

    alias = PERMISSION_ALIASES.get(key.lower())
    if alias is None:
        raise UnknownPermission(f"Unknown permission: {value!r}")
    return alias


def normalize_role(value: Union[RoleLevel, str]) -> RoleLevel:
    """Map a role name (any case) onto a RoleLevel.

    Raises:
        ValidationError: If the role is not one of the defined roles
    """
    if isinstance(value, RoleLevel):
        return value
    if isinstance(value, str) and value.strip().upper() in RoleLevel.values:
        return RoleLevel(value.strip().upper())
    raise ValidationError(f"Invalid role: {value}")


def role_rank(role: Union[RoleLevel, str]) -> int:
    """Return the position of a role in the hierarchy (VIEWER is 0)."""
    try:
        return ROLE_RANKS[RoleLevel(role)]
    except (ValueError, KeyError):
        raise ValueError(f"Undefined role level: {role!r}") from None


def default_permissions(role: Union[RoleLevel, str]) -> FrozenSet[Permission]:
    """Return the default permission set for a role.

    An undefined role is a data error and raises ValueError; it is never
    treated as an empty permission set.
    """
    try:
        return ROLE_DEFAULT_PERMISSIONS[RoleLevel(role)]
    except (ValueError, KeyError):
        raise ValueError(f"Undefined role level: {role!r}") from None


def _validated_override_items(overrides: Optional[Mapping[Any, Any]]):
    """Return (Permission, bool-or-None) pairs, collecting every problem first."""
    if overrides is None:
        return []
    if not isinstance(overrides, Mapping):
        raise ValidationError("Permissions must be a mapping of permission to boolean.")

    items = []
    errors = []
    for key, value in overrides.items():
        try:
            permission = normalize_permission(key)
        except UnknownPermission:
            errors.append(f"Unknown permission: {key}")
            continue
        if value is not None and not isinstance(value, bool):
            errors.append(f"Permission {permission.value} must be true, false or null.")
            continue
        items.append((permission, value))

    if errors:
        raise ValidationError(errors)
    return items


def normalize_overrides(
    overrides: Optional[Mapping[Any, Any]],
) -> Dict[Permission, bool]:
    """Validate a per-member override map.

    Each key must name a permission (see normalize_permission) and each value
    must be a boolean grant/deny. A None value means "unset" and is dropped.

    Returns:
        Dict mapping Permission to its explicit grant (True) or deny (False)

    Raises:
        ValidationError: On unknown permissions or non-boolean values
    """
    result: Dict[Permission, bool] = {}
    for permission, value in _validated_override_items(overrides):
        if value is None:
            result.pop(permission, None)
        else:
            result[permission] = value
    return result


def merge_overrides(
    current: Mapping[Any, Any], patch: Optional[Mapping[Any, Any]]
) -> Dict[Permission, bool]:
    """Apply an override patch on top of an existing override map.

    Keys in the patch replace the stored entry; a None value clears it.
    Permissions the patch does not mention keep their stored value.
    """
    merged = normalize_overrides(current)
    for permission, value in _validated_override_items(patch):
        if value is None:
            merged.pop(permission, None)
        else:
            merged[permission] = value
    return merged


def serialize_overrides(overrides: Mapping[Permission, bool]) -> Dict[str, bool]:
    """Convert an override map to its stored JSON form."""
    return {Permission(key).value: bool(value) for key, value in overrides.items()}
