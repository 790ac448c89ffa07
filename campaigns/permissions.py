"""Campaign permission resolution.

Every authorization decision in the project is made here. A decision is built
from, in order:

1. Campaign ownership: the owner holds every permission.
2. Membership: users without a CampaignMember row have no access at all.
3. The member's ``is_admin`` flag: grants every permission.
4. Explicit per-member overrides: a stored grant or deny wins.
5. The role's default permission set.

Callers always pass the acting user's id explicitly. Decisions are never
cached; each call reads the campaign and the member row.
"""

import logging
from dataclasses import dataclass
from typing import Any, FrozenSet, Optional, Union

from django.db import DatabaseError

from .exceptions import Forbidden, InternalError, NotFound, Unauthorized
from .models import Campaign, CampaignMember, normalize_user_id
from .roles import (
    ALL_PERMISSIONS,
    Permission,
    RoleLevel,
    default_permissions,
    normalize_permission,
)

logger = logging.getLogger(__name__)

PermissionLike = Union[Permission, str]

ENTITY_PERMISSIONS = frozenset({Permission.EDIT_ENTITIES, Permission.DELETE_ENTITIES})


@dataclass(frozen=True)
class CampaignAccess:
    """Effective access of one user to one campaign."""

    is_owner: bool
    is_admin: bool
    role: Optional[RoleLevel]
    permissions: FrozenSet[Permission]

    def has(self, permission: PermissionLike) -> bool:
        return normalize_permission(permission) in self.permissions


def user_id_from_user(user: Any) -> Optional[int]:
    """Return the id of an authenticated user, or None for anonymous callers."""
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return user.pk


def load_owner_id(campaign_id: Any) -> int:
    """Return the owner id of an active campaign.

    Raises:
        NotFound: If the campaign does not exist or is inactive
        InternalError: If the store fails
    """
    try:
        owner_id = (
            Campaign.objects.active()
            .filter(pk=campaign_id)
            .values_list("owner_id", flat=True)
            .first()
        )
    except (ValueError, TypeError):
        raise NotFound("campaign") from None
    except DatabaseError as exc:
        raise InternalError("Failed to load campaign.") from exc

    if owner_id is None:
        raise NotFound("campaign")
    return owner_id


def _load_member(campaign_id: Any, user_id: Any) -> Optional[CampaignMember]:
    """Return the membership row for (campaign, user) if there is one."""
    if user_id is None:
        return None
    try:
        return CampaignMember.objects.filter(
            campaign_id=campaign_id, user_id=user_id
        ).first()
    except (ValueError, TypeError):
        return None
    except DatabaseError as exc:
        raise InternalError("Failed to load campaign membership.") from exc


def member_allows(member: CampaignMember, permission: Permission) -> bool:
    """Apply the admin flag, overrides and role defaults for one member."""
    if member.is_admin:
        return True

    override = member.get_override(permission)
    if override is not None:
        return override

    return permission in default_permissions(member.role)


def _is_owner_id(user_id: Optional[int], owner_id: int) -> bool:
    return user_id is not None and user_id == owner_id


def _resolve(
    campaign_id: Any, permission: Optional[Permission], user_id: Optional[int]
) -> bool:
    owner_id = load_owner_id(campaign_id)
    if _is_owner_id(user_id, owner_id):
        return True

    member = _load_member(campaign_id, user_id)
    if member is None:
        return False
    if permission is None:
        return True
    return member_allows(member, permission)


def has_permission(campaign_id: Any, permission: PermissionLike, user_id: Any) -> bool:
    """Check whether a user holds a permission in a campaign.

    Never raises. Unknown campaigns, anonymous callers, unknown permissions
    and store failures all return False; store failures and bad role data
    are logged so they can be told apart from an ordinary deny.
    """
    uid = normalize_user_id(user_id)
    if uid is None:
        return False

    try:
        return _resolve(campaign_id, normalize_permission(permission), uid)
    except NotFound:
        return False
    except InternalError:
        logger.error(
            "Store failure while checking %s on campaign %s for user %s",
            permission,
            campaign_id,
            user_id,
            exc_info=True,
        )
        return False
    except ValueError:
        # Unknown permission spelling or a member row with an undefined role
        logger.warning(
            "Invalid permission data checking %r on campaign %s for user %s",
            permission,
            campaign_id,
            user_id,
            exc_info=True,
        )
        return False


def can_view_campaign(campaign_id: Any, user_id: Any) -> bool:
    """Check whether a user may view the entities of a campaign."""
    return has_permission(campaign_id, Permission.VIEW_ENTITIES, user_id)


def can_manage_members(campaign_id: Any, user_id: Any) -> bool:
    """Check whether a user may add, change or remove members."""
    return has_permission(campaign_id, Permission.MEMBERS, user_id)


def require_campaign_access(
    campaign_id: Any,
    permission: Optional[PermissionLike] = None,
    user_id: Any = None,
) -> None:
    """Guard a campaign operation.

    With no permission, any owner or member passes. Returns None on success.

    Raises:
        Unauthorized: If no user id was supplied
        NotFound: If the campaign does not exist or is inactive
        Forbidden: If the user is not a member, or lacks the permission
        InternalError: If the store fails
    """
    if user_id is None:
        raise Unauthorized()

    required = normalize_permission(permission) if permission is not None else None
    uid = normalize_user_id(user_id)

    owner_id = load_owner_id(campaign_id)
    if _is_owner_id(uid, owner_id):
        return

    member = _load_member(campaign_id, uid)
    if member is None:
        raise Forbidden(Forbidden.NO_CAMPAIGN_ACCESS)

    if required is not None and not member_allows(member, required):
        raise Forbidden(Forbidden.MISSING_PERMISSION, permission=required)


def get_campaign_with_access(
    campaign_id: Any,
    permission: Optional[PermissionLike] = None,
    user_id: Any = None,
) -> Campaign:
    """Guard a campaign operation and return the campaign."""
    require_campaign_access(campaign_id, permission, user_id)
    try:
        return Campaign.objects.active().select_related("owner").get(pk=campaign_id)
    except Campaign.DoesNotExist:
        raise NotFound("campaign") from None
    except DatabaseError as exc:
        raise InternalError("Failed to load campaign.") from exc


def _entity_permission(permission: PermissionLike) -> Permission:
    required = normalize_permission(permission)
    if required not in ENTITY_PERMISSIONS:
        raise ValueError(
            f"Entity access checks only support edit and delete, got {required.value}"
        )
    return required


def _entity_allows(entity: Any, permission: Permission, user_id: Optional[int]) -> bool:
    owner_id = load_owner_id(entity.campaign_id)
    if _is_owner_id(user_id, owner_id):
        return True
    if user_id is not None and entity.created_by_id == user_id:
        return True

    member = _load_member(entity.campaign_id, user_id)
    return member is not None and member_allows(member, permission)


def can_modify_entity(entity: Any, permission: PermissionLike, user_id: Any) -> bool:
    """Check whether a user may edit or delete a single campaign record.

    Allowed for the campaign owner, the record's creator, or anyone holding
    the permission campaign-wide. Only the outcome is reported.

    Args:
        entity: Any object with ``campaign_id`` and ``created_by_id``
        permission: EDIT_ENTITIES or DELETE_ENTITIES (or their aliases)
        user_id: The acting user

    Raises:
        ValueError: If the permission is not an edit/delete permission
    """
    required = _entity_permission(permission)
    uid = normalize_user_id(user_id)
    if uid is None:
        return False

    try:
        return _entity_allows(entity, required, uid)
    except NotFound:
        return False
    except InternalError:
        logger.error(
            "Store failure while checking %s on %r for user %s",
            required,
            entity,
            user_id,
            exc_info=True,
        )
        return False


def require_entity_access(entity: Any, permission: PermissionLike, user_id: Any) -> None:
    """Guard an edit or delete of a single campaign record.

    Raises:
        Unauthorized: If no user id was supplied
        NotFound: If the record's campaign does not exist or is inactive
        Forbidden: With reason ``entity_access_denied``
        InternalError: If the store fails
    """
    required = _entity_permission(permission)
    if user_id is None:
        raise Unauthorized()
    if not _entity_allows(entity, required, normalize_user_id(user_id)):
        raise Forbidden(Forbidden.ENTITY_ACCESS_DENIED)


def get_campaign_permissions(campaign_id: Any, user_id: Any) -> Optional[CampaignAccess]:
    """Summarise a user's effective access to a campaign.

    Returns None when the user has no access (anonymous, non-member, or
    unknown campaign). Store failures propagate as InternalError.
    """
    uid = normalize_user_id(user_id)
    if uid is None:
        return None

    try:
        owner_id = load_owner_id(campaign_id)
    except NotFound:
        return None

    if _is_owner_id(uid, owner_id):
        return CampaignAccess(
            is_owner=True, is_admin=True, role=None, permissions=ALL_PERMISSIONS
        )

    member = _load_member(campaign_id, uid)
    if member is None:
        return None

    return CampaignAccess(
        is_owner=False,
        is_admin=member.is_admin,
        role=RoleLevel(member.role),
        permissions=frozenset(p for p in Permission if member_allows(member, p)),
    )


def is_campaign_owner(campaign_id: Any, user_id: Any) -> bool:
    """Check whether the user owns the campaign."""
    uid = normalize_user_id(user_id)
    if uid is None:
        return False
    try:
        return _is_owner_id(uid, load_owner_id(campaign_id))
    except NotFound:
        return False


def is_campaign_admin(campaign_id: Any, user_id: Any) -> bool:
    """Check whether the user is the owner or an admin member."""
    access = get_campaign_permissions(campaign_id, user_id)
    return access is not None and (access.is_owner or access.is_admin)
