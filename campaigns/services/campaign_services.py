"""
Service layer for campaign membership.

Every mutation is authorized through campaigns.permissions before it touches
the database: the acting user must hold the MEMBERS permission. Uniqueness of
(campaign, user) is left to the database constraint so that two concurrent
adds for the same pair cannot both succeed.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction

from ..exceptions import Conflict, Forbidden, InternalError, NotFound, Unauthorized
from ..models import Campaign, CampaignMember, normalize_user_id
from ..permissions import load_owner_id, require_campaign_access
from ..roles import (
    Permission,
    RoleLevel,
    merge_overrides,
    normalize_overrides,
    normalize_role,
    serialize_overrides,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"role", "is_admin", "permissions"})


class MembershipService:
    """Service for handling campaign membership operations."""

    def __init__(self, campaign_id: Any):
        """Initialize service for a specific campaign."""
        if isinstance(campaign_id, Campaign):
            campaign_id = campaign_id.pk
        self.campaign_id = campaign_id

    def _require_members_permission(self, acting_user_id: Any) -> None:
        require_campaign_access(self.campaign_id, Permission.MEMBERS, acting_user_id)

    def list_members(self) -> List[CampaignMember]:
        """Return every member, highest role first, then by join time.

        The owner is not included; callers add it from Campaign.owner.
        Access is checked by the caller.
        """
        try:
            return list(
                CampaignMember.objects.for_campaign(self.campaign_id)
                .select_related("user")
                .ordered_by_role()
            )
        except DatabaseError as exc:
            raise InternalError("Failed to list campaign members.") from exc

    def add_member(
        self,
        user_id: Any,
        role: Union[RoleLevel, str] = RoleLevel.MEMBER,
        is_admin: bool = False,
        permissions: Optional[Mapping[Any, Any]] = None,
        acting_user_id: Any = None,
    ) -> CampaignMember:
        """Add a new member to the campaign.

        Args:
            user_id: The user to add
            role: The role to assign
            is_admin: Whether the member bypasses all permission checks
            permissions: Optional explicit overrides, e.g. {"DELETE_ENTITIES": True}
            acting_user_id: The user performing the change

        Returns:
            The created membership

        Raises:
            Unauthorized, Forbidden: If the acting user may not manage members
            NotFound: If the campaign or target user does not exist
            Conflict: If the user is the owner or already a member
            ValidationError: If role or overrides are invalid
        """
        self._require_members_permission(acting_user_id)

        role = normalize_role(role)
        overrides = serialize_overrides(normalize_overrides(permissions))
        if not isinstance(is_admin, bool):
            raise ValidationError("is_admin must be a boolean.")

        user_id = normalize_user_id(user_id)
        if user_id is None:
            raise NotFound("user")

        owner_id = load_owner_id(self.campaign_id)
        if user_id == owner_id:
            raise Conflict(Conflict.MEMBER_IS_OWNER)

        User = get_user_model()
        try:
            user_exists = User.objects.filter(pk=user_id).exists()
        except DatabaseError as exc:
            raise InternalError("Failed to load user.") from exc
        if not user_exists:
            raise NotFound("user")

        try:
            with transaction.atomic():
                member = CampaignMember.objects.create(
                    campaign_id=self.campaign_id,
                    user_id=user_id,
                    role=role,
                    is_admin=is_admin,
                    permissions=overrides,
                )
        except IntegrityError:
            raise Conflict(Conflict.ALREADY_MEMBER) from None
        except DatabaseError as exc:
            raise InternalError("Failed to add campaign member.") from exc

        logger.info(
            "User %s added user %s to campaign %s as %s%s",
            acting_user_id,
            user_id,
            self.campaign_id,
            role,
            " (admin)" if is_admin else "",
        )
        return member

    def update_member(
        self, user_id: Any, patch: Mapping[str, Any], acting_user_id: Any = None
    ) -> CampaignMember:
        """Apply a partial update to a member.

        Only the keys present in ``patch`` change. ``permissions`` is merged
        into the stored overrides; a None value clears that override.

        Raises:
            Unauthorized, Forbidden: If the acting user may not manage members
            NotFound: If the campaign or member does not exist
            ValidationError: If the patch is invalid
        """
        self._require_members_permission(acting_user_id)

        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown member fields: {', '.join(sorted(unknown))}"
            )

        changes: Dict[str, Any] = {}
        if "role" in patch:
            changes["role"] = normalize_role(patch["role"])
        if "is_admin" in patch:
            if not isinstance(patch["is_admin"], bool):
                raise ValidationError("is_admin must be a boolean.")
            changes["is_admin"] = patch["is_admin"]

        user_id = normalize_user_id(user_id)
        if user_id is None:
            raise NotFound("member")

        try:
            with transaction.atomic():
                member = (
                    CampaignMember.objects.select_for_update()
                    .filter(campaign_id=self.campaign_id, user_id=user_id)
                    .first()
                )
                if member is None:
                    raise NotFound("member")

                if "permissions" in patch:
                    changes["permissions"] = serialize_overrides(
                        merge_overrides(member.permissions or {}, patch["permissions"])
                    )

                for field, value in changes.items():
                    setattr(member, field, value)
                if changes:
                    member.save(update_fields=[*changes, "updated_at"])
        except DatabaseError as exc:
            raise InternalError("Failed to update campaign member.") from exc

        logger.info(
            "User %s updated member %s of campaign %s: %s",
            acting_user_id,
            user_id,
            self.campaign_id,
            sorted(changes),
        )
        return member

    def remove_member(self, user_id: Any, acting_user_id: Any = None) -> None:
        """Remove a member from the campaign.

        Raises:
            Unauthorized, Forbidden: If the acting user may not manage members
            Forbidden: With reason ``cannot_remove_campaign_owner`` for the owner
            NotFound: If the campaign or member does not exist
        """
        self._require_members_permission(acting_user_id)
        self._delete_membership(user_id)

        logger.info(
            "User %s removed user %s from campaign %s",
            acting_user_id,
            user_id,
            self.campaign_id,
        )

    def leave(self, user_id: Any) -> None:
        """Remove the calling user's own membership.

        Needs no MEMBERS permission, but the owner can never leave.

        Raises:
            Unauthorized: If no user id was supplied
            Forbidden: With reason ``cannot_remove_campaign_owner`` for the owner
            NotFound: If the campaign does not exist or the user is not a member
        """
        if user_id is None:
            raise Unauthorized()
        self._delete_membership(user_id)

        logger.info("User %s left campaign %s", user_id, self.campaign_id)

    def _delete_membership(self, user_id: Any) -> None:
        owner_id = load_owner_id(self.campaign_id)
        user_id = normalize_user_id(user_id)
        if user_id is None:
            raise NotFound("member")
        if user_id == owner_id:
            raise Forbidden(Forbidden.CANNOT_REMOVE_OWNER)

        try:
            deleted, _ = CampaignMember.objects.filter(
                campaign_id=self.campaign_id, user_id=user_id
            ).delete()
        except DatabaseError as exc:
            raise InternalError("Failed to remove campaign member.") from exc

        if not deleted:
            raise NotFound("member")
