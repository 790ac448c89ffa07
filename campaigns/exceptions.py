"""
Error taxonomy for campaign access control.

Every failure raised by the permission resolver and the membership service
is a CampaignAccessError subclass. Each carries a short machine-readable
``code`` so callers can tell failures apart without parsing messages; the
HTTP layer maps the class to a status code (see api.errors).
"""

from typing import Optional

from .roles import Permission


class CampaignAccessError(Exception):
    """Base class for campaign access failures."""

    code = "campaign_access_error"
    default_message = "Campaign access error."

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        if code is not None:
            self.code = code
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(CampaignAccessError):
    """No authenticated caller was supplied."""

    code = "unauthorized"
    default_message = "Authentication required."


class Forbidden(CampaignAccessError):
    """The caller is authenticated but lacks the required access."""

    NO_CAMPAIGN_ACCESS = "no_campaign_access"
    MISSING_PERMISSION = "missing_permission"
    CANNOT_REMOVE_OWNER = "cannot_remove_campaign_owner"
    ENTITY_ACCESS_DENIED = "entity_access_denied"

    code = NO_CAMPAIGN_ACCESS
    default_message = "Permission denied."

    def __init__(
        self,
        reason: str = NO_CAMPAIGN_ACCESS,
        permission: Optional[Permission] = None,
        message: Optional[str] = None,
    ):
        self.reason = reason
        self.permission = permission
        if message is None:
            if permission is not None:
                message = f"Missing {permission.value} permission."
            elif reason == self.CANNOT_REMOVE_OWNER:
                message = "Cannot remove campaign owner."
            elif reason == self.NO_CAMPAIGN_ACCESS:
                message = "No access to campaign."
        super().__init__(message, code=reason)


class Conflict(CampaignAccessError):
    """A membership invariant would be violated."""

    ALREADY_MEMBER = "already_member"
    MEMBER_IS_OWNER = "member_is_owner"

    code = "conflict"
    default_message = "Conflict."

    def __init__(self, reason: str, message: Optional[str] = None):
        self.reason = reason
        if message is None:
            if reason == self.ALREADY_MEMBER:
                message = "User is already a member of this campaign."
            elif reason == self.MEMBER_IS_OWNER:
                message = "Campaign owner cannot be added as a member."
        super().__init__(message, code=reason)


class NotFound(CampaignAccessError):
    """The referenced campaign, member or user does not exist."""

    code = "not_found"
    default_message = "Resource not found."

    def __init__(self, resource: str, message: Optional[str] = None):
        self.resource = resource
        super().__init__(
            message or f"{resource.capitalize()} not found.",
            code=f"{resource}_not_found",
        )


class InternalError(CampaignAccessError):
    """The backing store failed unexpectedly."""

    code = "internal_error"
    default_message = "Internal server error."
