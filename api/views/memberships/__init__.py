"""
Campaign membership API views.

- member_views: list, add, update and remove members, leave a campaign,
  and report the caller's own permissions
"""

from .member_views import (
    campaign_member_detail,
    campaign_members,
    leave_campaign,
    my_campaign_permissions,
)

__all__ = [
    "campaign_members",
    "campaign_member_detail",
    "leave_campaign",
    "my_campaign_permissions",
]
