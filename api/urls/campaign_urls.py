"""
URL configuration for campaign API endpoints.
"""

from django.urls import path

from api.views.memberships import (
    campaign_member_detail,
    campaign_members,
    leave_campaign,
    my_campaign_permissions,
)

app_name = "campaigns"

urlpatterns = [
    # Campaign membership management
    path(
        "<int:campaign_id>/members/",
        campaign_members,
        name="members",
    ),
    path(
        "<int:campaign_id>/members/<int:user_id>/",
        campaign_member_detail,
        name="member_detail",
    ),
    path(
        "<int:campaign_id>/leave/",
        leave_campaign,
        name="leave",
    ),
    # Caller's effective permissions
    path(
        "<int:campaign_id>/permissions/",
        my_campaign_permissions,
        name="my_permissions",
    ),
]
