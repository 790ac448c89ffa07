"""
API views for campaign membership operations.

Authentication and authorization are both decided by campaigns.permissions:
these views pass the caller's id explicitly and let campaign access errors
propagate to api.errors.campaign_exception_handler, which maps them to
401/403/404/409/500 responses.
"""

from django.contrib.auth import get_user_model
from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from api.errors import APIError
from api.messages import ErrorMessages
from api.serializers import (
    CampaignAccessSerializer,
    CampaignMemberSerializer,
    MemberCreateSerializer,
    MemberUpdateSerializer,
    UserSummarySerializer,
)
from campaigns.exceptions import Forbidden, NotFound
from campaigns.permissions import (
    get_campaign_permissions,
    get_campaign_with_access,
    require_campaign_access,
    user_id_from_user,
)
from campaigns.roles import Permission
from campaigns.services import MembershipService

User = get_user_model()


# Anonymous callers reach the views so the resolver can answer 401 itself
@api_view(["GET", "POST"])
@permission_classes([permissions.AllowAny])
def campaign_members(request, campaign_id):
    """
    GET: list the owner and all members of a campaign (any member may view).
    POST: add a member (requires the MEMBERS permission).
    """
    if request.method == "POST":
        return _add_campaign_member(request, campaign_id)

    campaign = get_campaign_with_access(
        campaign_id, user_id=user_id_from_user(request.user)
    )
    members = MembershipService(campaign.pk).list_members()

    return Response(
        {
            "owner": UserSummarySerializer(campaign.owner).data,
            "members": CampaignMemberSerializer(members, many=True).data,
            "count": len(members) + 1,
        }
    )


def _add_campaign_member(request, campaign_id):
    acting_user_id = user_id_from_user(request.user)
    # Authorize before touching the request body
    require_campaign_access(campaign_id, Permission.MEMBERS, acting_user_id)

    serializer = MemberCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    target_id = data.get("user_id")
    if target_id is None:
        target_id = (
            User.objects.filter(email__iexact=data["email"])
            .values_list("pk", flat=True)
            .first()
        )
        if target_id is None:
            raise NotFound("user", message=ErrorMessages.USER_NOT_FOUND)

    member = MembershipService(campaign_id).add_member(
        target_id,
        role=data["role"],
        is_admin=data.get("is_admin", False),
        permissions=data.get("permissions"),
        acting_user_id=acting_user_id,
    )
    return Response(
        CampaignMemberSerializer(member).data, status=status.HTTP_201_CREATED
    )


@api_view(["PATCH", "DELETE"])
@permission_classes([permissions.AllowAny])
def campaign_member_detail(request, campaign_id, user_id):
    """
    PATCH: update a member's role, admin flag and permission overrides.
    DELETE: remove a member. Members removing themselves must use leave.
    """
    acting_user_id = user_id_from_user(request.user)
    require_campaign_access(campaign_id, Permission.MEMBERS, acting_user_id)
    service = MembershipService(campaign_id)

    if request.method == "PATCH":
        serializer = MemberUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        member = service.update_member(
            user_id, dict(serializer.validated_data), acting_user_id=acting_user_id
        )
        return Response(CampaignMemberSerializer(member).data)

    if acting_user_id == user_id:
        return APIError.create_bad_request_response(
            ErrorMessages.USE_LEAVE_ENDPOINT, code="use_leave"
        )

    service.remove_member(user_id, acting_user_id=acting_user_id)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def leave_campaign(request, campaign_id):
    """Remove the calling user from a campaign. Owners cannot leave."""
    try:
        MembershipService(campaign_id).leave(user_id_from_user(request.user))
    except Forbidden as exc:
        if exc.reason != Forbidden.CANNOT_REMOVE_OWNER:
            raise
        return Response(
            {"detail": ErrorMessages.OWNER_CANNOT_LEAVE, "code": exc.code},
            status=status.HTTP_403_FORBIDDEN,
        )
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def my_campaign_permissions(request, campaign_id):
    """Return the caller's effective permissions in a campaign."""
    acting_user_id = user_id_from_user(request.user)
    get_campaign_with_access(campaign_id, user_id=acting_user_id)

    access = get_campaign_permissions(campaign_id, acting_user_id)
    if access is None:
        # Membership was removed between the two reads
        raise Forbidden(Forbidden.NO_CAMPAIGN_ACCESS)
    return Response(CampaignAccessSerializer(access).data)
