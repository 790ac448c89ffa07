"""
Serializers for the campaign membership API.
"""

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import serializers

from api.messages import ErrorMessages
from campaigns.models import CampaignMember
from campaigns.roles import Permission, RoleLevel

User = get_user_model()


class UserSummarySerializer(serializers.ModelSerializer):
    """Public fields of a user shown in member lists."""

    class Meta:
        model = User
        fields = ("id", "username", "email")
        read_only_fields = fields


class CampaignMemberSerializer(serializers.ModelSerializer):
    """Serializer for CampaignMember rows."""

    user = UserSummarySerializer(read_only=True)
    campaign = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = CampaignMember
        fields = (
            "id",
            "campaign",
            "user",
            "role",
            "is_admin",
            "permissions",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class PermissionOverridesField(serializers.DictField):
    """Override map: permission name -> true, false or null."""

    def __init__(self, **kwargs):
        kwargs.setdefault("child", serializers.BooleanField(allow_null=True))
        super().__init__(**kwargs)


class MemberCreateSerializer(serializers.Serializer):
    """Input for adding a member. The target is given by user_id or email."""

    user_id = serializers.IntegerField(required=False)
    email = serializers.EmailField(required=False)
    role = serializers.ChoiceField(choices=RoleLevel.choices, required=False)
    is_admin = serializers.BooleanField(required=False, default=False)
    permissions = PermissionOverridesField(required=False, allow_null=True)

    def validate(self, attrs):
        if "user_id" not in attrs and "email" not in attrs:
            raise serializers.ValidationError(ErrorMessages.USER_OR_EMAIL_REQUIRED)
        attrs.setdefault(
            "role", getattr(settings, "CAMPAIGN_DEFAULT_MEMBER_ROLE", RoleLevel.MEMBER)
        )
        return attrs


class MemberUpdateSerializer(serializers.Serializer):
    """Partial update of a member. Omitted fields are left unchanged."""

    role = serializers.ChoiceField(choices=RoleLevel.choices, required=False)
    is_admin = serializers.BooleanField(required=False)
    permissions = PermissionOverridesField(required=False)

    def validate(self, attrs):
        unknown = set(self.initial_data) - set(self.fields)
        if unknown:
            raise serializers.ValidationError(
                f"Unknown fields: {', '.join(sorted(unknown))}"
            )
        return attrs


class CampaignAccessSerializer(serializers.Serializer):
    """The calling user's effective access to a campaign."""

    is_owner = serializers.BooleanField()
    is_admin = serializers.BooleanField()
    role = serializers.CharField(allow_null=True)
    permissions = serializers.SerializerMethodField()

    def get_permissions(self, obj):
        """List granted permissions in declaration order."""
        return [p.value for p in Permission if p in obj.permissions]
