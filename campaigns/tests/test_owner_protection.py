"""
Tests for Campaign Owner Protection.

This module tests the protection of campaign owner privileges, ensuring that
owner permissions are implicit and cannot be modified or removed by other users.
"""

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from campaigns.models import Campaign, CampaignMember
from campaigns.permissions import has_permission
from campaigns.roles import Permission, RoleLevel

User = get_user_model()


class OwnerProtectionTest(TestCase):
    """Test protection of campaign owner privileges."""

    def setUp(self):
        """Set up test data for owner protection testing."""
        self.client = APIClient()

        self.owner = User.objects.create_user(
            username="owner", email="owner@test.com", password="testpass123"
        )
        self.admin = User.objects.create_user(
            username="admin", email="admin@test.com", password="testpass123"
        )
        self.flagged = User.objects.create_user(
            username="flagged", email="flagged@test.com", password="testpass123"
        )
        self.member = User.objects.create_user(
            username="member", email="member@test.com", password="testpass123"
        )

        self.campaign = Campaign.objects.create(
            name="Owner Protection Test", owner=self.owner
        )

        CampaignMember.objects.create(
            campaign=self.campaign, user=self.admin, role=RoleLevel.ADMIN
        )
        CampaignMember.objects.create(
            campaign=self.campaign, user=self.flagged, role=RoleLevel.VIEWER, is_admin=True
        )
        CampaignMember.objects.create(
            campaign=self.campaign, user=self.member, role=RoleLevel.MEMBER
        )

        self.owner_url = reverse(
            "api:campaigns:member_detail",
            kwargs={"campaign_id": self.campaign.id, "user_id": self.owner.id},
        )

    def test_owner_cannot_be_removed_from_campaign(self):
        """Even members allowed to manage members cannot remove the owner."""
        for user in [self.admin, self.flagged]:
            with self.subTest(user=user.username):
                self.client.force_authenticate(user=user)

                response = self.client.delete(self.owner_url)

                self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
                self.assertEqual(response.data["code"], "cannot_remove_campaign_owner")

    def test_member_without_members_permission_gets_plain_forbidden(self):
        self.client.force_authenticate(user=self.member)

        response = self.client.delete(self.owner_url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["code"], "missing_permission")

    def test_owner_role_cannot_be_changed(self):
        """The owner has no membership row, so there is nothing to update."""
        self.client.force_authenticate(user=self.admin)

        response = self.client.patch(self.owner_url, {"role": "VIEWER"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(
            CampaignMember.objects.filter(
                campaign=self.campaign, user=self.owner
            ).exists()
        )

    def test_owner_cannot_be_added_as_member(self):
        self.client.force_authenticate(user=self.admin)
        url = reverse("api:campaigns:members", kwargs={"campaign_id": self.campaign.id})

        response = self.client.post(
            url, {"user_id": self.owner.id, "role": "VIEWER"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_owner_cannot_leave(self):
        self.client.force_authenticate(user=self.owner)
        url = reverse("api:campaigns:leave", kwargs={"campaign_id": self.campaign.id})

        response = self.client.post(url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_owner_permissions_survive_stray_membership_row(self):
        """A row written around the service never restricts the owner."""
        CampaignMember.objects.create(
            campaign=self.campaign,
            user=self.owner,
            role=RoleLevel.VIEWER,
            permissions={permission.value: False for permission in Permission},
        )

        for permission in Permission:
            with self.subTest(permission=permission):
                self.assertTrue(
                    has_permission(self.campaign.id, permission, self.owner.id)
                )
