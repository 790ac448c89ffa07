"""
Tests for MembershipService.

Every mutation is gated on the MEMBERS permission; these tests cover the gate,
the owner and uniqueness invariants, partial updates and leaving.
"""

from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError
from django.test import TestCase, TransactionTestCase

from campaigns.exceptions import (
    Conflict,
    Forbidden,
    InternalError,
    NotFound,
    Unauthorized,
)
from campaigns.models import Campaign, CampaignMember
from campaigns.permissions import has_permission
from campaigns.roles import Permission, RoleLevel
from campaigns.services import MembershipService

User = get_user_model()


class MembershipServiceTestCase(TestCase):
    """Base test case with a campaign, an admin member and a plain member."""

    def setUp(self):
        self.owner = User.objects.create_user(
            username="owner", email="owner@test.com", password="testpass123"
        )
        self.admin = User.objects.create_user(
            username="admin", email="admin@test.com", password="testpass123"
        )
        self.member = User.objects.create_user(
            username="member", email="member@test.com", password="testpass123"
        )
        self.viewer = User.objects.create_user(
            username="viewer", email="viewer@test.com", password="testpass123"
        )
        self.newcomer = User.objects.create_user(
            username="newcomer", email="newcomer@test.com", password="testpass123"
        )

        self.campaign = Campaign.objects.create(name="Test Campaign", owner=self.owner)
        self.service = MembershipService(self.campaign.id)

        CampaignMember.objects.create(
            campaign=self.campaign, user=self.admin, role=RoleLevel.ADMIN
        )
        self.member_membership = CampaignMember.objects.create(
            campaign=self.campaign, user=self.member, role=RoleLevel.MEMBER
        )
        CampaignMember.objects.create(
            campaign=self.campaign, user=self.viewer, role=RoleLevel.VIEWER
        )


class ListMembersTest(MembershipServiceTestCase):
    def test_members_ordered_by_role_then_join_time(self):
        later_admin = User.objects.create_user(
            username="later_admin", email="later@test.com", password="testpass123"
        )
        CampaignMember.objects.create(
            campaign=self.campaign, user=later_admin, role=RoleLevel.ADMIN
        )

        members = self.service.list_members()

        self.assertEqual(
            [m.user.username for m in members],
            ["admin", "later_admin", "member", "viewer"],
        )

    def test_owner_is_not_listed(self):
        usernames = {m.user.username for m in self.service.list_members()}
        self.assertNotIn("owner", usernames)

    def test_accepts_campaign_instance(self):
        service = MembershipService(self.campaign)
        self.assertEqual(service.campaign_id, self.campaign.id)
        self.assertEqual(len(service.list_members()), 3)


class AddMemberTest(MembershipServiceTestCase):
    def test_owner_adds_member_with_role(self):
        membership = self.service.add_member(
            self.newcomer.id, role=RoleLevel.VIEWER, acting_user_id=self.owner.id
        )

        self.assertEqual(membership.role, RoleLevel.VIEWER)
        self.assertFalse(membership.is_admin)
        self.assertEqual(membership.permissions, {})
        self.assertTrue(
            has_permission(self.campaign.id, Permission.VIEW_ENTITIES, self.newcomer.id)
        )

    def test_defaults_to_member_role(self):
        membership = self.service.add_member(
            self.newcomer.id, acting_user_id=self.owner.id
        )
        self.assertEqual(membership.role, RoleLevel.MEMBER)

    def test_admin_role_may_add_members(self):
        membership = self.service.add_member(
            self.newcomer.id, acting_user_id=self.admin.id
        )
        self.assertEqual(membership.user, self.newcomer)

    def test_add_with_overrides_and_admin_flag(self):
        membership = self.service.add_member(
            self.newcomer.id,
            role="viewer",
            is_admin=True,
            permissions={"delete": True, "EDIT_ENTITIES": False},
            acting_user_id=self.owner.id,
        )

        self.assertTrue(membership.is_admin)
        self.assertEqual(
            membership.permissions, {"DELETE_ENTITIES": True, "EDIT_ENTITIES": False}
        )

    def test_member_without_members_permission_is_forbidden(self):
        for user in [self.member, self.viewer]:
            with self.subTest(user=user.username):
                with self.assertRaises(Forbidden) as cm:
                    self.service.add_member(self.newcomer.id, acting_user_id=user.id)
                self.assertEqual(cm.exception.reason, Forbidden.MISSING_PERMISSION)

        self.assertFalse(
            CampaignMember.objects.filter(user=self.newcomer).exists()
        )

    def test_explicit_members_grant_allows_adding(self):
        self.member_membership.permissions = {"MEMBERS": True}
        self.member_membership.save()

        self.service.add_member(self.newcomer.id, acting_user_id=self.member.id)
        self.assertTrue(CampaignMember.objects.filter(user=self.newcomer).exists())

    def test_outsider_is_forbidden(self):
        with self.assertRaises(Forbidden) as cm:
            self.service.add_member(self.viewer.id, acting_user_id=self.newcomer.id)
        self.assertEqual(cm.exception.reason, Forbidden.NO_CAMPAIGN_ACCESS)

    def test_anonymous_is_unauthorized(self):
        with self.assertRaises(Unauthorized):
            self.service.add_member(self.newcomer.id)

    def test_owner_cannot_be_added(self):
        with self.assertRaises(Conflict) as cm:
            self.service.add_member(self.owner.id, acting_user_id=self.admin.id)
        self.assertEqual(cm.exception.code, Conflict.MEMBER_IS_OWNER)

    def test_duplicate_add_is_conflict(self):
        with self.assertRaises(Conflict) as cm:
            self.service.add_member(self.member.id, acting_user_id=self.owner.id)

        self.assertEqual(cm.exception.code, Conflict.ALREADY_MEMBER)
        self.assertEqual(
            CampaignMember.objects.filter(
                campaign=self.campaign, user=self.member
            ).count(),
            1,
        )

    def test_racing_insert_is_reported_as_conflict(self):
        """A unique-constraint violation from the store maps to Conflict."""
        with patch.object(
            CampaignMember.objects, "create", side_effect=IntegrityError("duplicate")
        ):
            with self.assertRaises(Conflict) as cm:
                self.service.add_member(self.newcomer.id, acting_user_id=self.owner.id)

        self.assertEqual(cm.exception.code, Conflict.ALREADY_MEMBER)

    def test_unknown_user_is_not_found(self):
        with self.assertRaises(NotFound) as cm:
            self.service.add_member(999999, acting_user_id=self.owner.id)
        self.assertEqual(cm.exception.code, "user_not_found")

    def test_unknown_campaign_is_not_found(self):
        with self.assertRaises(NotFound):
            MembershipService(999999).add_member(
                self.newcomer.id, acting_user_id=self.owner.id
            )

    def test_invalid_role_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.add_member(
                self.newcomer.id, role="OWNER", acting_user_id=self.owner.id
            )

    def test_invalid_overrides_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.add_member(
                self.newcomer.id,
                permissions={"posts": True},
                acting_user_id=self.owner.id,
            )

    def test_store_failure_is_internal_error(self):
        with patch.object(
            CampaignMember.objects, "create", side_effect=DatabaseError("db down")
        ):
            with self.assertRaises(InternalError):
                self.service.add_member(self.newcomer.id, acting_user_id=self.owner.id)

    def test_add_is_logged(self):
        with self.assertLogs("campaigns.services.campaign_services", level="INFO"):
            self.service.add_member(self.newcomer.id, acting_user_id=self.owner.id)


class UpdateMemberTest(MembershipServiceTestCase):
    def test_change_role(self):
        membership = self.service.update_member(
            self.member.id, {"role": "VIEWER"}, acting_user_id=self.owner.id
        )

        self.assertEqual(membership.role, RoleLevel.VIEWER)
        self.assertFalse(
            has_permission(self.campaign.id, Permission.EDIT_ENTITIES, self.member.id)
        )

    def test_omitted_fields_unchanged(self):
        self.member_membership.permissions = {"DELETE_ENTITIES": True}
        self.member_membership.save()

        self.service.update_member(
            self.member.id, {"is_admin": True}, acting_user_id=self.owner.id
        )

        self.member_membership.refresh_from_db()
        self.assertTrue(self.member_membership.is_admin)
        self.assertEqual(self.member_membership.role, RoleLevel.MEMBER)
        self.assertEqual(self.member_membership.permissions, {"DELETE_ENTITIES": True})

    def test_permissions_are_merged_and_null_clears(self):
        self.member_membership.permissions = {
            "DELETE_ENTITIES": True,
            "EDIT_ENTITIES": False,
        }
        self.member_membership.save()

        self.service.update_member(
            self.member.id,
            {"permissions": {"EDIT_ENTITIES": None, "MEMBERS": True}},
            acting_user_id=self.admin.id,
        )

        self.member_membership.refresh_from_db()
        self.assertEqual(
            self.member_membership.permissions,
            {"DELETE_ENTITIES": True, "MEMBERS": True},
        )
        self.assertTrue(
            has_permission(self.campaign.id, Permission.EDIT_ENTITIES, self.member.id)
        )

    def test_empty_patch_is_a_no_op(self):
        membership = self.service.update_member(
            self.member.id, {}, acting_user_id=self.owner.id
        )
        self.assertEqual(membership.role, RoleLevel.MEMBER)

    def test_unknown_field_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.update_member(
                self.member.id, {"user": self.viewer.id}, acting_user_id=self.owner.id
            )

    def test_invalid_values_rejected(self):
        for patch_data in [
            {"role": "GM"},
            {"is_admin": "yes"},
            {"permissions": {"EDIT_ENTITIES": "no"}},
        ]:
            with self.subTest(patch=patch_data):
                with self.assertRaises(ValidationError):
                    self.service.update_member(
                        self.member.id, patch_data, acting_user_id=self.owner.id
                    )

    def test_requires_members_permission(self):
        with self.assertRaises(Forbidden):
            self.service.update_member(
                self.viewer.id, {"role": "ADMIN"}, acting_user_id=self.member.id
            )

    def test_unknown_member_is_not_found(self):
        with self.assertRaises(NotFound) as cm:
            self.service.update_member(
                self.newcomer.id, {"role": "VIEWER"}, acting_user_id=self.owner.id
            )
        self.assertEqual(cm.exception.code, "member_not_found")

    def test_owner_has_no_member_row_to_update(self):
        with self.assertRaises(NotFound):
            self.service.update_member(
                self.owner.id, {"role": "VIEWER"}, acting_user_id=self.admin.id
            )


class RemoveMemberTest(MembershipServiceTestCase):
    def test_remove_member(self):
        self.service.remove_member(self.member.id, acting_user_id=self.admin.id)

        self.assertFalse(
            CampaignMember.objects.filter(
                campaign=self.campaign, user=self.member
            ).exists()
        )
        self.assertFalse(
            has_permission(self.campaign.id, Permission.VIEW_ENTITIES, self.member.id)
        )

    def test_owner_cannot_be_removed(self):
        with self.assertRaises(Forbidden) as cm:
            self.service.remove_member(self.owner.id, acting_user_id=self.admin.id)
        self.assertEqual(cm.exception.reason, Forbidden.CANNOT_REMOVE_OWNER)

    def test_requires_members_permission(self):
        with self.assertRaises(Forbidden):
            self.service.remove_member(self.viewer.id, acting_user_id=self.member.id)
        self.assertTrue(
            CampaignMember.objects.filter(user=self.viewer).exists()
        )

    def test_non_member_is_not_found(self):
        with self.assertRaises(NotFound):
            self.service.remove_member(self.newcomer.id, acting_user_id=self.owner.id)


class LeaveCampaignTest(MembershipServiceTestCase):
    def test_member_can_leave_without_members_permission(self):
        self.service.leave(self.viewer.id)
        self.assertFalse(CampaignMember.objects.filter(user=self.viewer).exists())

    def test_owner_cannot_leave(self):
        with self.assertRaises(Forbidden) as cm:
            self.service.leave(self.owner.id)
        self.assertEqual(cm.exception.code, Forbidden.CANNOT_REMOVE_OWNER)

    def test_non_member_cannot_leave(self):
        with self.assertRaises(NotFound):
            self.service.leave(self.newcomer.id)

    def test_anonymous_cannot_leave(self):
        with self.assertRaises(Unauthorized):
            self.service.leave(None)


class StringUserIdServiceTest(MembershipServiceTestCase):
    """Target ids given as strings are converted before any owner check."""

    def test_owner_as_string_cannot_be_added(self):
        with self.assertRaises(Conflict) as cm:
            self.service.add_member(str(self.owner.id), acting_user_id=self.owner.id)

        self.assertEqual(cm.exception.code, Conflict.MEMBER_IS_OWNER)
        self.assertFalse(
            CampaignMember.objects.filter(
                campaign=self.campaign, user=self.owner
            ).exists()
        )

    def test_owner_as_string_cannot_be_removed_or_leave(self):
        with self.assertRaises(Forbidden):
            self.service.remove_member(str(self.owner.id), acting_user_id=self.admin.id)
        with self.assertRaises(Forbidden):
            self.service.leave(str(self.owner.id))

    def test_string_ids_reach_the_member_row(self):
        membership = self.service.add_member(
            str(self.newcomer.id), acting_user_id=str(self.owner.id)
        )
        self.assertEqual(membership.user_id, self.newcomer.id)

        self.service.update_member(
            str(self.newcomer.id), {"role": "ADMIN"}, acting_user_id=str(self.admin.id)
        )
        membership.refresh_from_db()
        self.assertEqual(membership.role, RoleLevel.ADMIN)

        self.service.leave(str(self.newcomer.id))
        self.assertFalse(CampaignMember.objects.filter(user=self.newcomer).exists())

    def test_unconvertible_target_ids(self):
        with self.assertRaises(NotFound) as cm:
            self.service.add_member("abc", acting_user_id=self.owner.id)
        self.assertEqual(cm.exception.code, "user_not_found")

        with self.assertRaises(NotFound) as cm:
            self.service.update_member("abc", {}, acting_user_id=self.owner.id)
        self.assertEqual(cm.exception.code, "member_not_found")

        with self.assertRaises(NotFound):
            self.service.remove_member("abc", acting_user_id=self.owner.id)


class DuplicateAddTransactionTest(TransactionTestCase):
    """The unique constraint is hit on a real committed insert."""

    def setUp(self):
        self.owner = User.objects.create_user(
            username="owner", email="owner@test.com", password="testpass123"
        )
        self.user = User.objects.create_user(
            username="user", email="user@test.com", password="testpass123"
        )
        self.campaign = Campaign.objects.create(name="Test Campaign", owner=self.owner)
        self.service = MembershipService(self.campaign.id)

    def test_second_insert_for_same_pair_is_conflict(self):
        first = self.service.add_member(self.user.id, acting_user_id=self.owner.id)

        with self.assertRaises(Conflict) as cm:
            self.service.add_member(
                self.user.id, role=RoleLevel.VIEWER, acting_user_id=self.owner.id
            )

        self.assertEqual(cm.exception.code, Conflict.ALREADY_MEMBER)
        rows = CampaignMember.objects.filter(campaign=self.campaign, user=self.user)
        self.assertEqual(list(rows), [first])
        self.assertEqual(rows.get().role, RoleLevel.MEMBER)

    def test_row_written_by_another_writer_is_conflict(self):
        """A row committed outside the service still trips the constraint."""
        CampaignMember.objects.create(campaign=self.campaign, user=self.user)

        with self.assertRaises(Conflict):
            self.service.add_member(self.user.id, acting_user_id=self.owner.id)

        self.assertEqual(CampaignMember.objects.count(), 1)
