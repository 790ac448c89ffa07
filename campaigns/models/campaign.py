from typing import Any, Dict, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Case, IntegerField, QuerySet, Value, When
from django.utils.text import slugify

from core.models import TimestampedMixin

from ..roles import (
    ROLE_RANKS,
    Permission,
    RoleLevel,
    normalize_overrides,
    serialize_overrides,
)


class CampaignQuerySet(models.QuerySet):
    """QuerySet for Campaign with access-related filters."""

    def active(self) -> "CampaignQuerySet":
        """Return campaigns that have not been deactivated."""
        return self.filter(is_active=True)

    def accessible_to(self, user_id: Any) -> "CampaignQuerySet":
        """Return active campaigns the user owns or is a member of."""
        user_id = normalize_user_id(user_id)
        if user_id is None:
            return self.none()
        return (
            self.active()
            .filter(models.Q(owner_id=user_id) | models.Q(members__user_id=user_id))
            .distinct()
        )


class Campaign(TimestampedMixin):
    """A campaign: the tenant that owns all worldbuilding records."""

    name = models.CharField(  # type: ignore[var-annotated]
        max_length=200, help_text="Campaign name"
    )
    slug = models.SlugField(  # type: ignore[var-annotated]
        max_length=200,
        unique=True,
        blank=True,
        help_text="URL-friendly campaign identifier",
    )
    description = models.TextField(  # type: ignore[var-annotated]
        blank=True, help_text="Campaign description"
    )
    owner = models.ForeignKey(  # type: ignore[var-annotated]
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="owned_campaigns",
        help_text="Campaign owner. Holds every permission implicitly.",
    )
    is_active = models.BooleanField(  # type: ignore[var-annotated]
        default=True,
        db_index=True,
        help_text="Inactive campaigns are treated as if they did not exist",
    )

    objects = CampaignQuerySet.as_manager()

    class Meta:
        db_table = "campaigns_campaign"
        ordering = ["-updated_at", "name"]
        verbose_name = "Campaign"
        verbose_name_plural = "Campaigns"

    def __str__(self) -> str:
        """Return the campaign name."""
        return self.name

    def save(self, *args: Any, **kwargs: Any) -> None:
        """Save the campaign with auto-generated slug."""
        if not self.slug:
            self.slug = self._generate_unique_slug()
        super().save(*args, **kwargs)

    def _generate_unique_slug(self) -> str:
        """Generate a unique slug for the campaign."""
        import uuid

        base_slug = slugify(self.name) or "campaign"

        # Leave room for a suffix inside the 200 character field
        if len(base_slug) > 190:
            base_slug = base_slug[:190]

        counter = 0
        slug = base_slug
        while Campaign.objects.filter(slug=slug).exists():
            counter += 1
            if counter > 999:
                slug = f"{base_slug[:180]}-{uuid.uuid4().hex[:8]}"
                break
            slug = f"{base_slug}-{counter}"

        return slug

    def clean(self) -> None:
        """Validate the campaign data."""
        super().clean()
        if not self.name:
            raise ValidationError("Campaign name is required.")

    def is_owner(self, user_id: Any) -> bool:
        """Check whether the given user id owns this campaign."""
        user_id = normalize_user_id(user_id)
        return user_id is not None and self.owner_id == user_id


def normalize_user_id(user_id: Any) -> Optional[int]:
    """
    Convert a user id to the user primary key type.

    Ownership is compared in Python while memberships are looked up through
    the ORM, so every id is converted here before either check. Returns None
    for None and for values that cannot be a user primary key.
    """
    if user_id is None:
        return None
    try:
        return Campaign._meta.get_field("owner").target_field.to_python(user_id)
    except ValidationError:
        return None


class CampaignMemberQuerySet(models.QuerySet):
    """QuerySet for CampaignMember."""

    def for_campaign(self, campaign_id: int) -> "CampaignMemberQuerySet":
        return self.filter(campaign_id=campaign_id)

    def ordered_by_role(self) -> "CampaignMemberQuerySet":
        """Order highest role first, then by join time."""
        rank = Case(
            *[When(role=role.value, then=Value(r)) for role, r in ROLE_RANKS.items()],
            default=Value(-1),
            output_field=IntegerField(),
        )
        return self.annotate(role_rank=rank).order_by("-role_rank", "created_at", "id")


class CampaignMember(TimestampedMixin):
    """A user's membership in a campaign.

    The campaign owner never has a row here; ownership is read from
    Campaign.owner. ``permissions`` holds explicit per-member overrides keyed
    by Permission value: true grants, false denies, a missing key falls back
    to the role default.
    """

    campaign = models.ForeignKey(  # type: ignore[var-annotated]
        Campaign,
        on_delete=models.CASCADE,
        related_name="members",
        help_text="The campaign",
    )
    user = models.ForeignKey(  # type: ignore[var-annotated]
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="campaign_memberships",
        help_text="The user",
    )
    role = models.CharField(  # type: ignore[var-annotated]
        max_length=10,
        choices=RoleLevel.choices,
        default=RoleLevel.MEMBER,
        help_text="The member's role, which sets their default permissions",
    )
    is_admin = models.BooleanField(  # type: ignore[var-annotated]
        default=False,
        help_text="Grants every permission regardless of role or overrides",
    )
    permissions = models.JSONField(  # type: ignore[var-annotated]
        default=dict,
        blank=True,
        help_text="Explicit permission overrides, e.g. {'DELETE_ENTITIES': true}",
    )

    objects = CampaignMemberQuerySet.as_manager()

    class Meta:
        db_table = "campaigns_member"
        constraints = [
            models.UniqueConstraint(
                fields=["campaign", "user"], name="unique_campaign_user_member"
            ),
        ]
        ordering = ["campaign", "created_at", "id"]
        verbose_name = "Campaign Member"
        verbose_name_plural = "Campaign Members"

    def __str__(self) -> str:
        """Return a string representation of the membership."""
        return f"{self.user} - {self.campaign} ({self.role})"

    def clean(self) -> None:
        """Validate the membership data."""
        super().clean()
        if self.campaign_id and self.user_id:
            if self.campaign.owner_id == normalize_user_id(self.user_id):
                raise ValidationError(
                    "Campaign owner cannot have a membership role. "
                    "Ownership is handled automatically."
                )
        self.permissions = serialize_overrides(normalize_overrides(self.permissions))

    def get_override(self, permission: Permission) -> Optional[bool]:
        """Return the explicit grant/deny for a permission, or None if unset."""
        value = (self.permissions or {}).get(Permission(permission).value)
        if value is None:
            return None
        return bool(value)

    @property
    def overrides(self) -> Dict[Permission, bool]:
        """Stored overrides keyed by Permission."""
        return normalize_overrides(self.permissions or {})
