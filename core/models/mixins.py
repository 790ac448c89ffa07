"""
Core model mixins for reusable model functionality.

Available mixins:
- TimestampedMixin: Automatic created_at and updated_at fields
- CampaignEntityMixin: Campaign scoping and creator tracking for content records

Usage:
    class Character(CampaignEntityMixin):
        name = models.CharField(max_length=200)

        class Meta:
            app_label = 'entities'
"""

from django.conf import settings
from django.db import models


class TimestampedMixin(models.Model):
    """
    Mixin to add automatic timestamp tracking to models.

    Provides:
    - created_at: Automatically set when object is first created (indexed)
    - updated_at: Automatically updated every time object is saved (indexed)
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Timestamp when the object was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        db_index=True,
        help_text="Timestamp when the object was last modified",
    )

    class Meta:
        abstract = True


class CampaignEntityMixin(TimestampedMixin):
    """
    Mixin for content records that live inside a campaign.

    Provides:
    - campaign: The campaign the record belongs to
    - created_by: The user who authored the record (kept null if the user is deleted)
    - save(): Accepts a 'user' keyword to fill created_by on first save

    The authorization layer reads campaign_id and created_by_id to decide
    whether a member may modify a record they authored.
    """

    campaign = models.ForeignKey(
        "campaigns.Campaign",
        on_delete=models.CASCADE,
        related_name="%(app_label)s_%(class)s_set",
        help_text="Campaign this record belongs to",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="%(app_label)s_%(class)s_created",
        null=True,
        blank=True,
        help_text="User who created this record",
    )

    def save(self, *args, **kwargs):
        """
        Save with automatic creator tracking.

        Args:
            user: User instance recorded as created_by for new objects
            *args, **kwargs: Standard save arguments
        """
        user = kwargs.pop("user", None)

        if user is not None and getattr(user, "pk", None):
            if self.pk is None and self.created_by_id is None:
                self.created_by = user

        super().save(*args, **kwargs)

    class Meta:
        abstract = True
