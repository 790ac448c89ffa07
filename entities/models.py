"""
Campaign content records.

These are the worldbuilding records members create inside a campaign. Their
CRUD lives with the request handlers; access to a single record is decided by
campaigns.permissions.require_entity_access, which reads campaign_id and
created_by_id.
"""

from django.db import models

from core.models import CampaignEntityMixin


class CampaignEntity(CampaignEntityMixin):
    """Common fields for named campaign records."""

    name = models.CharField(max_length=200, help_text="Display name")
    description = models.TextField(blank=True, help_text="Free-form description")

    class Meta:
        abstract = True
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Character(CampaignEntity):
    class Meta(CampaignEntity.Meta):
        db_table = "entities_character"


class Location(CampaignEntity):
    parent = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="children",
        help_text="Enclosing location",
    )

    class Meta(CampaignEntity.Meta):
        db_table = "entities_location"


class Item(CampaignEntity):
    owner_character = models.ForeignKey(
        Character,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="items",
        help_text="Character carrying this item",
    )

    class Meta(CampaignEntity.Meta):
        db_table = "entities_item"


class Quest(CampaignEntity):
    STATUS_CHOICES = [
        ("ACTIVE", "Active"),
        ("COMPLETED", "Completed"),
        ("FAILED", "Failed"),
    ]

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="ACTIVE")

    class Meta(CampaignEntity.Meta):
        db_table = "entities_quest"
