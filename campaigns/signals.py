"""
Django signals for campaign ownership.

The campaign owner's access is derived from Campaign.owner and must never be
shadowed by a membership row. When a campaign changes hands, any row the new
owner held as a member is removed.
"""

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

logger = logging.getLogger(__name__)


@receiver(post_save, sender="campaigns.Campaign")
def drop_owner_membership_handler(sender, instance, created, **kwargs):
    """Delete any membership row held by the campaign's owner."""
    if created:
        return

    deleted, _ = instance.members.filter(user_id=instance.owner_id).delete()
    if deleted:
        logger.info(
            "Removed membership of new owner %s from campaign %s",
            instance.owner_id,
            instance.pk,
        )
