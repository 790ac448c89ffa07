from .mixins import CampaignEntityMixin, TimestampedMixin

__all__ = [
    "TimestampedMixin",
    "CampaignEntityMixin",
]
