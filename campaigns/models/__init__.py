from .campaign import Campaign, CampaignMember, normalize_user_id

__all__ = ["Campaign", "CampaignMember", "normalize_user_id"]
