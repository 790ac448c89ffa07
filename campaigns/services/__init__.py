"""Campaign services for business logic."""

from .campaign_services import MembershipService

__all__ = [
    "MembershipService",
]
