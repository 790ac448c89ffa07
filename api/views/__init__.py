"""
API views for the lore campaign backend.
"""

from .memberships import *  # noqa: F401,F403
