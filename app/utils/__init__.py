"""
Utility functions for Puzzle Rewards backend
"""

from .security import get_current_user, get_current_active_user, verify_admin_role, verify_brand_role
from .money import round2, round_half_up

__all__ = [
    "get_current_user",
    "get_current_active_user",
    "verify_admin_role",
    "verify_brand_role",
    "round2",
    "round_half_up"
]
