"""
API routes for Puzzle Rewards backend
"""

# Import all routers to make them available
from . import campaigns, payments, prize_pool, payouts, leaderboard

__all__ = [
    "campaigns", "payments", "prize_pool", "payouts", "leaderboard"
]
