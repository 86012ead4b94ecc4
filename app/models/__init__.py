"""
Database models for Puzzle Rewards
"""

from .user import User
from .campaign import Campaign
from .payment import Transaction
from .prize_pool import DailyPrizePool
from .attempt import PuzzleAttempt
from .payout import Payout
from .leaderboard import Leaderboard

__all__ = [
    "User",
    "Campaign",
    "Transaction",
    "DailyPrizePool",
    "PuzzleAttempt",
    "Payout",
    "Leaderboard"
]
