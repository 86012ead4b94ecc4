"""
Service layer for Puzzle Rewards backend
"""

from .auth_service import AuthService
from .pricing_service import PricingService
from .budget_service import BudgetService
from .scoring_service import ScoringService
from .leaderboard_service import LeaderboardService
from .payout_service import PayoutService
from .prize_pool_service import PrizePoolService
from .campaign_service import CampaignService
from .payment_service import PaymentService

__all__ = [
    "AuthService",
    "PricingService",
    "BudgetService",
    "ScoringService",
    "LeaderboardService",
    "PayoutService",
    "PrizePoolService",
    "CampaignService",
    "PaymentService"
]
