"""
Pydantic schemas for request/response validation
"""

from .campaign import (
    QuestionCreate, PublicQuestion, CampaignCreate, CampaignQuoteResponse,
    CampaignResponse, BrandCampaignResponse, AttemptSubmit, AttemptResult
)
from .payment import (
    PaymentInitialize, PaymentInitializeResponse, TransactionResponse, PaystackWebhook
)
from .rewards import (
    DailyPoolResponse, DailyCalculateRequest, PrizeTableRow, PrizeTableResponse,
    WeeklyCalculateRequest, ProcessPayoutsRequest,
    LeaderboardEntry, LeaderboardResponse
)

__all__ = [
    # Campaign schemas
    "QuestionCreate", "PublicQuestion", "CampaignCreate", "CampaignQuoteResponse",
    "CampaignResponse", "BrandCampaignResponse", "AttemptSubmit", "AttemptResult",

    # Payment schemas
    "PaymentInitialize", "PaymentInitializeResponse", "TransactionResponse", "PaystackWebhook",

    # Prize pool, payout and leaderboard schemas
    "DailyPoolResponse", "DailyCalculateRequest", "PrizeTableRow", "PrizeTableResponse",
    "WeeklyCalculateRequest", "ProcessPayoutsRequest",
    "LeaderboardEntry", "LeaderboardResponse"
]
