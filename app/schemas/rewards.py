"""
Prize pool, payout and leaderboard Pydantic schemas
"""

from datetime import date, datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field


class DailyPoolResponse(BaseModel):
    """Stored prize pool for one day"""
    date: str
    active_campaigns: List[Dict[str, Any]]
    active_campaigns_count: int
    total_daily_pool: float
    gamer_share: float
    platform_fee: float
    status: str


class DailyCalculateRequest(BaseModel):
    """Aggregate the pool for a date, defaulting to yesterday"""
    target_date: Optional[date] = None


class PrizeTableRow(BaseModel):
    position: int
    percentage: float
    amount: float


class PrizeTableResponse(BaseModel):
    """Projected payout table for a day"""
    date: str
    active_campaigns_count: int
    total_daily_pool: float
    gamer_share: float
    platform_fee: float
    prize_table: List[PrizeTableRow]
    campaign_breakdown: List[Dict[str, Any]]


class WeeklyCalculateRequest(BaseModel):
    """Distribute a week's pool, defaulting to the current week"""
    week_key: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}_to_\d{4}-\d{2}-\d{2}$")


class ProcessPayoutsRequest(BaseModel):
    """Mark a week's pending payouts as processed"""
    week_key: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}_to_\d{4}-\d{2}-\d{2}$")
    payout_ids: Optional[List[int]] = Field(None, min_length=1)


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    username: Optional[str]
    puzzles_solved: int
    points: int


class LeaderboardResponse(BaseModel):
    """Leaderboard snapshot for a period"""
    type: str
    period_key: str
    entries: List[LeaderboardEntry]
    updated_at: Optional[datetime]
