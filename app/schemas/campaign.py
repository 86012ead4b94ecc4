"""
Campaign and attempt Pydantic schemas
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, validator
from app.models.campaign import GameType, PackageType


class QuestionCreate(BaseModel):
    """Quiz question shown after the puzzle"""
    question: str = Field(..., min_length=1, max_length=500)
    choices: List[str] = Field(..., min_length=2, max_length=6)
    correct_index: int = Field(..., ge=0)

    @validator('correct_index')
    def validate_correct_index(cls, v, values):
        choices = values.get('choices') or []
        if v >= len(choices):
            raise ValueError('correct_index must point at one of the choices')
        return v


class PublicQuestion(BaseModel):
    """Question as shown to players, without the answer"""
    question: str
    choices: List[str]


class CampaignCreate(BaseModel):
    """Campaign creation schema"""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    brand_url: Optional[str] = Field(None, max_length=500)
    puzzle_image_url: Optional[str] = Field(None, max_length=500)
    original_image_url: Optional[str] = Field(None, max_length=500)
    game_type: GameType = GameType.SLIDING_PUZZLE
    questions: List[QuestionCreate] = Field(..., min_length=1)
    words: Optional[List[str]] = None
    package_type: PackageType
    time_limit: int = Field(..., gt=0, description="Campaign length in hours")

    @validator('words')
    def validate_words(cls, v, values):
        if values.get('game_type') == GameType.WORD_HUNT and not v:
            raise ValueError('Word hunt campaigns need at least one word')
        return v


class CampaignQuoteResponse(BaseModel):
    """Price breakdown for a campaign length"""
    package_type: PackageType
    time_limit_hours: int
    base_price: float
    weeks: int
    days: int
    allocated_budget: float
    multiplier: float
    charged_amount: int
    daily_allocation: float


class CampaignResponse(BaseModel):
    """Campaign as shown to players"""
    id: int
    brand_id: int
    title: str
    description: Optional[str]
    brand_url: Optional[str]
    puzzle_image_url: Optional[str]
    original_image_url: Optional[str]
    game_type: GameType
    questions: List[PublicQuestion]
    words: Optional[List[str]]
    package_type: PackageType
    time_limit: int
    status: str
    start_date: datetime
    end_date: datetime

    class Config:
        from_attributes = True


class BrandCampaignResponse(CampaignResponse):
    """Campaign as shown to its brand, with payment and budget figures"""
    payment_status: str
    expected_charge_amount: float
    total_budget: float
    daily_allocation: float
    budget_used: float
    budget_remaining: float
    created_at: datetime


class AttemptSubmit(BaseModel):
    """Puzzle result with quiz answers"""
    time_taken: int = Field(..., gt=0, description="Milliseconds")
    moves_taken: int = Field(..., gt=0)
    solved: bool
    answers: List[int] = []


class AttemptResult(BaseModel):
    """Outcome of a submitted attempt"""
    attempt_id: int
    campaign_id: int
    game_type: GameType
    solved: bool
    quiz_score: int
    total_questions: int
    first_time_solved: bool
    points_earned: int
