"""
Campaign model: a brand-funded puzzle with its budget ledger
"""

from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Float, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from database import Base


class GameType(str, Enum):
    """Puzzle game enumeration"""
    SLIDING_PUZZLE = "sliding_puzzle"
    CARD_MATCHING = "card_matching"
    WHACK_A_MOLE = "whack_a_mole"
    WORD_HUNT = "word_hunt"


class PackageType(str, Enum):
    """Campaign package enumeration"""
    BASIC = "basic"
    PREMIUM = "premium"


class CampaignStatus(str, Enum):
    """Campaign status enumeration"""
    DRAFT = "draft"
    ACTIVE = "active"
    ENDED = "ended"


class CampaignPaymentStatus(str, Enum):
    """Campaign payment status enumeration"""
    UNPAID = "unpaid"
    PAID = "paid"
    PARTIAL = "partial"


class Campaign(Base):
    """Puzzle campaign model"""
    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, index=True)
    brand_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    brand_url = Column(String(500), nullable=True)
    puzzle_image_url = Column(String(500), nullable=True)
    original_image_url = Column(String(500), nullable=True)

    # Game configuration
    game_type = Column(String(30), nullable=False, default=GameType.SLIDING_PUZZLE.value)
    questions = Column(JSON, nullable=False, default=list)  # [{question, choices, correct_index}]
    words = Column(JSON, nullable=True)  # word_hunt only

    # Package and duration
    package_type = Column(String(20), nullable=False)
    time_limit = Column(Integer, nullable=False)  # hours

    # Lifecycle
    status = Column(String(20), nullable=False, default=CampaignStatus.DRAFT.value, index=True)
    payment_status = Column(String(20), nullable=False, default=CampaignPaymentStatus.UNPAID.value)
    expected_charge_amount = Column(Float, nullable=False, default=0.0)

    # Budget ledger (all zero until payment succeeds)
    total_budget = Column(Float, nullable=False, default=0.0)
    daily_allocation = Column(Float, nullable=False, default=0.0)
    budget_used = Column(Float, nullable=False, default=0.0)
    budget_remaining = Column(Float, nullable=False, default=0.0)

    transaction_id = Column(Integer, nullable=True)  # transactions.id of the activating payment
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())

    brand = relationship("User", back_populates="campaigns")

    def __repr__(self):
        return f"<Campaign(id={self.id}, title='{self.title}', status='{self.status}')>"

    @property
    def is_active(self) -> bool:
        return self.status == CampaignStatus.ACTIVE and self.payment_status == CampaignPaymentStatus.PAID

    @property
    def total_questions(self) -> int:
        return len(self.questions or [])
