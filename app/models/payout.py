"""
Weekly payout model
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from database import Base


class PayoutStatus(str, enum.Enum):
    """Payout status enumeration"""
    PENDING = "pending"
    PROCESSED = "processed"
    PAID = "paid"
    FAILED = "failed"


class Payout(Base):
    """Prize owed to a top-ranked gamer for one week"""
    __tablename__ = "payouts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    week_key = Column(String(24), nullable=False, index=True)  # YYYY-MM-DD_to_YYYY-MM-DD

    position = Column(Integer, nullable=False)
    points = Column(Integer, nullable=False, default=0)
    puzzles_solved = Column(Integer, nullable=False, default=0)

    total_weekly_pool = Column(Float, nullable=False, default=0.0)
    gamer_share = Column(Float, nullable=False, default=0.0)
    distribution_percentage = Column(Float, nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="NGN")

    status = Column(String(20), nullable=False, default=PayoutStatus.PENDING.value, index=True)
    payment_reference = Column(String(100), nullable=True)
    processed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())

    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("user_id", "week_key", name="uq_payout_user_week"),
    )

    def __repr__(self):
        return f"<Payout(user_id={self.user_id}, week='{self.week_key}', position={self.position}, amount={self.amount})>"
