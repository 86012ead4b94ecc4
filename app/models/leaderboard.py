"""
Leaderboard snapshot model
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON, UniqueConstraint
from sqlalchemy.sql import func
import enum

from database import Base


class LeaderboardType(str, enum.Enum):
    """Leaderboard period enumeration"""
    WEEKLY = "weekly"
    DAILY = "daily"


class Leaderboard(Base):
    """Recomputed ranking for one period, replaced on every refresh"""
    __tablename__ = "leaderboards"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(10), nullable=False, default=LeaderboardType.WEEKLY.value)
    period_key = Column(String(24), nullable=False)
    entries = Column(JSON, nullable=False, default=list)  # [{user_id, puzzles_solved, points}]

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("type", "period_key", name="uq_leaderboard_period"),
    )

    def __repr__(self):
        return f"<Leaderboard(type='{self.type}', period='{self.period_key}', entries={len(self.entries or [])})>"
