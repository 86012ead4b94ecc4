"""
Puzzle attempt model
"""

from sqlalchemy import Column, Integer, DateTime, Boolean, ForeignKey, JSON, Index, text
from sqlalchemy.sql import func

from database import Base


class PuzzleAttempt(Base):
    """One play of a campaign by a gamer"""
    __tablename__ = "puzzle_attempts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    campaign_id = Column(Integer, ForeignKey("campaigns.id"), nullable=False, index=True)

    time_taken = Column(Integer, nullable=False)  # milliseconds
    moves_taken = Column(Integer, nullable=False)
    solved = Column(Boolean, nullable=False, default=False)
    first_time_solved = Column(Boolean, nullable=False, default=False)
    quiz_score = Column(Integer, nullable=False, default=0)
    answers = Column(JSON, nullable=False, default=list)
    points_earned = Column(Integer, nullable=False, default=0)

    timestamp = Column(DateTime, nullable=False, server_default=func.now(), index=True)

    # At most one point-earning solve per user and campaign
    __table_args__ = (
        Index(
            "uq_first_time_solve",
            "user_id",
            "campaign_id",
            unique=True,
            postgresql_where=text("first_time_solved = true"),
            sqlite_where=text("first_time_solved = 1"),
        ),
    )

    def __repr__(self):
        return f"<PuzzleAttempt(user_id={self.user_id}, campaign_id={self.campaign_id}, points={self.points_earned})>"
