"""
Daily prize pool model
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON, Float
from sqlalchemy.sql import func
import enum

from database import Base


class PrizePoolStatus(str, enum.Enum):
    """Prize pool status enumeration"""
    ACTIVE = "active"
    COMPLETED = "completed"


class DailyPrizePool(Base):
    """Aggregated campaign contributions for one calendar day"""
    __tablename__ = "daily_prize_pools"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(String(10), unique=True, nullable=False, index=True)  # YYYY-MM-DD

    active_campaigns = Column(JSON, nullable=False, default=list)  # [{campaign_id, package_type, daily_allocation}]
    total_daily_pool = Column(Float, nullable=False, default=0.0)
    gamer_share = Column(Float, nullable=False, default=0.0)
    platform_fee = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default=PrizePoolStatus.ACTIVE.value)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<DailyPrizePool(date='{self.date}', total={self.total_daily_pool})>"
