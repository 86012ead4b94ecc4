"""
Payment transaction model
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Float
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from database import Base


class TransactionStatus(str, enum.Enum):
    """Transaction status enumeration"""
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class Transaction(Base):
    """Brand payment for a campaign package"""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    campaign_id = Column(Integer, ForeignKey("campaigns.id"), nullable=False, index=True)
    brand_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    package_type = Column(String(20), nullable=False)
    amount = Column(Float, nullable=False)  # Amount in Naira
    currency = Column(String(3), nullable=False, default="NGN")

    reference = Column(String(100), unique=True, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=TransactionStatus.PENDING.value)
    gateway_response = Column(JSON, nullable=True)  # Full response from Paystack

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())

    campaign = relationship("Campaign")

    def __repr__(self):
        return f"<Transaction(id={self.id}, reference='{self.reference}', amount={self.amount}, status='{self.status}')>"
