"""
Payment Pydantic schemas
"""

from datetime import datetime
from typing import Optional, Dict, Any
from pydantic import BaseModel, EmailStr, Field, validator
from app.models.campaign import PackageType


class PaymentInitialize(BaseModel):
    """Start paying for a campaign package"""
    campaign_id: int = Field(..., gt=0)
    package_type: PackageType
    email: Optional[EmailStr] = None


class PaymentInitializeResponse(BaseModel):
    authorization_url: str
    access_code: Optional[str]
    reference: str
    amount: float
    currency: str


class TransactionResponse(BaseModel):
    """Transaction response schema"""
    id: int
    campaign_id: int
    package_type: str
    amount: float
    currency: str
    reference: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class PaystackWebhook(BaseModel):
    """Paystack webhook payload schema"""
    event: str
    data: Dict[str, Any]

    @validator('event')
    def validate_event(cls, v):
        if not v:
            raise ValueError('Webhook event is required')
        return v
