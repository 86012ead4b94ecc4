"""
Campaign budget ledger

Tracks how much of a campaign's paid budget has been fed into the daily
prize pools. The ledger is zero until payment succeeds, is filled once on
activation, and is then only ever debited.
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Dict, Any, Optional

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from config import settings
from app.models.campaign import Campaign, CampaignStatus, CampaignPaymentStatus, PackageType
from app.models.payment import Transaction
from app.models.user import User
from app.services.pricing_service import calculate_daily_allocation
from app.utils.money import round2

logger = logging.getLogger(__name__)


class BudgetService:
    """Per-campaign budget ledger"""

    @staticmethod
    def activate_on_payment(db: Session, campaign_id: int, transaction: Transaction, now: datetime) -> bool:
        """Fund a draft campaign from a successful transaction.

        The update only matches a campaign that is still draft and unpaid, so
        a webhook and a manual verify racing on the same payment can both
        call this and only one of them moves the ledger. Returns True when
        this call did the activation. The caller commits.
        """
        campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Campaign not found"
            )

        amount = round2(transaction.amount)
        updated = db.query(Campaign).filter(
            Campaign.id == campaign_id,
            Campaign.status == CampaignStatus.DRAFT.value,
            Campaign.payment_status != CampaignPaymentStatus.PAID.value
        ).update(
            {
                Campaign.total_budget: amount,
                Campaign.budget_used: 0.0,
                Campaign.budget_remaining: amount,
                Campaign.daily_allocation: calculate_daily_allocation(amount, campaign.time_limit),
                Campaign.start_date: now,
                Campaign.end_date: now + timedelta(hours=campaign.time_limit),
                Campaign.status: CampaignStatus.ACTIVE.value,
                Campaign.payment_status: CampaignPaymentStatus.PAID.value,
                Campaign.transaction_id: transaction.id
            },
            synchronize_session=False
        )
        db.expire(campaign)

        if updated:
            logger.info(f"Campaign {campaign_id} activated with budget {amount} from transaction {transaction.reference}")
            return True

        logger.info(f"Campaign {campaign_id} already activated, skipping transaction {transaction.reference}")
        return False

    @staticmethod
    def resolve_daily_rate(campaign: Campaign) -> float:
        """Daily contribution of a campaign to the prize pool.

        Uses the stored daily allocation, falling back to the fixed
        per-package rate for campaigns funded before it was recorded.
        """
        if campaign.daily_allocation and campaign.daily_allocation > 0:
            return campaign.daily_allocation

        if campaign.package_type == PackageType.BASIC:
            return settings.LEGACY_BASIC_DAILY_RATE
        if campaign.package_type == PackageType.PREMIUM:
            return settings.LEGACY_PREMIUM_DAILY_RATE
        raise ValueError(f"Campaign {campaign.id} has unknown package type {campaign.package_type!r}")

    @staticmethod
    def debit(db: Session, campaign: Campaign, amount: float, day: Optional[date] = None) -> float:
        """Move up to `amount` from remaining to used. Returns the amount debited.

        An ended campaign is only debited for a `day` on or before the date
        it ended.
        """
        if campaign.status == CampaignStatus.ENDED and (day is None or day > campaign.end_date.date()):
            logger.warning(f"Refusing to debit ended campaign {campaign.id}")
            return 0.0
        if amount <= 0:
            return 0.0

        debited = round2(min(amount, campaign.budget_remaining))
        campaign.budget_used = round2(campaign.budget_used + debited)
        campaign.budget_remaining = max(0.0, round2(campaign.total_budget - campaign.budget_used))

        db.add(campaign)
        return debited

    @staticmethod
    def end_expired_campaigns(db: Session, now: datetime) -> int:
        """Move active campaigns past their end date to ended"""
        ended = db.query(Campaign).filter(
            Campaign.status == CampaignStatus.ACTIVE.value,
            Campaign.end_date < now
        ).update(
            {Campaign.status: CampaignStatus.ENDED.value},
            synchronize_session=False
        )
        db.commit()

        if ended:
            logger.info(f"Ended {ended} expired campaign(s)")
        return ended

    @staticmethod
    def get_budget_status(db: Session, campaign_id: int, now: datetime,
                          user: Optional[User] = None) -> Dict[str, Any]:
        """Budget figures for a campaign with whole days left to run"""
        campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Campaign not found"
            )

        if user is not None and not user.is_admin and campaign.brand_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to view this campaign's budget"
            )

        seconds_left = (campaign.end_date - now).total_seconds()
        days_remaining = max(0, math.ceil(seconds_left / 86400))

        return {
            "campaign_id": campaign.id,
            "status": campaign.status,
            "payment_status": campaign.payment_status,
            "total_budget": campaign.total_budget,
            "daily_allocation": campaign.daily_allocation,
            "budget_used": campaign.budget_used,
            "budget_remaining": campaign.budget_remaining,
            "days_remaining": days_remaining,
            "start_date": campaign.start_date,
            "end_date": campaign.end_date
        }
