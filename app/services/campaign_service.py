"""
Campaign creation, listing and brand analytics
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional, Tuple

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from app.models.attempt import PuzzleAttempt
from app.models.campaign import Campaign, CampaignStatus, CampaignPaymentStatus
from app.models.user import User
from app.schemas.campaign import CampaignCreate
from app.services.pricing_service import PricingService, CampaignQuote
from app.services.scoring_service import ScoringService

logger = logging.getLogger(__name__)


class CampaignService:
    """Campaign management service"""

    @staticmethod
    def create_campaign(db: Session, brand: User, campaign_data: CampaignCreate,
                        now: Optional[datetime] = None) -> Tuple[Campaign, CampaignQuote]:
        """Create an unpaid draft campaign priced for its requested length.

        The dates are placeholders until payment; activation resets them.
        """
        if not (brand.is_brand or brand.is_admin):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only brands can create campaigns"
            )

        try:
            quote = PricingService.quote_campaign(campaign_data.time_limit, campaign_data.package_type)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        now = now or datetime.utcnow()
        campaign = Campaign(
            brand_id=brand.id,
            title=campaign_data.title,
            description=campaign_data.description,
            brand_url=campaign_data.brand_url,
            puzzle_image_url=campaign_data.puzzle_image_url,
            original_image_url=campaign_data.original_image_url,
            game_type=campaign_data.game_type.value,
            questions=[q.model_dump() for q in campaign_data.questions],
            words=campaign_data.words,
            package_type=campaign_data.package_type.value,
            time_limit=campaign_data.time_limit,
            status=CampaignStatus.DRAFT.value,
            payment_status=CampaignPaymentStatus.UNPAID.value,
            expected_charge_amount=quote.charged_amount,
            total_budget=0.0,
            daily_allocation=0.0,
            budget_used=0.0,
            budget_remaining=0.0,
            start_date=now,
            end_date=now + timedelta(hours=campaign_data.time_limit)
        )

        db.add(campaign)
        db.commit()
        db.refresh(campaign)

        logger.info(f"Brand {brand.id} created campaign {campaign.id} expecting {quote.charged_amount}")
        return campaign, quote

    @staticmethod
    def get_campaign(db: Session, campaign_id: int) -> Campaign:
        campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Campaign not found"
            )
        return campaign

    @staticmethod
    def list_campaigns(db: Session, skip: int = 0, limit: int = 50) -> List[Campaign]:
        return db.query(Campaign).order_by(Campaign.created_at.desc(), Campaign.id.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def list_active_campaigns(db: Session, game_type: Optional[str] = None) -> List[Campaign]:
        """Campaigns players can play right now"""
        query = db.query(Campaign).filter(
            Campaign.status == CampaignStatus.ACTIVE.value,
            Campaign.payment_status == CampaignPaymentStatus.PAID.value
        )
        if game_type:
            query = query.filter(Campaign.game_type == game_type)
        return query.order_by(Campaign.start_date.desc()).all()

    @staticmethod
    def list_brand_campaigns(db: Session, brand_id: int) -> List[Campaign]:
        return db.query(Campaign).filter(
            Campaign.brand_id == brand_id
        ).order_by(Campaign.created_at.desc(), Campaign.id.desc()).all()

    @staticmethod
    def get_completion_status(db: Session, user: User, campaign_id: int) -> Dict[str, Any]:
        """Whether the current user has already solved a campaign"""
        campaign = CampaignService.get_campaign(db, campaign_id)
        return {
            "campaign_id": campaign.id,
            "has_completed": ScoringService.has_completed(db, user.id, campaign.id),
            "first_time_solved": ScoringService.has_first_time_solve(db, user.id, campaign.id)
        }

    @staticmethod
    def get_brand_analytics(db: Session, brand: User) -> List[Dict[str, Any]]:
        """Plays, completions and per-question correctness for each of a brand's campaigns"""
        analytics = []
        for campaign in CampaignService.list_brand_campaigns(db, brand.id):
            attempts = db.query(PuzzleAttempt).filter(PuzzleAttempt.campaign_id == campaign.id).all()
            questions = campaign.questions or []

            plays = len(attempts)
            solved = [a for a in attempts if a.solved]
            avg_completion_time = round(sum(a.time_taken for a in solved) / len(solved)) if solved else 0

            correct_counts = [0] * len(questions)
            for attempt in attempts:
                for index, (question, answer) in enumerate(zip(questions, attempt.answers or [])):
                    if answer == question.get("correct_index"):
                        correct_counts[index] += 1

            analytics.append({
                "campaign_id": campaign.id,
                "title": campaign.title,
                "status": campaign.status,
                "plays": plays,
                "completions": len(solved),
                "avg_completion_time": avg_completion_time,
                "question_correctness_rates": [count / plays if plays else 0 for count in correct_counts]
            })

        return analytics
