"""
Campaign routes: creation, pricing, listing and puzzle submissions
"""

import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from database import get_db
from app.models.campaign import GameType, PackageType
from app.models.user import User
from app.schemas.campaign import (
    CampaignCreate, CampaignQuoteResponse, CampaignResponse, BrandCampaignResponse,
    AttemptSubmit, AttemptResult
)
from app.services.campaign_service import CampaignService
from app.services.pricing_service import PricingService
from app.services.scoring_service import ScoringService
from app.utils.security import get_current_active_user, verify_brand_role

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    campaign_data: CampaignCreate,
    current_user: User = Depends(verify_brand_role),
    db: Session = Depends(get_db)
):
    """Create a draft campaign and return its price"""

    campaign, quote = CampaignService.create_campaign(db, current_user, campaign_data)

    return {
        "campaign": BrandCampaignResponse.model_validate(campaign).model_dump(),
        "quote": quote.to_dict(),
        "message": "Campaign created. Complete payment to activate it."
    }


@router.get("/quote", response_model=CampaignQuoteResponse)
async def quote_campaign(
    time_limit: int = Query(..., gt=0, description="Campaign length in hours"),
    package_type: PackageType = Query(...)
):
    """Price a campaign length without creating anything"""

    try:
        quote = PricingService.quote_campaign(time_limit, package_type)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return CampaignQuoteResponse(**quote.to_dict())


@router.get("/active", response_model=List[CampaignResponse])
async def list_active_campaigns(
    game_type: Optional[GameType] = None,
    db: Session = Depends(get_db)
):
    """List campaigns open for play"""

    campaigns = CampaignService.list_active_campaigns(db, game_type.value if game_type else None)
    return [CampaignResponse.model_validate(c) for c in campaigns]


@router.get("/analytics/brand", response_model=List[dict])
async def brand_campaign_analytics(
    current_user: User = Depends(verify_brand_role),
    db: Session = Depends(get_db)
):
    """Play statistics for the current brand's campaigns"""

    return CampaignService.get_brand_analytics(db, current_user)


@router.get("/brand/{brand_id}", response_model=List[BrandCampaignResponse])
async def list_brand_campaigns(
    brand_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """List a brand's campaigns with their budgets"""

    if current_user.id != brand_id and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view these campaigns"
        )

    campaigns = CampaignService.list_brand_campaigns(db, brand_id)
    return [BrandCampaignResponse.model_validate(c) for c in campaigns]


@router.get("/", response_model=List[CampaignResponse])
async def list_campaigns(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """List campaigns with pagination"""

    campaigns = CampaignService.list_campaigns(db, skip=(page - 1) * per_page, limit=per_page)
    return [CampaignResponse.model_validate(c) for c in campaigns]


@router.get("/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(
    campaign_id: int,
    db: Session = Depends(get_db)
):
    """Get campaign by ID, without quiz answers"""

    return CampaignResponse.model_validate(CampaignService.get_campaign(db, campaign_id))


@router.post("/{campaign_id}/submit", response_model=AttemptResult, status_code=status.HTTP_201_CREATED)
async def submit_attempt(
    campaign_id: int,
    submission: AttemptSubmit,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Submit a puzzle result with quiz answers"""

    result = ScoringService.submit_attempt(
        db,
        current_user,
        campaign_id,
        time_taken=submission.time_taken,
        moves_taken=submission.moves_taken,
        solved=submission.solved,
        answers=submission.answers,
        now=datetime.utcnow()
    )
    attempt = result["attempt"]

    return AttemptResult(
        attempt_id=attempt.id,
        campaign_id=attempt.campaign_id,
        game_type=result["game_type"],
        solved=attempt.solved,
        quiz_score=result["quiz_score"],
        total_questions=result["total_questions"],
        first_time_solved=result["first_time_solved"],
        points_earned=result["points_earned"]
    )


@router.get("/{campaign_id}/completion", response_model=dict)
async def completion_status(
    campaign_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Whether the current user has completed this campaign"""

    return CampaignService.get_completion_status(db, current_user, campaign_id)
