"""
Weekly payout routes
"""

import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from app.models.user import User
from app.schemas.rewards import WeeklyCalculateRequest, ProcessPayoutsRequest
from app.services.leaderboard_service import week_key_for
from app.services.payout_service import PayoutService
from app.utils.security import get_current_active_user, verify_admin_role

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/weekly/calculate", response_model=dict)
async def calculate_weekly_payouts(
    request: WeeklyCalculateRequest,
    current_user: User = Depends(verify_admin_role),
    db: Session = Depends(get_db)
):
    """Compute payouts for a week's top players"""

    week_key = request.week_key or week_key_for(datetime.utcnow().date())
    try:
        return PayoutService.run_weekly_distribution(db, week_key)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/me", response_model=dict)
async def my_payouts(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Payout history of the current gamer"""

    return PayoutService.get_user_payouts(db, current_user.id)


@router.get("/week/{week_key}", response_model=dict)
async def week_payouts(
    week_key: str,
    current_user: User = Depends(verify_admin_role),
    db: Session = Depends(get_db)
):
    """All payouts for a week"""

    try:
        return PayoutService.get_week_payouts(db, week_key)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/process", response_model=dict)
async def process_payouts(
    request: ProcessPayoutsRequest,
    current_user: User = Depends(verify_admin_role),
    db: Session = Depends(get_db)
):
    """Mark pending payouts as processed"""

    try:
        result = PayoutService.process_payouts(db, request.week_key, datetime.utcnow(), request.payout_ids)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info(f"Admin {current_user.id} processed payouts for {request.week_key}")
    return result
