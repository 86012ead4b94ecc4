"""
Daily prize pool routes
"""

import logging
from datetime import date, datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from database import get_db
from app.models.user import User
from app.schemas.rewards import DailyPoolResponse, DailyCalculateRequest, PrizeTableResponse
from app.services.leaderboard_service import week_key_for
from app.services.prize_pool_service import PrizePoolService, serialize_pool, previous_day
from app.utils.security import verify_admin_role

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Date must be in YYYY-MM-DD format"
        )


@router.get("/daily/{pool_date}", response_model=DailyPoolResponse)
async def get_daily_pool(
    pool_date: str,
    db: Session = Depends(get_db)
):
    """Stored prize pool for a date"""

    pool = PrizePoolService.get_daily_pool(db, _parse_date(pool_date))
    if not pool:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No prize pool has been calculated for this date"
        )

    return DailyPoolResponse(**serialize_pool(pool))


@router.post("/daily/calculate", response_model=DailyPoolResponse)
async def calculate_daily_pool(
    request: DailyCalculateRequest,
    current_user: User = Depends(verify_admin_role),
    db: Session = Depends(get_db)
):
    """Aggregate the prize pool for a date (yesterday by default)"""

    target = request.target_date or previous_day()
    pool = PrizePoolService.run_daily_aggregation(db, target)
    logger.info(f"Admin {current_user.id} ran prize pool aggregation for {target.isoformat()}")

    return DailyPoolResponse(**serialize_pool(pool))


@router.get("/table/today", response_model=PrizeTableResponse)
async def todays_prize_table(db: Session = Depends(get_db)):
    """Projected prize table for today"""

    return PrizeTableResponse(**PrizePoolService.preview_daily_prize_table(db, datetime.utcnow().date()))


@router.get("/table/{table_date}", response_model=PrizeTableResponse)
async def prize_table(
    table_date: str,
    db: Session = Depends(get_db)
):
    """Projected prize table for a date"""

    return PrizeTableResponse(**PrizePoolService.preview_daily_prize_table(db, _parse_date(table_date)))


@router.get("/weekly/summary", response_model=dict)
async def weekly_summary(
    week_key: Optional[str] = Query(None, description="YYYY-MM-DD_to_YYYY-MM-DD, current week by default"),
    db: Session = Depends(get_db)
):
    """Daily pools and totals for a week"""

    try:
        return PrizePoolService.get_weekly_summary(db, week_key or week_key_for(datetime.utcnow().date()))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/platform-earnings", response_model=dict)
async def platform_earnings(
    start_date: str = Query(..., description="YYYY-MM-DD"),
    end_date: str = Query(..., description="YYYY-MM-DD"),
    current_user: User = Depends(verify_admin_role),
    db: Session = Depends(get_db)
):
    """Platform revenue over a date range"""

    try:
        return PrizePoolService.get_platform_earnings(db, _parse_date(start_date), _parse_date(end_date))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
