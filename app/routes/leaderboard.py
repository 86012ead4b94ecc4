"""
Leaderboard routes
"""

from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from app.models.leaderboard import LeaderboardType
from app.schemas.rewards import LeaderboardResponse
from app.services.leaderboard_service import LeaderboardService, parse_week_key, week_key_for

router = APIRouter()


@router.get("/weekly", response_model=LeaderboardResponse)
async def current_weekly_leaderboard(db: Session = Depends(get_db)):
    """Leaderboard for the current week"""

    return LeaderboardService.get_leaderboard(db, week_key_for(datetime.utcnow().date()))


@router.get("/weekly/{week_key}", response_model=LeaderboardResponse)
async def weekly_leaderboard(
    week_key: str,
    db: Session = Depends(get_db)
):
    """Leaderboard for a past or current week"""

    try:
        parse_week_key(week_key)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return LeaderboardService.get_leaderboard(db, week_key)


@router.get("/daily", response_model=LeaderboardResponse)
async def todays_leaderboard(db: Session = Depends(get_db)):
    """Leaderboard for today"""

    return LeaderboardService.get_leaderboard(db, datetime.utcnow().date().isoformat(), LeaderboardType.DAILY.value)
