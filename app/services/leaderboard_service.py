"""
Weekly and daily leaderboards built from first-time solves
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Any, List, Tuple, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from config import settings
from app.models.attempt import PuzzleAttempt
from app.models.leaderboard import Leaderboard, LeaderboardType
from app.models.user import User

logger = logging.getLogger(__name__)

WEEK_KEY_SEPARATOR = "_to_"


def week_window(today: date) -> Tuple[datetime, datetime]:
    """Monday 00:00:00.000 through Sunday 23:59:59.999 of the week containing `today`"""
    if isinstance(today, datetime):
        today = today.date()
    days_from_monday = today.weekday()  # Monday is 0, Sunday is 6
    monday = today - timedelta(days=days_from_monday)
    start = datetime(monday.year, monday.month, monday.day)
    end = start + timedelta(days=7) - timedelta(milliseconds=1)
    return start, end


def day_window(day: date) -> Tuple[datetime, datetime]:
    if isinstance(day, datetime):
        day = day.date()
    start = datetime(day.year, day.month, day.day)
    return start, start + timedelta(days=1) - timedelta(milliseconds=1)


def week_key(start: datetime, end: datetime) -> str:
    return f"{start.date().isoformat()}{WEEK_KEY_SEPARATOR}{end.date().isoformat()}"


def week_key_for(today: date) -> str:
    return week_key(*week_window(today))


def parse_week_key(key: str) -> Tuple[datetime, datetime]:
    """Window for a week key, rejecting anything that is not a Monday to Sunday range"""
    try:
        start_text, end_text = key.split(WEEK_KEY_SEPARATOR)
        monday = date.fromisoformat(start_text)
        sunday = date.fromisoformat(end_text)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid week key: {key!r}")

    if monday.weekday() != 0 or sunday - monday != timedelta(days=6):
        raise ValueError(f"Week key must span Monday to Sunday: {key!r}")

    return week_window(monday)


class LeaderboardService:
    """Ranking and leaderboard snapshots"""

    @staticmethod
    def rank_players(db: Session, start: datetime, end: datetime, limit: int) -> List[Dict[str, Any]]:
        """Players ordered by points, then solves, for first-time solves inside the window"""
        puzzles_solved = func.count(PuzzleAttempt.id)
        points = func.coalesce(func.sum(PuzzleAttempt.points_earned), 0)

        rows = db.query(
            PuzzleAttempt.user_id,
            User.username,
            puzzles_solved.label("puzzles_solved"),
            points.label("points")
        ).join(
            User, User.id == PuzzleAttempt.user_id
        ).filter(
            PuzzleAttempt.first_time_solved == True,  # noqa: E712
            PuzzleAttempt.timestamp >= start,
            PuzzleAttempt.timestamp <= end
        ).group_by(
            PuzzleAttempt.user_id, User.username
        ).order_by(
            points.desc(), puzzles_solved.desc(), PuzzleAttempt.user_id.asc()
        ).limit(limit).all()

        return [
            {
                "rank": index,
                "user_id": row.user_id,
                "username": row.username,
                "puzzles_solved": int(row.puzzles_solved),
                "points": int(row.points)
            }
            for index, row in enumerate(rows, start=1)
        ]

    @staticmethod
    def _upsert_snapshot(db: Session, board_type: str, period_key: str,
                         entries: List[Dict[str, Any]]) -> Leaderboard:
        snapshot = db.query(Leaderboard).filter(
            Leaderboard.type == board_type,
            Leaderboard.period_key == period_key
        ).first()

        if snapshot:
            snapshot.entries = entries
        else:
            snapshot = Leaderboard(type=board_type, period_key=period_key, entries=entries)
            db.add(snapshot)

        try:
            db.commit()
        except IntegrityError:
            # A concurrent refresh inserted the same period first
            db.rollback()
            snapshot = db.query(Leaderboard).filter(
                Leaderboard.type == board_type,
                Leaderboard.period_key == period_key
            ).one()
            snapshot.entries = entries
            db.commit()

        db.refresh(snapshot)
        return snapshot

    @staticmethod
    def refresh_weekly_leaderboard(db: Session, today: date) -> Leaderboard:
        """Recompute and store the top players for the week containing `today`"""
        start, end = week_window(today)
        key = week_key(start, end)
        entries = LeaderboardService.rank_players(db, start, end, settings.LEADERBOARD_LIMIT)

        snapshot = LeaderboardService._upsert_snapshot(db, LeaderboardType.WEEKLY.value, key, entries)
        logger.info(f"Weekly leaderboard {key} refreshed with {len(entries)} players")
        return snapshot

    @staticmethod
    def refresh_daily_leaderboard(db: Session, day: date) -> Leaderboard:
        start, end = day_window(day)
        key = start.date().isoformat()
        entries = LeaderboardService.rank_players(db, start, end, settings.LEADERBOARD_LIMIT)

        snapshot = LeaderboardService._upsert_snapshot(db, LeaderboardType.DAILY.value, key, entries)
        logger.info(f"Daily leaderboard {key} refreshed with {len(entries)} players")
        return snapshot

    @staticmethod
    def get_leaderboard(db: Session, period_key: str,
                        board_type: str = LeaderboardType.WEEKLY.value) -> Dict[str, Any]:
        """Stored snapshot for a period, or an empty board when none has been built"""
        snapshot: Optional[Leaderboard] = db.query(Leaderboard).filter(
            Leaderboard.type == board_type,
            Leaderboard.period_key == period_key
        ).first()

        return {
            "type": board_type,
            "period_key": period_key,
            "entries": snapshot.entries if snapshot else [],
            "updated_at": (snapshot.updated_at or snapshot.created_at) if snapshot else None
        }
