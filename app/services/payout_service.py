"""
Weekly payout distribution and processing
"""

import logging
from datetime import datetime
from typing import Dict, Any, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from config import settings
from app.models.payout import Payout, PayoutStatus
from app.models.prize_pool import DailyPrizePool
from app.models.user import User
from app.services.leaderboard_service import LeaderboardService, parse_week_key
from app.utils.money import round2

logger = logging.getLogger(__name__)

# Percent of the weekly gamer share paid to positions 1 through 10
PRIZE_DISTRIBUTION = [20.0, 15.0, 10.0] + [7.875] * 7


def distribute(weekly_gamer_share: float) -> List[Dict[str, Any]]:
    """Split a weekly share across the ten paid positions.

    Each amount is rounded to kobo and the last position takes what is left
    of the share, so the amounts always add up to it. The published table
    sums to more than 100%, so the last position is reported with the
    percentage it actually receives.
    """
    percentages = PRIZE_DISTRIBUTION[:-1] + [100 - sum(PRIZE_DISTRIBUTION[:-1])]
    amounts = [round2(weekly_gamer_share * pct / 100) for pct in percentages[:-1]]
    amounts.append(round2(weekly_gamer_share - sum(amounts)))

    return [
        {"position": position, "percentage": pct, "amount": amount}
        for position, (pct, amount) in enumerate(zip(percentages, amounts), start=1)
    ]


def serialize_payout(payout: Payout) -> Dict[str, Any]:
    return {
        "id": payout.id,
        "user_id": payout.user_id,
        "week_key": payout.week_key,
        "position": payout.position,
        "points": payout.points,
        "puzzles_solved": payout.puzzles_solved,
        "distribution_percentage": payout.distribution_percentage,
        "amount": payout.amount,
        "currency": payout.currency,
        "status": payout.status,
        "processed_at": payout.processed_at
    }


class PayoutService:
    """Weekly prize distribution to top-ranked gamers"""

    @staticmethod
    def weekly_pool_totals(db: Session, week_key: str) -> Dict[str, float]:
        """Sum of the daily pools whose date falls inside the week"""
        start, end = parse_week_key(week_key)
        total_pool, gamer_share = db.query(
            func.coalesce(func.sum(DailyPrizePool.total_daily_pool), 0.0),
            func.coalesce(func.sum(DailyPrizePool.gamer_share), 0.0)
        ).filter(
            DailyPrizePool.date >= start.date().isoformat(),
            DailyPrizePool.date <= end.date().isoformat()
        ).one()

        return {"total_weekly_pool": round2(total_pool), "weekly_gamer_share": round2(gamer_share)}

    @staticmethod
    def run_weekly_distribution(db: Session, week_key: str) -> Dict[str, Any]:
        """Compute payouts for the top players of a week.

        Safe to re-run before payouts are processed: pending rows are
        overwritten, processed or paid rows are left alone.
        """
        start, end = parse_week_key(week_key)
        totals = PayoutService.weekly_pool_totals(db, week_key)
        ranking = LeaderboardService.rank_players(db, start, end, settings.PAYOUT_POSITIONS)

        if not ranking:
            logger.info(f"No ranked players for week {week_key}, nothing to distribute")
            return {"week_key": week_key, **totals, "payouts": [], "message": "No players ranked this week"}

        distribution = distribute(totals["weekly_gamer_share"])
        existing = {
            payout.user_id: payout
            for payout in db.query(Payout).filter(Payout.week_key == week_key).all()
        }

        payouts = []
        for entry, share in zip(ranking, distribution):
            payout = existing.pop(entry["user_id"], None)
            if payout is not None and payout.status != PayoutStatus.PENDING:
                logger.info(f"Payout for user {payout.user_id} in week {week_key} already {payout.status}, leaving as is")
                payouts.append(payout)
                continue

            if payout is None:
                payout = Payout(user_id=entry["user_id"], week_key=week_key, currency=settings.CURRENCY)
                db.add(payout)

            payout.position = share["position"]
            payout.points = entry["points"]
            payout.puzzles_solved = entry["puzzles_solved"]
            payout.total_weekly_pool = totals["total_weekly_pool"]
            payout.gamer_share = totals["weekly_gamer_share"]
            payout.distribution_percentage = share["percentage"]
            payout.amount = share["amount"]
            payout.status = PayoutStatus.PENDING.value
            payouts.append(payout)

        # Players who dropped out of the top positions since the last run
        for stale in existing.values():
            if stale.status == PayoutStatus.PENDING:
                logger.info(f"Removing stale pending payout for user {stale.user_id} in week {week_key}")
                db.delete(stale)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Payouts for this week are being calculated by another request"
            )

        for payout in payouts:
            db.refresh(payout)

        logger.info(f"Weekly distribution for {week_key}: {len(payouts)} payouts from share {totals['weekly_gamer_share']}")
        return {
            "week_key": week_key,
            **totals,
            "payouts": [serialize_payout(p) for p in payouts],
            "message": f"Calculated {len(payouts)} payouts"
        }

    @staticmethod
    def process_payouts(db: Session, week_key: str, now: datetime,
                        payout_ids: Optional[List[int]] = None) -> Dict[str, Any]:
        """Mark pending payouts processed and credit each user's earnings once"""
        parse_week_key(week_key)

        query = db.query(Payout).filter(Payout.week_key == week_key)
        if payout_ids is not None:
            query = query.filter(Payout.id.in_(payout_ids))
        candidates = query.order_by(Payout.position).all()

        processed, skipped = [], []
        total_amount = 0.0
        for payout in candidates:
            updated = db.query(Payout).filter(
                Payout.id == payout.id,
                Payout.status == PayoutStatus.PENDING.value
            ).update(
                {Payout.status: PayoutStatus.PROCESSED.value, Payout.processed_at: now},
                synchronize_session=False
            )
            if not updated:
                skipped.append(payout.id)
                continue

            db.query(User).filter(User.id == payout.user_id).update(
                {User.total_earnings: User.total_earnings + payout.amount},
                synchronize_session=False
            )
            processed.append(payout.id)
            total_amount += payout.amount

        db.commit()

        if skipped:
            logger.warning(f"Skipped {len(skipped)} payout(s) in week {week_key} that were not pending: {skipped}")
        logger.info(f"Processed {len(processed)} payout(s) for week {week_key}, total {round2(total_amount)}")

        return {
            "week_key": week_key,
            "processed": processed,
            "skipped": skipped,
            "total_amount": round2(total_amount)
        }

    @staticmethod
    def get_user_payouts(db: Session, user_id: int) -> Dict[str, Any]:
        """Payout history for a gamer"""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        payouts = db.query(Payout).filter(
            Payout.user_id == user_id
        ).order_by(Payout.created_at.desc(), Payout.id.desc()).all()

        return {
            "payouts": [serialize_payout(p) for p in payouts],
            "total_earnings": round2(user.total_earnings or 0.0),
            "pending_amount": round2(sum(p.amount for p in payouts if p.status == PayoutStatus.PENDING))
        }

    @staticmethod
    def get_week_payouts(db: Session, week_key: str) -> Dict[str, Any]:
        parse_week_key(week_key)
        payouts = db.query(Payout).filter(Payout.week_key == week_key).order_by(Payout.position).all()

        return {
            "week_key": week_key,
            "payouts": [serialize_payout(p) for p in payouts],
            "total_amount": round2(sum(p.amount for p in payouts))
        }
