"""
Daily prize pool aggregation

Every day each funded campaign feeds its daily allocation into a shared
pool. The pool is split between gamers (paid out weekly) and the platform.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Any, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from config import settings
from app.models.campaign import Campaign, CampaignStatus, CampaignPaymentStatus
from app.models.prize_pool import DailyPrizePool, PrizePoolStatus
from app.services.budget_service import BudgetService
from app.services.leaderboard_service import day_window, parse_week_key
from app.services.payout_service import distribute
from app.utils.money import round2

logger = logging.getLogger(__name__)


def split_pool(total: float) -> Tuple[float, float]:
    """Gamer share and platform fee of a pool total"""
    gamer_share = round2(total * settings.GAMER_SHARE_PERCENT / 100)
    return gamer_share, round2(total - gamer_share)


def serialize_pool(pool: DailyPrizePool) -> Dict[str, Any]:
    return {
        "date": pool.date,
        "active_campaigns": pool.active_campaigns or [],
        "active_campaigns_count": len(pool.active_campaigns or []),
        "total_daily_pool": pool.total_daily_pool,
        "gamer_share": pool.gamer_share,
        "platform_fee": pool.platform_fee,
        "status": pool.status
    }


class PrizePoolService:
    """Daily pool aggregation, previews and reporting"""

    @staticmethod
    def _eligible_campaigns(db: Session, day: date, lock: bool = False) -> List[Campaign]:
        """Funded campaigns running at any point on `day` with budget left"""
        day_start, day_end = day_window(day)
        query = db.query(Campaign).filter(
            Campaign.status.in_([CampaignStatus.ACTIVE.value, CampaignStatus.ENDED.value]),
            Campaign.payment_status == CampaignPaymentStatus.PAID.value,
            Campaign.start_date <= day_end,
            Campaign.end_date >= day_start,
            Campaign.budget_remaining > 0
        ).order_by(Campaign.id)

        if lock:
            query = query.with_for_update()
        return query.all()

    @staticmethod
    def _contribution(campaign: Campaign, amount: float) -> Dict[str, Any]:
        return {
            "campaign_id": campaign.id,
            "package_type": campaign.package_type,
            "daily_allocation": round2(amount)
        }

    @staticmethod
    def run_daily_aggregation(db: Session, day: date) -> DailyPrizePool:
        """Build the pool for `day` and debit each contributing campaign.

        Runs at most once per date: if a pool already exists it is returned
        untouched and no ledger is debited again.
        """
        key = day.isoformat()
        existing = db.query(DailyPrizePool).filter(DailyPrizePool.date == key).first()
        if existing:
            logger.info(f"Prize pool for {key} already exists, skipping aggregation")
            return existing

        contributions = []
        total = 0.0
        for campaign in PrizePoolService._eligible_campaigns(db, day, lock=True):
            try:
                rate = BudgetService.resolve_daily_rate(campaign)
                debited = BudgetService.debit(db, campaign, rate, day)
            except Exception:
                logger.exception(f"Skipping campaign {campaign.id} in prize pool for {key}")
                continue

            if debited <= 0:
                continue
            contributions.append(PrizePoolService._contribution(campaign, debited))
            total += debited

        total = round2(total)
        gamer_share, platform_fee = split_pool(total)
        pool = DailyPrizePool(
            date=key,
            active_campaigns=contributions,
            total_daily_pool=total,
            gamer_share=gamer_share,
            platform_fee=platform_fee,
            status=PrizePoolStatus.ACTIVE.value
        )
        db.add(pool)

        try:
            db.commit()
        except IntegrityError:
            # Another run stored this date first; its debits stand, ours are rolled back
            db.rollback()
            logger.warning(f"Concurrent aggregation for {key} detected, using stored pool")
            return db.query(DailyPrizePool).filter(DailyPrizePool.date == key).one()

        db.refresh(pool)
        logger.info(
            f"Prize pool for {key}: {len(contributions)} campaigns, total {total}, "
            f"gamer share {gamer_share}, platform fee {platform_fee}"
        )
        return pool

    @staticmethod
    def preview_daily_prize_table(db: Session, day: date) -> Dict[str, Any]:
        """What the pool for `day` would pay out, without touching any ledger"""
        breakdown = []
        total = 0.0
        for campaign in PrizePoolService._eligible_campaigns(db, day):
            try:
                rate = BudgetService.resolve_daily_rate(campaign)
            except ValueError:
                logger.exception(f"Skipping campaign {campaign.id} in prize table preview")
                continue

            amount = round2(min(rate, campaign.budget_remaining))
            breakdown.append(PrizePoolService._contribution(campaign, amount))
            total += amount

        total = round2(total)
        gamer_share, platform_fee = split_pool(total)

        return {
            "date": day.isoformat(),
            "active_campaigns_count": len(breakdown),
            "total_daily_pool": total,
            "gamer_share": gamer_share,
            "platform_fee": platform_fee,
            "prize_table": distribute(gamer_share),
            "campaign_breakdown": breakdown
        }

    @staticmethod
    def get_daily_pool(db: Session, day: date) -> Optional[DailyPrizePool]:
        return db.query(DailyPrizePool).filter(DailyPrizePool.date == day.isoformat()).first()

    @staticmethod
    def get_weekly_summary(db: Session, week_key: str) -> Dict[str, Any]:
        """Daily pools of a week and their totals"""
        start, end = parse_week_key(week_key)
        pools = db.query(DailyPrizePool).filter(
            DailyPrizePool.date >= start.date().isoformat(),
            DailyPrizePool.date <= end.date().isoformat()
        ).order_by(DailyPrizePool.date).all()

        return {
            "week_key": week_key,
            "days": [serialize_pool(p) for p in pools],
            "days_count": len(pools),
            "total_pool": round2(sum(p.total_daily_pool for p in pools)),
            "gamer_share": round2(sum(p.gamer_share for p in pools)),
            "platform_fee": round2(sum(p.platform_fee for p in pools))
        }

    @staticmethod
    def get_platform_earnings(db: Session, start_date: date, end_date: date) -> Dict[str, Any]:
        """Revenue split over an inclusive date range"""
        if end_date < start_date:
            raise ValueError("End date must not be before start date")

        total, platform_fee, gamer_share, days = db.query(
            func.coalesce(func.sum(DailyPrizePool.total_daily_pool), 0.0),
            func.coalesce(func.sum(DailyPrizePool.platform_fee), 0.0),
            func.coalesce(func.sum(DailyPrizePool.gamer_share), 0.0),
            func.count(DailyPrizePool.id)
        ).filter(
            DailyPrizePool.date >= start_date.isoformat(),
            DailyPrizePool.date <= end_date.isoformat()
        ).one()

        return {
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "days": int(days),
            "total_revenue": round2(total),
            "platform_earnings": round2(platform_fee),
            "gamer_share": round2(gamer_share),
            "platform_percentage": 100 - settings.GAMER_SHARE_PERCENT,
            "gamer_percentage": settings.GAMER_SHARE_PERCENT
        }


def previous_day(now: Optional[datetime] = None) -> date:
    """The calendar day before `now` in UTC, used as the default aggregation date"""
    now = now or datetime.utcnow()
    return (now - timedelta(days=1)).date()
