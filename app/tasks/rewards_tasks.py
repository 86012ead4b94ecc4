"""
Scheduled prize pool, payout and campaign lifecycle tasks

Celery beat supplies the clock; every task resolves its date at the task
boundary and hands an explicit date or week key to the service layer.
"""

import logging
from datetime import date, datetime
from typing import Optional
from celery import Celery
from celery.schedules import crontab

from config import settings
from database import SessionLocal
from app.services.budget_service import BudgetService
from app.services.leaderboard_service import LeaderboardService, week_key_for
from app.services.payout_service import PayoutService
from app.services.prize_pool_service import PrizePoolService, previous_day

logger = logging.getLogger(__name__)

# Create Celery instance
celery_app = Celery(
    "puzzle_rewards",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=['app.tasks.rewards_tasks', 'app.tasks.payment_tasks']
)

# Configure Celery
celery_app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
    task_track_started=True,
    task_time_limit=30 * 60,  # 30 minutes
    task_soft_time_limit=25 * 60,  # 25 minutes
    worker_prefetch_multiplier=1,
)

celery_app.conf.beat_schedule = {
    "daily-prize-pool": {
        "task": "app.tasks.rewards_tasks.run_daily_prize_pool_task",
        "schedule": crontab(hour=0, minute=5),
    },
    "weekly-payouts": {
        "task": "app.tasks.rewards_tasks.run_weekly_payouts_task",
        "schedule": crontab(day_of_week="sun", hour=23, minute=30),
    },
    "end-expired-campaigns": {
        "task": "app.tasks.rewards_tasks.end_expired_campaigns_task",
        "schedule": crontab(minute=0),
    },
    "refresh-leaderboards": {
        "task": "app.tasks.rewards_tasks.refresh_leaderboards_task",
        "schedule": crontab(minute="*/10"),
    },
}


@celery_app.task(bind=True, max_retries=3)
def run_daily_prize_pool_task(self, pool_date: Optional[str] = None):
    """Aggregate the prize pool for `pool_date` (yesterday in UTC by default)"""

    target = date.fromisoformat(pool_date) if pool_date else previous_day()
    db = SessionLocal()

    try:
        pool = PrizePoolService.run_daily_aggregation(db, target)
        return {
            "date": pool.date,
            "total_daily_pool": pool.total_daily_pool,
            "gamer_share": pool.gamer_share,
            "campaigns": len(pool.active_campaigns or [])
        }

    except Exception as exc:
        logger.exception(f"Daily prize pool for {target.isoformat()} failed")
        if self.request.retries < self.max_retries:
            raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))
        raise

    finally:
        db.close()


@celery_app.task(bind=True, max_retries=3)
def run_weekly_payouts_task(self, week_key: Optional[str] = None):
    """Distribute the weekly gamer share (current UTC week by default)"""

    scheduled_run = week_key is None
    today = datetime.utcnow().date()
    week_key = week_key or week_key_for(today)
    db = SessionLocal()

    try:
        if scheduled_run:
            # Sunday's pool is not aggregated until after midnight otherwise
            PrizePoolService.run_daily_aggregation(db, today)
        result = PayoutService.run_weekly_distribution(db, week_key)
        return {"week_key": week_key, "payouts": len(result["payouts"])}

    except Exception as exc:
        logger.exception(f"Weekly payouts for {week_key} failed")
        if self.request.retries < self.max_retries:
            raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))
        raise

    finally:
        db.close()


@celery_app.task
def end_expired_campaigns_task():
    """End active campaigns whose time is up"""

    db = SessionLocal()
    try:
        return {"ended_campaigns": BudgetService.end_expired_campaigns(db, datetime.utcnow())}
    finally:
        db.close()


@celery_app.task
def refresh_leaderboards_task():
    """Rebuild today's and this week's leaderboard snapshots"""

    today = datetime.utcnow().date()
    db = SessionLocal()
    try:
        weekly = LeaderboardService.refresh_weekly_leaderboard(db, today)
        daily = LeaderboardService.refresh_daily_leaderboard(db, today)
        return {"weekly": len(weekly.entries or []), "daily": len(daily.entries or [])}
    finally:
        db.close()
