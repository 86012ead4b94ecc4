"""
Background tasks for Puzzle Rewards
"""

from .rewards_tasks import (
    celery_app,
    run_daily_prize_pool_task,
    run_weekly_payouts_task,
    end_expired_campaigns_task,
    refresh_leaderboards_task
)
from .payment_tasks import process_payment_webhook_task

__all__ = [
    "celery_app",
    "run_daily_prize_pool_task",
    "run_weekly_payouts_task",
    "end_expired_campaigns_task",
    "refresh_leaderboards_task",
    "process_payment_webhook_task"
]
