"""
Payment processing background tasks
"""

import logging
from datetime import datetime
from typing import Dict, Any

from database import SessionLocal
from app.schemas.payment import PaystackWebhook
from app.services.payment_service import PaymentService
from app.tasks.rewards_tasks import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def process_payment_webhook_task(self, webhook_data: Dict[str, Any]):
    """Apply a validated Paystack webhook in background"""

    webhook = PaystackWebhook(**webhook_data)
    reference = webhook.data.get("reference")
    db = SessionLocal()

    try:
        handled = PaymentService.handle_webhook(db, webhook.event, webhook.data, datetime.utcnow())

        if handled:
            logger.info(f"Webhook {webhook.event} processed for {reference}")
        else:
            logger.warning(f"Webhook {webhook.event} for {reference} was not applied")

        return {"success": handled}

    except Exception as exc:
        db.rollback()
        logger.exception(f"Webhook {webhook.event} for {reference} failed (retry {self.request.retries})")

        # Retry task
        if self.request.retries < self.max_retries:
            raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))

        raise

    finally:
        db.close()
