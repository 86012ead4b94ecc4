"""
Payment routes using Paystack
"""

import logging
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from database import get_db
from app.models.user import User
from app.schemas.payment import PaymentInitialize, PaymentInitializeResponse, TransactionResponse
from app.services.budget_service import BudgetService
from app.services.payment_service import PaymentService, PaystackError, paystack_client
from app.utils.security import get_current_active_user, verify_brand_role
from app.tasks.payment_tasks import process_payment_webhook_task

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/initialize", response_model=PaymentInitializeResponse, status_code=status.HTTP_201_CREATED)
async def initialize_payment(
    payment_data: PaymentInitialize,
    current_user: User = Depends(verify_brand_role),
    db: Session = Depends(get_db)
):
    """Start paying for a campaign"""

    try:
        checkout = PaymentService.initialize_campaign_payment(
            db,
            current_user,
            payment_data.campaign_id,
            payment_data.package_type.value,
            email=payment_data.email
        )
    except PaystackError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return PaymentInitializeResponse(**checkout)


@router.get("/verify/{reference}", response_model=dict)
async def verify_payment(
    reference: str,
    current_user: User = Depends(verify_brand_role),
    db: Session = Depends(get_db)
):
    """Confirm a payment and activate its campaign"""

    try:
        result = PaymentService.verify_payment(db, current_user, reference, datetime.utcnow())
    except PaystackError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if not result["success"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Payment was not successful: {result['status']}"
        )

    return {
        **result,
        "message": "Payment verified and campaign activated"
    }


@router.post("/webhook")
async def paystack_webhook(request: Request):
    """Handle Paystack webhooks"""

    raw_body = await request.body()
    validation = paystack_client.validate_webhook(request.headers, raw_body)

    if not validation["is_valid"]:
        logger.warning("Rejected Paystack webhook with invalid signature")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid signature"
        )

    # Process webhook asynchronously
    process_payment_webhook_task.delay({"event": validation["event"], "data": validation["data"]})

    return {"status": "success", "message": "Webhook received"}


@router.get("/campaigns/{campaign_id}/budget", response_model=dict)
async def campaign_budget(
    campaign_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Budget status of a campaign"""

    return BudgetService.get_budget_status(db, campaign_id, datetime.utcnow(), user=current_user)


@router.get("/transactions", response_model=List[TransactionResponse])
async def transaction_history(
    current_user: User = Depends(verify_brand_role),
    db: Session = Depends(get_db)
):
    """Payment history of the current brand"""

    transactions = PaymentService.get_transaction_history(db, current_user.id)
    return [TransactionResponse.model_validate(t) for t in transactions]
