"""
Campaign payments through Paystack
"""

import hmac
import hashlib
import json
import logging
import uuid
import requests
from datetime import datetime
from typing import Dict, Any, Optional, List, Mapping

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from config import settings
from app.models.campaign import Campaign, CampaignStatus
from app.models.payment import Transaction, TransactionStatus
from app.models.user import User
from app.services.budget_service import BudgetService
from app.services.pricing_service import PricingService

logger = logging.getLogger(__name__)


class PaystackError(Exception):
    """Custom exception for Paystack API errors"""
    pass


class PaystackClient:
    """Thin wrapper over the Paystack transaction API"""

    def __init__(self, secret_key: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[int] = None):
        self.secret_key = secret_key if secret_key is not None else settings.PAYSTACK_SECRET_KEY
        self.base_url = base_url or settings.PAYSTACK_BASE_URL
        self.timeout = timeout or settings.PAYSTACK_TIMEOUT

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json"
        }

    def initialize(self, email: str, amount: float, reference: str,
                   metadata: Optional[Dict[str, Any]] = None,
                   callback_url: Optional[str] = None) -> Dict[str, Any]:
        """Create a checkout session. Amount is in Naira."""
        payload = {
            "email": email,
            "amount": int(round(amount * 100)),  # kobo
            "reference": reference,
            "currency": settings.CURRENCY,
            "callback_url": callback_url,
            "metadata": metadata or {}
        }

        try:
            response = requests.post(
                f"{self.base_url}/transaction/initialize",
                headers=self._headers(),
                json=payload,
                timeout=self.timeout
            )
            response.raise_for_status()
            response_data = response.json()
        except requests.exceptions.RequestException as e:
            raise PaystackError(f"Paystack initialization failed: {str(e)}")
        except json.JSONDecodeError:
            raise PaystackError("Invalid response from Paystack")

        if not response_data.get("status"):
            raise PaystackError(f"Paystack initialization failed: {response_data.get('message', 'Unknown error')}")

        data = response_data.get("data") or {}
        return {
            "authorization_url": data.get("authorization_url"),
            "access_code": data.get("access_code"),
            "reference": reference
        }

    def verify(self, reference: str) -> Dict[str, Any]:
        """Look up a transaction. Amount is returned in Naira."""
        try:
            response = requests.get(
                f"{self.base_url}/transaction/verify/{reference}",
                headers=self._headers(),
                timeout=self.timeout
            )
            response.raise_for_status()
            response_data = response.json()
        except requests.exceptions.RequestException as e:
            raise PaystackError(f"Paystack verification failed: {str(e)}")
        except json.JSONDecodeError:
            raise PaystackError("Invalid response from Paystack")

        data = response_data.get("data") or {}
        gateway_status = data.get("status")
        return {
            "success": gateway_status == "success",
            "status": gateway_status or "failed",
            "reference": reference,
            "amount": (data.get("amount") or 0) / 100,
            "raw": data
        }

    def validate_webhook(self, headers: Mapping[str, str], raw_body: bytes) -> Dict[str, Any]:
        """Check the HMAC-SHA512 signature Paystack sends with each event"""
        signature = headers.get("x-paystack-signature") or ""
        expected = hmac.new(self.secret_key.encode(), raw_body, hashlib.sha512).hexdigest()

        if not signature or not hmac.compare_digest(expected, signature):
            return {"is_valid": False, "event": None, "data": None}

        try:
            body = json.loads(raw_body)
        except json.JSONDecodeError:
            return {"is_valid": False, "event": None, "data": None}

        return {"is_valid": True, "event": body.get("event"), "data": body.get("data") or {}}


paystack_client = PaystackClient()


class PaymentService:
    """Campaign payment flows"""

    @staticmethod
    def generate_reference() -> str:
        return f"PZL_{uuid.uuid4().hex[:20].upper()}"

    @staticmethod
    def initialize_campaign_payment(db: Session, brand: User, campaign_id: int, package_type: str,
                                    email: Optional[str] = None,
                                    client: Optional[PaystackClient] = None) -> Dict[str, Any]:
        """Create a pending transaction for a draft campaign and open a Paystack checkout"""
        client = client or paystack_client

        campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Campaign not found"
            )
        if campaign.brand_id != brand.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only pay for your own campaigns"
            )
        if campaign.status != CampaignStatus.DRAFT:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Campaign has already been paid for"
            )
        if package_type != campaign.package_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Package does not match the campaign's package"
            )

        try:
            quote = PricingService.quote_campaign(campaign.time_limit, campaign.package_type)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        reference = PaymentService.generate_reference()
        transaction = Transaction(
            campaign_id=campaign.id,
            brand_id=brand.id,
            package_type=campaign.package_type,
            amount=quote.charged_amount,
            currency=settings.CURRENCY,
            reference=reference,
            status=TransactionStatus.PENDING.value
        )
        db.add(transaction)
        db.commit()
        db.refresh(transaction)

        try:
            checkout = client.initialize(
                email=email or brand.email,
                amount=transaction.amount,
                reference=reference,
                metadata={
                    "campaign_id": campaign.id,
                    "brand_id": brand.id,
                    "package_type": campaign.package_type,
                    "time_limit": campaign.time_limit
                },
                callback_url=f"{settings.FRONTEND_URL}/payment/verify?reference={reference}"
            )
        except PaystackError:
            transaction.status = TransactionStatus.FAILED.value
            db.commit()
            raise

        logger.info(f"Payment {reference} initialized for campaign {campaign.id}, amount {transaction.amount}")
        return {
            "authorization_url": checkout["authorization_url"],
            "access_code": checkout.get("access_code"),
            "reference": reference,
            "amount": transaction.amount,
            "currency": transaction.currency
        }

    @staticmethod
    def _amount_matches(transaction: Transaction, gateway_amount_kobo: Any) -> bool:
        """Whether the amount Paystack charged, in kobo, is the amount we asked for"""
        expected = int(round(transaction.amount * 100))
        if gateway_amount_kobo is None or int(gateway_amount_kobo) != expected:
            logger.warning(
                f"Payment {transaction.reference} amount mismatch: gateway {gateway_amount_kobo} kobo, "
                f"expected {expected} kobo"
            )
            return False
        return True

    @staticmethod
    def _reject_transaction(db: Session, transaction: Transaction, gateway_data: Dict[str, Any]) -> None:
        transaction.status = TransactionStatus.FAILED.value
        transaction.gateway_response = gateway_data
        db.commit()

    @staticmethod
    def _complete_transaction(db: Session, transaction: Transaction, gateway_data: Dict[str, Any],
                              now: datetime) -> bool:
        """Mark a locked transaction successful and fund its campaign. Caller commits."""
        transaction.status = TransactionStatus.SUCCESS.value
        transaction.gateway_response = gateway_data
        return BudgetService.activate_on_payment(db, transaction.campaign_id, transaction, now)

    @staticmethod
    def verify_payment(db: Session, brand: User, reference: str, now: datetime,
                       client: Optional[PaystackClient] = None) -> Dict[str, Any]:
        """Confirm a payment with Paystack and activate the campaign on success"""
        client = client or paystack_client

        transaction = db.query(Transaction).filter(
            Transaction.reference == reference
        ).with_for_update().first()
        if not transaction:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Transaction not found"
            )
        if transaction.brand_id != brand.id and not brand.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You are not authorized to verify this payment reference"
            )

        # Already confirmed (by webhook or an earlier verify)
        if transaction.status == TransactionStatus.SUCCESS:
            db.commit()
            return {"success": True, "status": transaction.status, "reference": reference,
                    "campaign_id": transaction.campaign_id, "activated": False}

        try:
            result = client.verify(reference)
        except PaystackError:
            transaction.status = TransactionStatus.FAILED.value
            db.commit()
            logger.error(f"Verification of payment {reference} failed at the gateway")
            raise

        if not result["success"]:
            transaction.status = TransactionStatus.FAILED.value
            transaction.gateway_response = result.get("raw")
            db.commit()
            logger.warning(f"Payment {reference} reported as {result['status']} by Paystack")
            return {"success": False, "status": result["status"], "reference": reference,
                    "campaign_id": transaction.campaign_id, "activated": False}

        raw = result.get("raw") or {}
        if not PaymentService._amount_matches(transaction, raw.get("amount")):
            PaymentService._reject_transaction(db, transaction, raw)
            return {"success": False, "status": "amount_mismatch", "reference": reference,
                    "campaign_id": transaction.campaign_id, "activated": False}

        activated = PaymentService._complete_transaction(db, transaction, raw, now)
        db.commit()

        logger.info(f"Payment {reference} verified, campaign {transaction.campaign_id} activated={activated}")
        return {"success": True, "status": TransactionStatus.SUCCESS.value, "reference": reference,
                "campaign_id": transaction.campaign_id, "activated": activated}

    @staticmethod
    def handle_webhook(db: Session, event: str, data: Dict[str, Any], now: datetime) -> bool:
        """Apply a validated Paystack event. Returns True when it was handled."""
        if event != "charge.success":
            logger.info(f"Ignoring Paystack event {event}")
            return False

        reference = data.get("reference")
        transaction = db.query(Transaction).filter(
            Transaction.reference == reference
        ).with_for_update().first()
        if not transaction:
            logger.warning(f"Webhook for unknown payment reference {reference}")
            db.rollback()
            return False

        if transaction.status == TransactionStatus.SUCCESS:
            db.commit()
            return True

        if not PaymentService._amount_matches(transaction, data.get("amount")):
            PaymentService._reject_transaction(db, transaction, data)
            return False

        PaymentService._complete_transaction(db, transaction, data, now)
        db.commit()
        logger.info(f"Webhook confirmed payment {reference} for campaign {transaction.campaign_id}")
        return True

    @staticmethod
    def get_transaction_history(db: Session, brand_id: int) -> List[Transaction]:
        return db.query(Transaction).filter(
            Transaction.brand_id == brand_id
        ).order_by(Transaction.created_at.desc(), Transaction.id.desc()).all()
