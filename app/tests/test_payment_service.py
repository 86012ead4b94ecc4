"""
Tests for Paystack payments and campaign activation
"""

import hashlib
import hmac
import json
from datetime import datetime
from unittest.mock import Mock, patch

import pytest
import requests
from fastapi import HTTPException

from app.models.campaign import Campaign, CampaignStatus
from app.models.payment import Transaction, TransactionStatus
from app.models.user import UserRole
from app.services.budget_service import BudgetService
from app.services.payment_service import PaymentService, PaystackClient, PaystackError

NOW = datetime(2025, 3, 12, 9, 0, 0)  # a Wednesday
SECRET = "sk_test_secret"


@pytest.fixture
def gateway():
    """Paystack client double that accepts every payment"""
    client = Mock(spec=PaystackClient)
    client.initialize.return_value = {
        "authorization_url": "https://checkout.paystack.com/abc",
        "access_code": "abc",
        "reference": "ignored"
    }
    client.verify.return_value = {
        "success": True,
        "status": "success",
        "reference": "ignored",
        "amount": 18000,
        "raw": {"status": "success", "amount": 1800000}
    }
    return client


@pytest.fixture
def draft_campaign(make_campaign):
    return make_campaign(active=False, package_type="premium", time_limit=336)


@pytest.fixture
def initialized(db_session, brand, draft_campaign, gateway):
    return PaymentService.initialize_campaign_payment(db_session, brand, draft_campaign.id, "premium", client=gateway)


def _response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class TestPaystackClient:

    def test_initialize_sends_kobo(self):
        client = PaystackClient(secret_key=SECRET, base_url="https://api.paystack.co")
        payload = {"status": True, "data": {"authorization_url": "https://pay", "access_code": "x"}}

        with patch("app.services.payment_service.requests.post", return_value=_response(payload)) as post:
            result = client.initialize("brand@example.com", 18000, "PZL_REF")

        assert result == {"authorization_url": "https://pay", "access_code": "x", "reference": "PZL_REF"}
        sent = post.call_args.kwargs["json"]
        assert sent["amount"] == 1800000
        assert post.call_args.kwargs["headers"]["Authorization"] == f"Bearer {SECRET}"

    def test_initialize_rejected(self):
        client = PaystackClient(secret_key=SECRET)

        with patch("app.services.payment_service.requests.post",
                   return_value=_response({"status": False, "message": "Invalid key"})):
            with pytest.raises(PaystackError):
                client.initialize("brand@example.com", 7000, "PZL_REF")

    def test_network_failure(self):
        client = PaystackClient(secret_key=SECRET)

        with patch("app.services.payment_service.requests.get",
                   side_effect=requests.exceptions.ConnectionError("down")):
            with pytest.raises(PaystackError):
                client.verify("PZL_REF")

    def test_verify_converts_amount(self):
        client = PaystackClient(secret_key=SECRET)
        payload = {"status": True, "data": {"status": "success", "amount": 700000}}

        with patch("app.services.payment_service.requests.get", return_value=_response(payload)):
            result = client.verify("PZL_REF")

        assert result["success"] is True
        assert result["amount"] == 7000

    def test_verify_abandoned(self):
        client = PaystackClient(secret_key=SECRET)
        payload = {"status": True, "data": {"status": "abandoned", "amount": 700000}}

        with patch("app.services.payment_service.requests.get", return_value=_response(payload)):
            result = client.verify("PZL_REF")

        assert result["success"] is False
        assert result["status"] == "abandoned"

    def test_webhook_signature(self):
        client = PaystackClient(secret_key=SECRET)
        body = json.dumps({"event": "charge.success", "data": {"reference": "PZL_REF"}}).encode()
        signature = hmac.new(SECRET.encode(), body, hashlib.sha512).hexdigest()

        valid = client.validate_webhook({"x-paystack-signature": signature}, body)
        forged = client.validate_webhook({"x-paystack-signature": "0" * 128}, body)
        missing = client.validate_webhook({}, body)

        assert valid == {"is_valid": True, "event": "charge.success", "data": {"reference": "PZL_REF"}}
        assert forged["is_valid"] is False
        assert missing["is_valid"] is False


class TestInitializePayment:

    def test_creates_pending_transaction(self, db_session, initialized, draft_campaign, gateway, brand):
        transaction = db_session.query(Transaction).one()

        assert initialized["reference"] == transaction.reference
        assert transaction.reference.startswith("PZL_")
        assert transaction.amount == 18000
        assert transaction.status == TransactionStatus.PENDING
        assert gateway.initialize.call_args.kwargs["amount"] == 18000
        assert gateway.initialize.call_args.kwargs["email"] == brand.email

    def test_other_brands_campaign(self, db_session, make_user, draft_campaign, gateway):
        other = make_user(UserRole.BRAND)
        with pytest.raises(HTTPException) as exc_info:
            PaymentService.initialize_campaign_payment(db_session, other, draft_campaign.id, "premium", client=gateway)
        assert exc_info.value.status_code == 403

    def test_package_mismatch(self, db_session, brand, draft_campaign, gateway):
        with pytest.raises(HTTPException) as exc_info:
            PaymentService.initialize_campaign_payment(db_session, brand, draft_campaign.id, "basic", client=gateway)
        assert exc_info.value.status_code == 400

    def test_active_campaign_cannot_be_paid_again(self, db_session, brand, make_campaign, gateway):
        campaign = make_campaign()
        with pytest.raises(HTTPException) as exc_info:
            PaymentService.initialize_campaign_payment(db_session, brand, campaign.id, "basic", client=gateway)
        assert exc_info.value.status_code == 400

    def test_gateway_failure_marks_transaction_failed(self, db_session, brand, draft_campaign, gateway):
        gateway.initialize.side_effect = PaystackError("down")

        with pytest.raises(PaystackError):
            PaymentService.initialize_campaign_payment(db_session, brand, draft_campaign.id, "premium", client=gateway)

        assert db_session.query(Transaction).one().status == TransactionStatus.FAILED


class TestVerifyPayment:

    def test_success_activates_campaign(self, db_session, brand, draft_campaign, initialized, gateway):
        result = PaymentService.verify_payment(db_session, brand, initialized["reference"], NOW, client=gateway)

        assert result["success"] is True
        assert result["activated"] is True
        campaign = db_session.get(Campaign, draft_campaign.id)
        assert campaign.status == CampaignStatus.ACTIVE
        assert campaign.total_budget == 18000
        assert campaign.daily_allocation == 1285.71

    def test_repeat_verify_is_noop(self, db_session, brand, initialized, gateway):
        PaymentService.verify_payment(db_session, brand, initialized["reference"], NOW, client=gateway)
        result = PaymentService.verify_payment(db_session, brand, initialized["reference"], NOW, client=gateway)

        assert result["success"] is True
        assert result["activated"] is False
        assert gateway.verify.call_count == 1

    def test_gateway_reports_failure(self, db_session, brand, draft_campaign, initialized, gateway):
        gateway.verify.return_value = {"success": False, "status": "failed", "reference": "x",
                                       "amount": 0, "raw": {"status": "failed"}}

        result = PaymentService.verify_payment(db_session, brand, initialized["reference"], NOW, client=gateway)

        assert result["success"] is False
        assert db_session.query(Transaction).one().status == TransactionStatus.FAILED
        assert db_session.get(Campaign, draft_campaign.id).status == CampaignStatus.DRAFT

    def test_amount_mismatch_refused(self, db_session, brand, draft_campaign, initialized, gateway):
        gateway.verify.return_value = {"success": True, "status": "success", "reference": "x",
                                       "amount": 100, "raw": {"status": "success", "amount": 10000}}

        result = PaymentService.verify_payment(db_session, brand, initialized["reference"], NOW, client=gateway)

        assert result["success"] is False
        assert result["status"] == "amount_mismatch"
        assert db_session.query(Transaction).one().status == TransactionStatus.FAILED
        campaign = db_session.get(Campaign, draft_campaign.id)
        assert campaign.status == CampaignStatus.DRAFT
        assert campaign.total_budget == 0

    def test_unknown_reference(self, db_session, brand, gateway):
        with pytest.raises(HTTPException) as exc_info:
            PaymentService.verify_payment(db_session, brand, "PZL_NOPE", NOW, client=gateway)
        assert exc_info.value.status_code == 404

    def test_other_brand_cannot_verify(self, db_session, gamer, initialized, gateway):
        with pytest.raises(HTTPException) as exc_info:
            PaymentService.verify_payment(db_session, gamer, initialized["reference"], NOW, client=gateway)
        assert exc_info.value.status_code == 403


class TestWebhook:

    def test_charge_success_activates(self, db_session, draft_campaign, initialized):
        handled = PaymentService.handle_webhook(
            db_session, "charge.success", {"reference": initialized["reference"], "amount": 1800000}, NOW
        )

        assert handled is True
        assert db_session.get(Campaign, draft_campaign.id).status == CampaignStatus.ACTIVE

    def test_webhook_after_verify_does_not_refund_ledger(self, db_session, brand, draft_campaign,
                                                         initialized, gateway):
        PaymentService.verify_payment(db_session, brand, initialized["reference"], NOW, client=gateway)
        campaign = db_session.get(Campaign, draft_campaign.id)
        BudgetService.debit(db_session, campaign, 1285.71)
        db_session.commit()

        PaymentService.handle_webhook(db_session, "charge.success",
                                      {"reference": initialized["reference"], "amount": 1800000}, NOW)

        campaign = db_session.get(Campaign, draft_campaign.id)
        assert campaign.budget_used == 1285.71
        assert campaign.budget_remaining == 16714.29

    def test_amount_mismatch_refused(self, db_session, draft_campaign, initialized):
        handled = PaymentService.handle_webhook(
            db_session, "charge.success", {"reference": initialized["reference"], "amount": 700000}, NOW
        )

        assert handled is False
        assert db_session.query(Transaction).one().status == TransactionStatus.FAILED
        assert db_session.get(Campaign, draft_campaign.id).status == CampaignStatus.DRAFT

    def test_missing_amount_refused(self, db_session, draft_campaign, initialized):
        handled = PaymentService.handle_webhook(
            db_session, "charge.success", {"reference": initialized["reference"]}, NOW
        )

        assert handled is False
        assert db_session.get(Campaign, draft_campaign.id).status == CampaignStatus.DRAFT

    def test_other_events_ignored(self, db_session, draft_campaign, initialized):
        handled = PaymentService.handle_webhook(
            db_session, "transfer.success", {"reference": initialized["reference"]}, NOW
        )

        assert handled is False
        assert db_session.get(Campaign, draft_campaign.id).status == CampaignStatus.DRAFT

    def test_unknown_reference(self, db_session):
        assert PaymentService.handle_webhook(db_session, "charge.success", {"reference": "PZL_NOPE"}, NOW) is False

    def test_transaction_history(self, db_session, brand, initialized):
        history = PaymentService.get_transaction_history(db_session, brand.id)

        assert [t.reference for t in history] == [initialized["reference"]]
