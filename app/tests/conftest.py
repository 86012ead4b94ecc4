"""
PyTest configuration and fixtures
"""

import os
import sys
from datetime import datetime, timedelta

import pytest

# Tests run against an in-memory SQLite database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_ENABLED"] = "false"
os.environ["PAYSTACK_SECRET_KEY"] = "sk_test_secret"

# Add the parent directory to the path so we can import modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from database import Base, SessionLocal, engine  # noqa: E402
import app.models  # noqa: E402,F401
from app.models.attempt import PuzzleAttempt  # noqa: E402
from app.models.campaign import Campaign, CampaignStatus, CampaignPaymentStatus  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402

NOW = datetime(2025, 3, 12, 9, 0, 0)  # a Wednesday


@pytest.fixture
def db_session():
    """Fresh schema and session per test"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_user(db_session):
    """Factory for persisted users"""
    counter = {"n": 0}

    def _make_user(role=UserRole.GAMER, **overrides):
        counter["n"] += 1
        fields = {
            "username": f"{role.value}{counter['n']}",
            "email": f"{role.value}{counter['n']}@example.com",
            "role": role.value,
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def brand(make_user):
    return make_user(UserRole.BRAND, company_name="Acme Drinks")


@pytest.fixture
def gamer(make_user):
    return make_user(UserRole.GAMER)


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def sample_questions():
    return [
        {"question": "What colour is the can?", "choices": ["Red", "Blue", "Green"], "correct_index": 1},
        {"question": "Which city?", "choices": ["Lagos", "Abuja"], "correct_index": 0},
        {"question": "How many flavours?", "choices": ["1", "2", "3"], "correct_index": 2},
    ]


@pytest.fixture
def make_campaign(db_session, brand, sample_questions):
    """Factory for campaigns; active ones start funded unless told otherwise"""

    def _make_campaign(active=True, package_type="basic", time_limit=48, total_budget=7000.0,
                       daily_allocation=3500.0, start_date=None, game_type="sliding_puzzle", **overrides):
        start = start_date or NOW - timedelta(hours=1)
        fields = {
            "brand_id": brand.id,
            "title": "Find the can",
            "game_type": game_type,
            "questions": sample_questions,
            "package_type": package_type,
            "time_limit": time_limit,
            "start_date": start,
            "end_date": start + timedelta(hours=time_limit),
        }
        if active:
            fields.update(
                status=CampaignStatus.ACTIVE.value,
                payment_status=CampaignPaymentStatus.PAID.value,
                total_budget=total_budget,
                daily_allocation=daily_allocation,
                budget_used=0.0,
                budget_remaining=total_budget,
            )
        else:
            fields.update(
                status=CampaignStatus.DRAFT.value,
                payment_status=CampaignPaymentStatus.UNPAID.value,
            )
        fields.update(overrides)

        campaign = Campaign(**fields)
        db_session.add(campaign)
        db_session.commit()
        db_session.refresh(campaign)
        return campaign

    return _make_campaign


@pytest.fixture
def record_solve(db_session, make_campaign):
    """Store a solve directly, one campaign per call"""

    def _record_solve(user, points, timestamp=NOW, first_time=True):
        campaign = make_campaign()
        attempt = PuzzleAttempt(
            user_id=user.id,
            campaign_id=campaign.id,
            time_taken=30000,
            moves_taken=25,
            solved=True,
            first_time_solved=first_time,
            quiz_score=3,
            answers=[1, 0, 2],
            points_earned=points if first_time else 0,
            timestamp=timestamp
        )
        db_session.add(attempt)
        db_session.commit()
        return attempt

    return _record_solve


# Pytest configuration
def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


def pytest_collection_modifyitems(config, items):
    """Modify test collection"""
    # Add unit marker to tests that don't have other markers
    for item in items:
        if not any(mark.name == 'integration' for mark in item.iter_markers()):
            item.add_marker(pytest.mark.unit)
