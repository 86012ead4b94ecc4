"""
Basic unit tests for Puzzle Rewards Backend
"""

from sqlalchemy import inspect

from config import settings
from database import DatabaseManager, build_engine, engine
from app.utils.money import round2, round_half_up


def test_settings_configuration():
    """Test that settings are properly configured"""
    assert settings.APP_NAME == "Puzzle Rewards"
    assert settings.CURRENCY == "NGN"
    assert settings.GAMER_SHARE_PERCENT == 70
    assert settings.PAYOUT_POSITIONS == 10


def test_package_prices():
    assert settings.BASIC_PACKAGE_PRICE == 7000
    assert settings.PREMIUM_PACKAGE_PRICE == 10000
    assert settings.LEGACY_BASIC_DAILY_RATE == 1000
    assert settings.LEGACY_PREMIUM_DAILY_RATE == 1428.57


def test_database_manager_exists():
    """Test that DatabaseManager class exists and has required methods"""
    assert hasattr(DatabaseManager, 'create_all_tables')
    assert hasattr(DatabaseManager, 'check_connection')


def test_database_connection(db_session):
    assert DatabaseManager.check_connection() is True


def test_sqlite_engine_uses_static_pool():
    engine = build_engine("sqlite://")
    assert engine.pool.__class__.__name__ == "StaticPool"


def test_round2_half_up():
    assert round2(2.675) == 2.68
    assert round2(1285.714285) == 1285.71
    assert round2(0.005) == 0.01


def test_round_half_up():
    assert round_half_up(35.5) == 36
    assert round_half_up(35.49) == 35
    assert round_half_up(36.0) == 36


def test_create_all_tables(db_session):
    DatabaseManager.create_all_tables()

    tables = set(inspect(engine).get_table_names())
    assert {"users", "campaigns", "transactions", "daily_prize_pools",
            "puzzle_attempts", "payouts", "leaderboards"} <= tables
