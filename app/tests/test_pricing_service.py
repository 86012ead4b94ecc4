"""
Unit tests for campaign pricing
"""

import pytest

from app.services.pricing_service import (
    PricingService, calculate_weeks, calculate_days, discount_multiplier,
    calculate_charged_amount, calculate_daily_allocation, base_price_for
)


class TestDurations:
    """Weeks and days billed for a number of hours"""

    @pytest.mark.parametrize("hours,weeks", [(1, 1), (24, 1), (168, 1), (169, 2), (336, 2), (337, 3), (672, 4)])
    def test_weeks_round_up(self, hours, weeks):
        assert calculate_weeks(hours) == weeks

    @pytest.mark.parametrize("hours,days", [(1, 1), (24, 1), (25, 2), (48, 2), (336, 14)])
    def test_days_round_up(self, hours, days):
        assert calculate_days(hours) == days


class TestDiscountMultiplier:

    def test_single_week_is_exactly_one(self):
        assert discount_multiplier(1) == 1.0

    def test_two_weeks(self):
        assert discount_multiplier(2) == 1.8

    def test_three_weeks_does_not_lose_a_tenth(self):
        assert discount_multiplier(3) == 2.7

    def test_four_weeks(self):
        assert discount_multiplier(4) == 3.6

    def test_multiplier_bounded(self):
        for weeks in range(1, 53):
            multiplier = discount_multiplier(weeks)
            assert 0 < multiplier <= 0.9 * weeks + 1


class TestChargedAmount:

    def test_basic_two_weeks(self):
        assert calculate_charged_amount(7000, 2) == 12600

    def test_premium_single_week(self):
        assert calculate_charged_amount(10000, 1) == 10000

    def test_daily_allocation_rounded_to_kobo(self):
        assert calculate_daily_allocation(18000, 336) == 1285.71

    def test_unknown_package_rejected(self):
        with pytest.raises(ValueError):
            base_price_for("gold")


class TestQuoteCampaign:

    def test_basic_two_day_campaign(self):
        quote = PricingService.quote_campaign(48, "basic")

        assert quote.weeks == 1
        assert quote.days == 2
        assert quote.multiplier == 1.0
        assert quote.charged_amount == 7000
        assert quote.daily_allocation == 3500.00
        assert quote.allocated_budget == 7000

    def test_premium_two_week_campaign(self):
        quote = PricingService.quote_campaign(336, "premium")

        assert quote.weeks == 2
        assert quote.multiplier == 1.8
        assert quote.charged_amount == 18000
        assert quote.days == 14
        assert quote.daily_allocation == 1285.71
        # Reference figure only, never charged
        assert quote.allocated_budget == 20000

    def test_non_positive_hours_rejected(self):
        with pytest.raises(ValueError):
            PricingService.quote_campaign(0, "basic")

    def test_quote_serializes(self):
        data = PricingService.quote_campaign(24, "premium").to_dict()
        assert data["package_type"] == "premium"
        assert data["charged_amount"] == 10000
