"""
Campaign pricing and duration calculations

A package is priced per week of campaign time. Longer campaigns get a
multi-week discount, and the paid amount is spread evenly over the
campaign's days to give its daily contribution to the prize pool.
"""

import math
from dataclasses import dataclass, asdict
from typing import Dict, Any

from config import settings
from app.models.campaign import PackageType
from app.utils.money import round2, round_half_up

HOURS_PER_WEEK = 168
HOURS_PER_DAY = 24


@dataclass
class CampaignQuote:
    """Price breakdown for a campaign duration and package"""
    package_type: str
    time_limit_hours: int
    base_price: float
    weeks: int
    days: int
    allocated_budget: float
    multiplier: float
    charged_amount: int
    daily_allocation: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def base_price_for(package_type: str) -> float:
    """Weekly price of a package"""
    if package_type == PackageType.BASIC:
        return settings.BASIC_PACKAGE_PRICE
    if package_type == PackageType.PREMIUM:
        return settings.PREMIUM_PACKAGE_PRICE
    raise ValueError(f"Unknown package type: {package_type}")


def calculate_weeks(hours: float) -> int:
    return max(1, math.ceil(hours / HOURS_PER_WEEK))


def calculate_days(hours: float) -> int:
    return max(1, math.ceil(hours / HOURS_PER_DAY))


def discount_multiplier(weeks: int) -> float:
    """Multiplier applied to the weekly base price.

    One week is charged at exactly 1.0. Beyond that the multiplier is
    0.9 per week plus 10**-weeks, floored to one decimal.
    """
    if weeks <= 1:
        return 1.0
    return math.floor((0.9 * weeks + 10 ** -weeks) * 10) / 10


def calculate_charged_amount(base_price: float, weeks: int) -> int:
    return round_half_up(base_price * discount_multiplier(weeks))


def calculate_daily_allocation(total_budget: float, hours: float) -> float:
    """Even per-day share of a paid budget"""
    return round2(total_budget / calculate_days(hours))


class PricingService:
    """Pricing for campaign packages"""

    @staticmethod
    def quote_campaign(time_limit_hours: int, package_type: str) -> CampaignQuote:
        """Price a campaign of the given length"""
        if time_limit_hours is None or time_limit_hours <= 0:
            raise ValueError("Time limit must be a positive number of hours")

        base_price = base_price_for(package_type)
        weeks = calculate_weeks(time_limit_hours)
        charged_amount = calculate_charged_amount(base_price, weeks)

        return CampaignQuote(
            package_type=PackageType(package_type).value,
            time_limit_hours=time_limit_hours,
            base_price=base_price,
            weeks=weeks,
            days=calculate_days(time_limit_hours),
            allocated_budget=base_price * weeks,
            multiplier=discount_multiplier(weeks),
            charged_amount=charged_amount,
            daily_allocation=calculate_daily_allocation(charged_amount, time_limit_hours)
        )
