"""
Rounding helpers for Naira amounts
"""

import math
from decimal import Decimal, ROUND_HALF_UP


def round2(value: float) -> float:
    """Round to 2 decimal places, half away from zero"""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round_half_up(value: float) -> int:
    """Round to the nearest whole number with .5 going up"""
    return int(math.floor(value + 0.5))
