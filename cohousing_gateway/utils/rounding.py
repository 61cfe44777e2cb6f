"""Rounding helpers for money and ratios"""

import math
from typing import List, Sequence


def round_money(value: float) -> float:
    """Round to cents, normalizing -0.0 to 0.0"""
    return round(value, 2) + 0.0


def round_ratio(value: float) -> float:
    """Ratios (DTI, percentage of income) are compared at 4 decimal places"""
    return round(value, 4) + 0.0


def safe_ratio(numerator: float, denominator: float) -> float | None:
    """Rounded ratio, or None when the denominator is not positive"""
    if denominator <= 0:
        return None
    return round_ratio(numerator / denominator)


def is_finite_number(value: object) -> bool:
    """True for real, finite int/float values (bool excluded)"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def reconcile_cents(amounts: Sequence[float], total: float) -> List[float]:
    """
    Round amounts to whole cents that sum to exactly ``total`` (in cents).

    Amounts are floored to cents and the leftover cents go to the largest
    fractional remainders; earlier entries win ties. If the amounts overshoot
    the total, cents come off the smallest remainders instead.

    Example:
        $100.00 / 7 is 1428.57 cents each. Floors are 1428 (9996 in all),
        so the first four get +1 cent:
        [14.29, 14.29, 14.29, 14.29, 14.28, 14.28, 14.28] → $100.00
    """
    if not amounts:
        return []

    total_cents = round(total * 100)
    # 6dp absorbs float noise such as 1199.9999999999998 cents
    raw_cents = [round(a * 100, 6) for a in amounts]
    cents = [math.floor(c) for c in raw_cents]
    leftover = total_cents - sum(cents)

    order = sorted(range(len(cents)), key=lambda i: (-(raw_cents[i] - cents[i]), i))
    for k in range(max(leftover, 0)):
        cents[order[k % len(order)]] += 1
    for k in range(max(-leftover, 0)):
        cents[order[-1 - k % len(order)]] -= 1

    return [round_money(c / 100) for c in cents]
