"""Lending and affordability policy constants"""

from typing import Dict, Optional
from cohousing_gateway.domain.models import UnitSize

# Housing payment above 30% of gross monthly income is flagged
AFFORDABILITY_THRESHOLD = 0.30

# Group DTI bands
DTI_HEALTHY_MAX = 0.36
DTI_ACCEPTABLE_MAX = 0.43

# Removing a member that pushes group DTI above this makes them a critical dependency
RESILIENCE_THRESHOLD = 0.43

# Share of combined income that may go to debt service (incl. housing)
MAX_PAYMENT_DTI = 0.43

LOAN_TERM_MONTHS = 30 * 12
DEFAULT_ANNUAL_RATE = 0.07

# Hybrid model: 50% equal split, 50% income proportional
DEFAULT_HYBRID_EQUAL_RATIO = 0.5

# Largest monthly amount (income, obligation, cost, payment) accepted; keeps group sums finite
MAX_MONTHLY_AMOUNT = 1e12

UNIT_SIZE_WEIGHTS: Dict[UnitSize, float] = {
    UnitSize.STUDIO: 0.7,
    UnitSize.ONE_BR: 1.0,
    UnitSize.TWO_BR: 1.3,
    UnitSize.THREE_BR: 1.6,
}

# Members with no stated preference are weighted like a one-bedroom
NO_PREFERENCE_WEIGHT = 1.0

_unweighted = set(UnitSize) - set(UNIT_SIZE_WEIGHTS)
if _unweighted:
    raise RuntimeError(f"UNIT_SIZE_WEIGHTS is missing weights for: {sorted(u.value for u in _unweighted)}")


def unit_weight(unit_size: Optional[UnitSize]) -> float:
    """Weight for the unit-based split; None means no stated preference"""
    if unit_size is None:
        return NO_PREFERENCE_WEIGHT
    return UNIT_SIZE_WEIGHTS[unit_size]
