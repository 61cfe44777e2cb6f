"""What-if analysis: group DTI with each member removed"""

from typing import List, Sequence
from cohousing_gateway.domain.models import Member, ResilienceEntry
from cohousing_gateway.domain.policy import RESILIENCE_THRESHOLD
from cohousing_gateway.utils.rounding import round_money, safe_ratio


def analyze_resilience(
    eligible: Sequence[Member],
    combined_income: float,
    combined_obligations: float,
    monthly_cost: float,
) -> List[ResilienceEntry]:
    """
    Simulate each member leaving the group, one at a time.

    A member is a critical dependency when their departure pushes the
    remaining group's DTI strictly above 0.43. Reaching exactly 0.43 is still
    inside the acceptable band and is not flagged. Only single departures are
    simulated, so the analysis stays O(n).
    """
    matrix = []
    for member in eligible:
        income_without = round_money(combined_income - member.monthly_income)
        obligations_without = round_money(combined_obligations - member.monthly_obligations)

        dti_without = safe_ratio(obligations_without + monthly_cost, income_without)

        matrix.append(
            ResilienceEntry(
                member_id=str(member.id),
                display_name=member.display_name,
                dti_without=dti_without,
                is_critical_dependency=dti_without is not None and dti_without > RESILIENCE_THRESHOLD,
            )
        )

    return matrix
