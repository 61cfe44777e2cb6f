"""Group metrics engine - combined income, DTI, borrowing power and diversity"""

import logging
from typing import List, Optional, Sequence
from cohousing_gateway.domain.models import (
    ComputationError,
    DtiClassification,
    ErrorKind,
    GroupMetrics,
    Member,
)
from cohousing_gateway.domain.policy import (
    DEFAULT_ANNUAL_RATE,
    DTI_ACCEPTABLE_MAX,
    DTI_HEALTHY_MAX,
    LOAN_TERM_MONTHS,
    MAX_PAYMENT_DTI,
)
from cohousing_gateway.domain.resilience import analyze_resilience
from cohousing_gateway.utils.rounding import round_money, safe_ratio

logger = logging.getLogger(__name__)


def classify_dti(dti: float) -> DtiClassification:
    """
    Map a (rounded) group DTI to its band.

    Bands are inclusive at their lower edge:
    - below 0.36:        healthy
    - 0.36 through 0.43: acceptable
    - above 0.43:        risky
    """
    if dti < DTI_HEALTHY_MAX:
        return DtiClassification.HEALTHY
    elif dti <= DTI_ACCEPTABLE_MAX:
        return DtiClassification.ACCEPTABLE
    else:
        return DtiClassification.RISKY


def payment_to_loan_amount(
    monthly_payment: float,
    annual_rate: float = DEFAULT_ANNUAL_RATE,
    term_months: int = LOAN_TERM_MONTHS,
) -> float:
    """
    Principal that a level monthly payment can amortize.

    L = P * ((1 + r)^n - 1) / (r * (1 + r)^n), with r = annual_rate / 12.
    A zero rate degenerates to P * n.
    """
    if monthly_payment <= 0 or term_months <= 0:
        return 0.0

    r = annual_rate / 12
    if abs(r) < 1e-12:
        return monthly_payment * term_months

    factor = (1 + r) ** term_months
    return monthly_payment * (factor - 1) / (r * factor)


def income_diversity_score(members: Sequence[Member]) -> float:
    """
    Distinct employment categories divided by member count, 2 decimals.

    Only counts categories: two salaried members with very different risk
    profiles still look identical here.
    """
    if not members:
        return 0.0
    distinct = len({m.employment_type for m in members})
    return round(distinct / len(members), 2)


def compute_group_metrics(
    eligible: List[Member],
    monthly_cost: float,
    annual_rate: Optional[float] = None,
) -> GroupMetrics | ComputationError:
    """
    Compute combined metrics for an already-filtered member list.

    Returns ComputationError(InsufficientMembers) for fewer than two members;
    group-level ratios are undefined for a single contributor.
    """
    if len(eligible) < 2:
        return ComputationError(
            kind=ErrorKind.INSUFFICIENT_MEMBERS,
            message="At least 2 approved members with completed credit checks are required",
        )

    rate = DEFAULT_ANNUAL_RATE if annual_rate is None else annual_rate

    combined_income = sum(m.monthly_income for m in eligible)
    combined_obligations = sum(m.monthly_obligations for m in eligible)
    combined_debt = sum(m.total_debt for m in eligible)

    # Group DTI = (existing obligations + proposed housing cost) / income
    group_dti = safe_ratio(combined_obligations + monthly_cost, combined_income)
    dti_classification = classify_dti(group_dti) if group_dti is not None else None

    max_monthly_payment = max(0.0, combined_income * MAX_PAYMENT_DTI - combined_obligations)
    estimated_loan_amount = payment_to_loan_amount(max_monthly_payment, rate)

    warnings = (ErrorKind.DEGENERATE_INCOME,) if combined_income <= 0 else ()

    resilience_matrix = analyze_resilience(eligible, combined_income, combined_obligations, monthly_cost)

    logger.debug(
        "Group metrics computed",
        extra={"member_count": len(eligible), "group_dti": group_dti},
    )

    return GroupMetrics(
        combined_income=round_money(combined_income),
        combined_obligations=round_money(combined_obligations),
        combined_debt=round_money(combined_debt),
        group_dti=group_dti,
        dti_classification=dti_classification,
        max_monthly_payment=round_money(max_monthly_payment),
        estimated_loan_amount=round_money(estimated_loan_amount),
        income_diversity_score=income_diversity_score(eligible),
        member_count=len(eligible),
        resilience_matrix=tuple(resilience_matrix),
        warnings=warnings,
    )
