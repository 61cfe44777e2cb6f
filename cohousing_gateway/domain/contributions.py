"""Contribution models - how the monthly housing cost is split between members"""

import logging
from typing import Callable, Dict, List, Sequence, Tuple
from cohousing_gateway.domain.models import (
    ComputationError,
    ContributionModel,
    ContributionModelType,
    ContributionSet,
    ErrorKind,
    Member,
    MemberContribution,
)
from cohousing_gateway.domain.policy import (
    AFFORDABILITY_THRESHOLD,
    DEFAULT_HYBRID_EQUAL_RATIO,
    unit_weight,
)
from cohousing_gateway.utils.rounding import reconcile_cents, round_money, safe_ratio

logger = logging.getLogger(__name__)

# Response keys for each model type
MODEL_KEYS: Dict[ContributionModelType, str] = {
    ContributionModelType.EQUAL: "equal",
    ContributionModelType.PROPORTIONAL: "proportional",
    ContributionModelType.UNIT_BASED: "unitBased",
    ContributionModelType.HYBRID: "hybrid",
    ContributionModelType.CUSTOM: "custom",
}


def member_breakdown(member: Member, payment_amount: float) -> MemberContribution:
    """Affordability figures for one member paying ``payment_amount`` per month"""
    income = member.monthly_income
    obligations = member.monthly_obligations
    payment = round_money(payment_amount)

    pct = safe_ratio(payment, income)

    return MemberContribution(
        member_id=str(member.id),
        display_name=member.display_name,
        payment_amount=payment,
        percentage_of_income=pct,
        breathing_room=round_money(income - obligations - payment),
        exceeds_affordability=pct is not None and pct > AFFORDABILITY_THRESHOLD,
        projected_dti=safe_ratio(obligations + payment, income),
    )


def _income_shares(members: Sequence[Member]) -> Tuple[List[float], bool]:
    """Each member's fraction of combined income; all zero when nobody earns"""
    combined_income = sum(m.monthly_income for m in members)
    if combined_income <= 0:
        return [0.0] * len(members), True
    return [m.monthly_income / combined_income for m in members], False


def equal_split(members: Sequence[Member], total_cost: float) -> Tuple[List[float], bool]:
    payment = total_cost / len(members)
    return [payment] * len(members), False


def proportional_split(members: Sequence[Member], total_cost: float) -> Tuple[List[float], bool]:
    shares, degenerate = _income_shares(members)
    return [share * total_cost for share in shares], degenerate


def unit_weighted_split(members: Sequence[Member], total_cost: float) -> Tuple[List[float], bool]:
    weights = [unit_weight(m.unit_size_preference) for m in members]
    weight_sum = sum(weights)
    return [w / weight_sum * total_cost for w in weights], False


def hybrid_split(
    members: Sequence[Member],
    total_cost: float,
    equal_ratio: float = DEFAULT_HYBRID_EQUAL_RATIO,
) -> Tuple[List[float], bool]:
    """
    Blend of equal and income-proportional allocation.

    payment_i = equal_ratio * C / n + (1 - equal_ratio) * income_i / sum(income) * C
    """
    if not 0.0 <= equal_ratio <= 1.0:
        raise ValueError(f"Hybrid equal ratio must be within [0, 1], got {equal_ratio}")

    proportional_ratio = 1.0 - equal_ratio
    equal_per_member = equal_ratio * total_cost / len(members)
    shares, degenerate = _income_shares(members)
    return [equal_per_member + proportional_ratio * share * total_cost for share in shares], degenerate


_ALLOCATORS: Dict[ContributionModelType, Callable[..., Tuple[List[float], bool]]] = {
    ContributionModelType.EQUAL: equal_split,
    ContributionModelType.PROPORTIONAL: proportional_split,
    ContributionModelType.UNIT_BASED: unit_weighted_split,
    ContributionModelType.HYBRID: hybrid_split,
}


def compute_model(
    model_type: ContributionModelType,
    eligible: Sequence[Member],
    total_cost: float,
    hybrid_equal_ratio: float = DEFAULT_HYBRID_EQUAL_RATIO,
) -> ContributionModel | ComputationError:
    """
    Build one rule-based contribution model.

    Payments are whole cents and add up to exactly the total. When combined
    income is zero the income-driven models cannot allocate their
    proportional portion; those shares become 0 and the model
    carries a DegenerateIncome warning instead of dividing by zero.
    """
    if not eligible:
        return ComputationError(kind=ErrorKind.NO_ELIGIBLE_MEMBERS, message="No eligible members found")

    if model_type not in _ALLOCATORS:
        raise ValueError(f"{model_type.value} is not a rule-based model; validate custom splits separately")

    if model_type == ContributionModelType.HYBRID:
        amounts, degenerate = hybrid_split(eligible, total_cost, hybrid_equal_ratio)
    else:
        amounts, degenerate = _ALLOCATORS[model_type](eligible, total_cost)

    # Zero combined income leaves the proportional portion unallocated
    target = round_money(sum(amounts)) if degenerate else total_cost
    payments = reconcile_cents(amounts, target)

    return ContributionModel(
        type=model_type,
        members=tuple(member_breakdown(m, p) for m, p in zip(eligible, payments)),
        warnings=(ErrorKind.DEGENERATE_INCOME,) if degenerate else (),
    )


def compute_all_models(
    eligible: Sequence[Member],
    total_cost: float,
    hybrid_equal_ratio: float = DEFAULT_HYBRID_EQUAL_RATIO,
) -> ContributionSet | ComputationError:
    """Equal, proportional, unit-based and hybrid models keyed by response name"""
    if not eligible:
        return ComputationError(kind=ErrorKind.NO_ELIGIBLE_MEMBERS, message="No eligible members found")

    models: ContributionSet = {}
    for model_type in _ALLOCATORS:
        model = compute_model(model_type, eligible, total_cost, hybrid_equal_ratio)
        models[MODEL_KEYS[model_type]] = model

    logger.debug("Contribution models computed", extra={"member_count": len(eligible)})
    return models
