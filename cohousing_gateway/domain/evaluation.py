"""
Computation service entry points.

Each call takes a full snapshot of the group's members and returns a
complete result or a ComputationError. Nothing is cached or carried between
calls, so an unchanged snapshot always produces an identical result.
"""

import logging
from typing import Iterable, Optional, Sequence
from cohousing_gateway.domain.contributions import MODEL_KEYS, compute_all_models
from cohousing_gateway.domain.custom_split import echo_custom_model, validate_custom_split
from cohousing_gateway.domain.eligibility import filter_eligible
from cohousing_gateway.domain.group_metrics import compute_group_metrics
from cohousing_gateway.domain.models import (
    ComputationError,
    ContributionModel,
    ContributionModelType,
    ContributionSet,
    CustomAssignment,
    ErrorKind,
    GroupMetrics,
    Member,
)
from cohousing_gateway.domain.policy import DEFAULT_HYBRID_EQUAL_RATIO

logger = logging.getLogger(__name__)


def evaluate_group_metrics(
    members: Iterable[Member],
    estimated_monthly_cost: float,
    annual_rate: Optional[float] = None,
) -> GroupMetrics | ComputationError:
    """Filter to eligible members and compute group metrics with resilience matrix"""
    return compute_group_metrics(filter_eligible(members), estimated_monthly_cost, annual_rate)


def evaluate_contributions(
    members: Sequence[Member],
    estimated_monthly_cost: float,
    exclude_ids: Optional[Iterable[str]] = None,
    custom_assignment: Optional[Sequence[CustomAssignment]] = None,
    hybrid_equal_ratio: float = DEFAULT_HYBRID_EQUAL_RATIO,
) -> ContributionSet | ComputationError:
    """
    Compute every contribution model for the eligible (and not excluded) members.

    The custom model is only present when a custom assignment is supplied.
    With exclusions it is scored against the full eligible set, as it was
    entered, and returned with a note instead of being redistributed.
    """
    exclude_ids = [str(member_id) for member_id in (exclude_ids or ())]
    eligible = filter_eligible(members, exclude_ids)

    result = compute_all_models(eligible, estimated_monthly_cost, hybrid_equal_ratio)
    if isinstance(result, ComputationError):
        logger.debug("No eligible members to split between", extra={"excluded_count": len(exclude_ids)})
        return result
    if custom_assignment is None:
        return result

    custom_key = MODEL_KEYS[ContributionModelType.CUSTOM]
    if exclude_ids:
        entered = validate_custom_split(filter_eligible(members), custom_assignment, estimated_monthly_cost)
        result[custom_key] = echo_custom_model(entered)
    else:
        result[custom_key] = validate_custom_split(eligible, custom_assignment, estimated_monthly_cost)

    return result


def evaluate_custom_split(
    members: Sequence[Member],
    estimated_monthly_cost: float,
    assignments: Sequence[CustomAssignment],
) -> ContributionModel | ComputationError:
    """Score one custom split; NoEligibleMembers when nobody is eligible"""
    eligible = filter_eligible(members)
    if not eligible:
        return ComputationError(kind=ErrorKind.NO_ELIGIBLE_MEMBERS, message="No eligible members found")
    return validate_custom_split(eligible, assignments, estimated_monthly_cost)
