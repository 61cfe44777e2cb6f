"""Validation and scoring of organizer-entered (custom) contribution splits"""

import logging
from dataclasses import replace
from typing import Dict, List, Sequence, Tuple
from cohousing_gateway.domain.contributions import member_breakdown
from cohousing_gateway.domain.exceptions import InvalidAssignmentError
from cohousing_gateway.domain.models import (
    AssignmentIssue,
    BalanceStatus,
    ContributionModel,
    ContributionModelType,
    CustomAssignment,
    Member,
)
from cohousing_gateway.domain.policy import MAX_MONTHLY_AMOUNT
from cohousing_gateway.utils.rounding import is_finite_number, round_money

logger = logging.getLogger(__name__)

EXCLUDED_MEMBERS_NOTE = (
    "Custom model is not recalculated for member toggles. "
    "Excluded members' amounts remain unassigned."
)

NOT_ELIGIBLE_REASON = "not an eligible member"


def _check_assignment(assignment: CustomAssignment) -> Tuple[str, float]:
    """Return (member_id, payment) or raise InvalidAssignmentError"""
    member_id = assignment.member_id
    if member_id is None or not str(member_id).strip():
        raise InvalidAssignmentError("missing member id")

    payment = assignment.payment_amount
    if not is_finite_number(payment):
        raise InvalidAssignmentError("payment amount must be a number")
    if payment < 0:
        raise InvalidAssignmentError("payment amount must be non-negative")
    if payment > MAX_MONTHLY_AMOUNT:
        raise InvalidAssignmentError("payment amount is out of range")

    return str(member_id), float(payment)


def balance_status(total_assigned: float, total_cost: float) -> BalanceStatus:
    """Balanced within a cent, otherwise report the overage or shortfall"""
    diff = round_money(total_assigned - total_cost)
    if abs(diff) < 0.01:
        return BalanceStatus(balanced=True)
    elif diff > 0:
        return BalanceStatus(balanced=False, overage=diff)
    else:
        return BalanceStatus(balanced=False, shortfall=round_money(-diff))


def validate_custom_split(
    eligible: Sequence[Member],
    assignments: Sequence[CustomAssignment],
    total_cost: float,
) -> ContributionModel:
    """
    Score a manual split against the monthly cost.

    Rules:
    - Each entry is checked on its own; bad entries become issues and are
      skipped, the rest of the batch is still scored
    - A repeated member id is an issue; the first entry wins
    - Eligible members without an entry pay 0 but still get affordability figures
    - Entries for ids outside the eligible set count toward the assigned total
      and are reported so the organizer can fix them

    The split is never rebalanced here; an imbalance is the result.
    """
    issues: List[AssignmentIssue] = []
    payments: Dict[str, float] = {}
    first_index: Dict[str, int] = {}

    for index, assignment in enumerate(assignments):
        try:
            member_id, payment = _check_assignment(assignment)
        except InvalidAssignmentError as e:
            raw_id = assignment.member_id
            issues.append(AssignmentIssue(index=index, member_id=str(raw_id) if raw_id is not None else None, reason=str(e)))
            continue

        if member_id in payments:
            issues.append(AssignmentIssue(index=index, member_id=member_id, reason="duplicate member id"))
            continue

        payments[member_id] = payment
        first_index[member_id] = index

    eligible_ids = {str(m.id) for m in eligible}
    for member_id, index in first_index.items():
        if member_id not in eligible_ids:
            issues.append(AssignmentIssue(index=index, member_id=member_id, reason=NOT_ELIGIBLE_REASON))

    status = balance_status(sum(payments.values()), total_cost)

    if issues:
        logger.debug("Custom split has invalid entries", extra={"issue_count": len(issues)})

    return ContributionModel(
        type=ContributionModelType.CUSTOM,
        members=tuple(member_breakdown(m, payments.get(str(m.id), 0.0)) for m in eligible),
        balance_status=status,
        issues=tuple(sorted(issues, key=lambda i: i.index)),
    )


def echo_custom_model(model: ContributionModel) -> ContributionModel:
    """Return a custom model unchanged apart from the member-toggle note"""
    return replace(model, note=EXCLUDED_MEMBERS_NOTE)
