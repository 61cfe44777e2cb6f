"""Eligibility filtering shared by metrics and contribution models"""

from typing import Iterable, List, Optional
from cohousing_gateway.domain.models import Member


def filter_eligible(members: Iterable[Member], exclude_ids: Optional[Iterable[str]] = None) -> List[Member]:
    """
    Keep approved members with a completed credit check, in input order.

    Ids in ``exclude_ids`` are dropped as well (compared as strings), which is
    how what-if simulations temporarily remove a member. An empty result is a
    valid answer; callers decide which error kind it maps to.
    """
    excluded = {str(member_id) for member_id in (exclude_ids or ())}
    return [m for m in members if m.eligibility.is_eligible and str(m.id) not in excluded]
