"""Domain models - pure Python dataclasses representing group affordability entities"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class OrgStatus(str, Enum):
    """Organizational review state of a member"""

    PENDING = "pending"
    APPROVED = "approved"
    FLAGGED = "flagged"
    INELIGIBLE = "ineligible"


class CreditCheckStatus(str, Enum):
    """Completion state of the member's credit pull"""

    PENDING = "pending"
    COMPLETE = "complete"
    FAILED = "failed"


class EmploymentType(str, Enum):
    SALARIED = "salaried"
    FREELANCE = "freelance"
    GOVERNMENT = "government"
    GIG = "gig"
    RETIRED = "retired"
    OTHER = "other"


class UnitSize(str, Enum):
    STUDIO = "studio"
    ONE_BR = "1br"
    TWO_BR = "2br"
    THREE_BR = "3br"


class DtiClassification(str, Enum):
    HEALTHY = "healthy"
    ACCEPTABLE = "acceptable"
    RISKY = "risky"


class ContributionModelType(str, Enum):
    EQUAL = "equal"
    PROPORTIONAL = "proportional"
    UNIT_BASED = "unit-based"
    HYBRID = "hybrid"
    CUSTOM = "custom"


class ErrorKind(str, Enum):
    """Structured error kinds reported across the computation boundary"""

    INSUFFICIENT_MEMBERS = "InsufficientMembers"
    NO_ELIGIBLE_MEMBERS = "NoEligibleMembers"
    INVALID_ASSIGNMENT = "InvalidAssignment"
    DEGENERATE_INCOME = "DegenerateIncome"


@dataclass(frozen=True)
class EligibilityStatus:
    """Approval state plus credit-check state; both must pass"""

    org_status: OrgStatus
    credit_check: CreditCheckStatus

    @property
    def is_eligible(self) -> bool:
        return self.org_status == OrgStatus.APPROVED and self.credit_check == CreditCheckStatus.COMPLETE


@dataclass(frozen=True)
class Member:
    """Group co-applicant snapshot (read-only to the core)"""

    id: str
    display_name: str
    monthly_income: float
    monthly_obligations: float
    eligibility: EligibilityStatus
    employment_type: EmploymentType = EmploymentType.OTHER
    unit_size_preference: Optional[UnitSize] = None
    total_debt: float = 0.0


@dataclass(frozen=True)
class CustomAssignment:
    """Organizer-entered payment for one member; not validated yet"""

    member_id: Any
    payment_amount: Any


@dataclass(frozen=True)
class ResilienceEntry:
    """What happens to group DTI if one member leaves"""

    member_id: str
    display_name: str
    dti_without: Optional[float]
    is_critical_dependency: bool


@dataclass(frozen=True)
class GroupMetrics:
    """Combined financial picture of the eligible members"""

    combined_income: float
    combined_obligations: float
    combined_debt: float
    group_dti: Optional[float]
    dti_classification: Optional[DtiClassification]
    max_monthly_payment: float
    estimated_loan_amount: float
    income_diversity_score: float
    member_count: int
    resilience_matrix: Tuple[ResilienceEntry, ...]
    warnings: Tuple[ErrorKind, ...] = ()


@dataclass(frozen=True)
class MemberContribution:
    """Single member's line in a contribution model"""

    member_id: str
    display_name: str
    payment_amount: float
    percentage_of_income: Optional[float]
    breathing_room: float
    exceeds_affordability: bool
    projected_dti: Optional[float]


@dataclass(frozen=True)
class BalanceStatus:
    """Whether a custom split covers the monthly cost"""

    balanced: bool
    overage: Optional[float] = None
    shortfall: Optional[float] = None


@dataclass(frozen=True)
class AssignmentIssue:
    """A custom assignment entry that was rejected or needs attention"""

    index: int
    member_id: Optional[str]
    reason: str
    kind: ErrorKind = ErrorKind.INVALID_ASSIGNMENT


@dataclass(frozen=True)
class ContributionModel:
    """Payment distribution across eligible members"""

    type: ContributionModelType
    members: Tuple[MemberContribution, ...]
    balance_status: Optional[BalanceStatus] = None
    issues: Tuple[AssignmentIssue, ...] = ()
    note: Optional[str] = None
    warnings: Tuple[ErrorKind, ...] = ()

    @property
    def total_payment(self) -> float:
        return round(sum(m.payment_amount for m in self.members), 2)


@dataclass(frozen=True)
class ComputationError:
    """Structured failure result; returned, never raised past the core"""

    kind: ErrorKind
    message: str
    error: bool = field(default=True, init=False)


ContributionSet = Dict[str, ContributionModel]
