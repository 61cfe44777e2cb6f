"""Pydantic schemas for API request/response validation"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from cohousing_gateway.domain.models import (
    AssignmentIssue,
    ComputationError,
    ContributionModel,
    CreditCheckStatus,
    CustomAssignment,
    DtiClassification,
    EligibilityStatus,
    EmploymentType,
    GroupMetrics,
    Member,
    OrgStatus,
    UnitSize,
)
from cohousing_gateway.domain.policy import MAX_MONTHLY_AMOUNT


class CamelModel(BaseModel):
    """Snake-case fields, camelCase on the wire; NaN and Infinity are rejected"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


# --- Requests ---


class EligibilitySchema(CamelModel):
    org_status: OrgStatus
    credit_check: CreditCheckStatus


class MemberSchema(CamelModel):
    """Member snapshot as supplied by the host system"""

    id: str = Field(..., min_length=1, description="Member identifier, unique within the group")
    display_name: str = ""
    monthly_income: float = Field(..., ge=0, le=MAX_MONTHLY_AMOUNT)
    monthly_obligations: float = Field(0.0, ge=0, le=MAX_MONTHLY_AMOUNT)
    total_debt: float = Field(0.0, ge=0, le=MAX_MONTHLY_AMOUNT)
    employment_type: EmploymentType = EmploymentType.OTHER
    unit_size_preference: Optional[UnitSize] = None
    eligibility_status: EligibilitySchema

    def to_domain(self) -> Member:
        return Member(
            id=self.id,
            display_name=self.display_name,
            monthly_income=self.monthly_income,
            monthly_obligations=self.monthly_obligations,
            total_debt=self.total_debt,
            employment_type=self.employment_type,
            unit_size_preference=self.unit_size_preference,
            eligibility=EligibilityStatus(
                org_status=self.eligibility_status.org_status,
                credit_check=self.eligibility_status.credit_check,
            ),
        )


class AssignmentSchema(CamelModel):
    """Custom split entry; validated per entry by the domain, not here"""

    member_id: Any = None
    payment_amount: Any = None

    def to_domain(self) -> CustomAssignment:
        return CustomAssignment(member_id=self.member_id, payment_amount=self.payment_amount)


class GroupSnapshot(CamelModel):
    members: List[MemberSchema]
    estimated_monthly_cost: float = Field(..., gt=0, le=MAX_MONTHLY_AMOUNT, description="Shared monthly housing cost")

    def domain_members(self) -> List[Member]:
        return [m.to_domain() for m in self.members]


class MetricsRequest(GroupSnapshot):
    """Request body for POST /v1/metrics"""

    annual_rate: Optional[float] = Field(None, ge=0, le=1)


class ContributionsRequest(GroupSnapshot):
    """Request body for POST /v1/contributions"""

    exclude_ids: List[str] = Field(default_factory=list)
    custom_assignment: Optional[List[AssignmentSchema]] = None

    def domain_assignments(self) -> Optional[List[CustomAssignment]]:
        if self.custom_assignment is None:
            return None
        return [a.to_domain() for a in self.custom_assignment]


class CustomSplitRequest(GroupSnapshot):
    """Request body for POST /v1/contributions/custom"""

    assignments: List[AssignmentSchema] = Field(..., min_length=1)


class RecomputeRequest(GroupSnapshot):
    """Request body for POST /v1/groups/{group_id}/recompute"""

    annual_rate: Optional[float] = Field(None, ge=0, le=1)
    custom_assignment: Optional[List[AssignmentSchema]] = None
    reason: str = Field("manual", min_length=1, description="What triggered the recompute")


# --- Responses ---


class ResilienceEntrySchema(CamelModel):
    member_id: str
    display_name: str
    dti_without: Optional[float]
    is_critical_dependency: bool


class GroupMetricsResponse(CamelModel):
    """Response for POST /v1/metrics"""

    combined_income: float
    combined_obligations: float
    combined_debt: float
    group_dti: Optional[float] = Field(alias="groupDTI")
    dti_classification: Optional[DtiClassification]
    max_monthly_payment: float
    estimated_loan_amount: float
    income_diversity_score: float
    member_count: int
    resilience_matrix: List[ResilienceEntrySchema]
    warnings: List[str] = Field(default_factory=list)


class MemberContributionSchema(CamelModel):
    member_id: str
    display_name: str
    payment_amount: float
    percentage_of_income: Optional[float]
    breathing_room: float
    exceeds_affordability: bool
    projected_dti: Optional[float] = Field(alias="projectedDTI")


class BalanceStatusSchema(CamelModel):
    """Serialized as {balanced}, {balanced, overage} or {balanced, shortfall}"""

    balanced: bool
    overage: Optional[float] = None
    shortfall: Optional[float] = None

    @model_serializer(mode="wrap")
    def _drop_absent(self, handler):
        return {k: v for k, v in handler(self).items() if v is not None}


class AssignmentIssueSchema(CamelModel):
    index: int
    member_id: Optional[str]
    reason: str
    kind: str


class ContributionModelSchema(CamelModel):
    type: str
    members: List[MemberContributionSchema]
    balance_status: Optional[BalanceStatusSchema] = None
    issues: List[AssignmentIssueSchema] = Field(default_factory=list)
    note: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class ErrorResponse(CamelModel):
    """Structured computation failure"""

    error: bool = True
    kind: str
    message: str


class RecomputeAccepted(CamelModel):
    """Response for POST /v1/groups/{group_id}/recompute"""

    task_id: str
    group_id: str
    status: str = "scheduled"


# --- Domain -> schema ---


def metrics_response(metrics: GroupMetrics) -> GroupMetricsResponse:
    return GroupMetricsResponse(
        combined_income=metrics.combined_income,
        combined_obligations=metrics.combined_obligations,
        combined_debt=metrics.combined_debt,
        group_dti=metrics.group_dti,
        dti_classification=metrics.dti_classification,
        max_monthly_payment=metrics.max_monthly_payment,
        estimated_loan_amount=metrics.estimated_loan_amount,
        income_diversity_score=metrics.income_diversity_score,
        member_count=metrics.member_count,
        resilience_matrix=[
            ResilienceEntrySchema(
                member_id=entry.member_id,
                display_name=entry.display_name,
                dti_without=entry.dti_without,
                is_critical_dependency=entry.is_critical_dependency,
            )
            for entry in metrics.resilience_matrix
        ],
        warnings=[w.value for w in metrics.warnings],
    )


def _issue_schema(issue: AssignmentIssue) -> AssignmentIssueSchema:
    return AssignmentIssueSchema(
        index=issue.index,
        member_id=issue.member_id,
        reason=issue.reason,
        kind=issue.kind.value,
    )


def model_schema(model: ContributionModel) -> ContributionModelSchema:
    status = model.balance_status
    return ContributionModelSchema(
        type=model.type.value,
        members=[
            MemberContributionSchema(
                member_id=m.member_id,
                display_name=m.display_name,
                payment_amount=m.payment_amount,
                percentage_of_income=m.percentage_of_income,
                breathing_room=m.breathing_room,
                exceeds_affordability=m.exceeds_affordability,
                projected_dti=m.projected_dti,
            )
            for m in model.members
        ],
        balance_status=(
            BalanceStatusSchema(balanced=status.balanced, overage=status.overage, shortfall=status.shortfall)
            if status is not None
            else None
        ),
        issues=[_issue_schema(i) for i in model.issues],
        note=model.note,
        warnings=[w.value for w in model.warnings],
    )


def contributions_response(models: Dict[str, ContributionModel]) -> Dict[str, ContributionModelSchema]:
    return {name: model_schema(model) for name, model in models.items()}


def error_response(error: ComputationError) -> ErrorResponse:
    return ErrorResponse(kind=error.kind.value, message=error.message)


def render_result(result: Any) -> Any:
    """JSON wire form of any computation result, as published to the results sink"""
    if isinstance(result, ComputationError):
        return error_response(result).model_dump(mode="json", by_alias=True)
    if isinstance(result, dict):
        return {
            name: schema.model_dump(mode="json", by_alias=True)
            for name, schema in contributions_response(result).items()
        }
    return metrics_response(result).model_dump(mode="json", by_alias=True)
