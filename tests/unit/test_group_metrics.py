"""Unit tests for group metrics: DTI, borrowing power, diversity"""

import pytest
from cohousing_gateway.domain.group_metrics import (
    classify_dti,
    compute_group_metrics,
    income_diversity_score,
    payment_to_loan_amount,
)
from cohousing_gateway.domain.models import (
    ComputationError,
    DtiClassification,
    EmploymentType,
    ErrorKind,
    GroupMetrics,
)


def test_scenario_combined_figures(scenario_members):
    """3 members, $15000 income, $1000 obligations, $3000 cost"""
    metrics = compute_group_metrics(scenario_members, 3000)

    assert isinstance(metrics, GroupMetrics)
    assert metrics.combined_income == 15000
    assert metrics.combined_obligations == 1000
    assert metrics.combined_debt == 25000
    assert metrics.group_dti == 0.2667  # 4000 / 15000
    assert metrics.dti_classification == DtiClassification.HEALTHY
    assert metrics.max_monthly_payment == 5450  # 15000 * 0.43 - 1000
    assert metrics.member_count == 3
    assert metrics.income_diversity_score == 1.0
    assert metrics.warnings == ()


def test_scenario_estimated_loan_amount(scenario_members):
    """$5450/month at 7% over 30 years amortizes about $819,176"""
    metrics = compute_group_metrics(scenario_members, 3000)

    assert metrics.estimated_loan_amount == pytest.approx(819_176, abs=2.0)


def test_dti_classification_boundaries():
    """Bands are inclusive at their lower edge"""
    assert classify_dti(0.2) == DtiClassification.HEALTHY
    assert classify_dti(0.3599) == DtiClassification.HEALTHY
    assert classify_dti(0.36) == DtiClassification.ACCEPTABLE
    assert classify_dti(0.43) == DtiClassification.ACCEPTABLE
    assert classify_dti(0.4301) == DtiClassification.RISKY
    assert classify_dti(1.5) == DtiClassification.RISKY


def test_group_dti_exactly_at_lending_wall_is_acceptable(make_member):
    members = [make_member("ana", 5000), make_member("ben", 5000)]

    metrics = compute_group_metrics(members, 4300)

    assert metrics.group_dti == 0.43
    assert metrics.dti_classification == DtiClassification.ACCEPTABLE


def test_group_dti_rounded_before_classification(make_member):
    """0.43004 rounds to 0.43 and stays acceptable"""
    members = [make_member("ana", 50000), make_member("ben", 50000)]

    metrics = compute_group_metrics(members, 43004)

    assert metrics.group_dti == 0.43
    assert metrics.dti_classification == DtiClassification.ACCEPTABLE


def test_group_dti_above_wall_is_risky(make_member):
    members = [make_member("ana", 5000, 1000), make_member("ben", 5000, 1000)]

    metrics = compute_group_metrics(members, 3000)

    assert metrics.group_dti == 0.5
    assert metrics.dti_classification == DtiClassification.RISKY


def test_insufficient_members_returns_error(make_member):
    """Fewer than two members is reported, not raised"""
    result = compute_group_metrics([make_member("ana", 8000)], 2000)

    assert isinstance(result, ComputationError)
    assert result.error is True
    assert result.kind == ErrorKind.INSUFFICIENT_MEMBERS
    assert "At least 2" in result.message

    assert compute_group_metrics([], 2000).kind == ErrorKind.INSUFFICIENT_MEMBERS


def test_zero_combined_income_yields_nulls(make_member):
    members = [make_member("ana", 0, 100), make_member("ben", 0, 50)]

    metrics = compute_group_metrics(members, 2000)

    assert metrics.group_dti is None
    assert metrics.dti_classification is None
    assert metrics.max_monthly_payment == 0
    assert metrics.estimated_loan_amount == 0
    assert metrics.warnings == (ErrorKind.DEGENERATE_INCOME,)
    assert all(entry.dti_without is None for entry in metrics.resilience_matrix)


def test_max_monthly_payment_floors_at_zero(make_member):
    """Obligations above 43% of income leave no borrowing power"""
    members = [make_member("ana", 1000, 800), make_member("ben", 1000, 800)]

    metrics = compute_group_metrics(members, 500)

    assert metrics.max_monthly_payment == 0
    assert metrics.estimated_loan_amount == 0


def test_custom_annual_rate_changes_loan_amount(scenario_members):
    low = compute_group_metrics(scenario_members, 3000, annual_rate=0.05)
    default = compute_group_metrics(scenario_members, 3000)

    assert low.estimated_loan_amount > default.estimated_loan_amount


def test_payment_to_loan_amount_formula():
    """$665.30/month at 7% for 30 years is a $100,000 loan"""
    assert payment_to_loan_amount(665.3024951, 0.07) == pytest.approx(100_000, rel=1e-5)


def test_payment_to_loan_amount_zero_payment():
    assert payment_to_loan_amount(0, 0.07) == 0.0


def test_payment_to_loan_amount_zero_rate():
    """Without interest the principal is just payment * term"""
    assert payment_to_loan_amount(1000, 0.0) == 360_000


def test_income_diversity_counts_distinct_categories(make_member):
    members = [
        make_member("ana", 5000, employment=EmploymentType.SALARIED),
        make_member("ben", 5000, employment=EmploymentType.SALARIED),
        make_member("cho", 5000, employment=EmploymentType.GIG),
    ]

    assert income_diversity_score(members) == 0.67  # 2 / 3


def test_income_diversity_empty_group():
    assert income_diversity_score([]) == 0.0
