"""Unit tests for single-member departure analysis"""

from cohousing_gateway.domain.group_metrics import compute_group_metrics
from cohousing_gateway.domain.resilience import analyze_resilience


def _matrix(members, cost):
    income = sum(m.monthly_income for m in members)
    obligations = sum(m.monthly_obligations for m in members)
    return {entry.member_id: entry for entry in analyze_resilience(members, income, obligations, cost)}


def test_removing_top_earner_within_limits(make_member):
    """A(9000/500), B(4000/300), C(5000/200), cost 3000"""
    members = [make_member("a", 9000, 500), make_member("b", 4000, 300), make_member("c", 5000, 200)]

    matrix = _matrix(members, 3000)

    # (300 + 200 + 3000) / (4000 + 5000)
    assert matrix["a"].dti_without == 0.3889
    assert matrix["a"].is_critical_dependency is False
    assert not any(entry.is_critical_dependency for entry in matrix.values())


def test_removing_top_earner_breaches_wall(make_member):
    members = [make_member("a", 10000, 500), make_member("b", 3000, 600), make_member("c", 3000, 400)]

    matrix = _matrix(members, 2500)

    # (600 + 400 + 2500) / 6000
    assert matrix["a"].dti_without == 0.5833
    assert matrix["a"].is_critical_dependency is True
    assert matrix["b"].is_critical_dependency is False
    assert matrix["c"].is_critical_dependency is False


def test_reaching_wall_exactly_is_not_critical(make_member):
    """Strictly above 0.43 is critical; 0.43 itself is not"""
    members = [make_member("a", 10000), make_member("b", 10000)]

    matrix = _matrix(members, 4300)

    assert matrix["a"].dti_without == 0.43
    assert matrix["a"].is_critical_dependency is False


def test_sole_earner_leaving_gives_null_dti(make_member):
    members = [make_member("a", 8000, 200), make_member("b", 0, 100)]

    matrix = _matrix(members, 2000)

    assert matrix["a"].dti_without is None
    assert matrix["a"].is_critical_dependency is False
    assert matrix["b"].dti_without == 0.275  # (200 + 2000) / 8000


def test_matrix_included_in_group_metrics(scenario_members):
    metrics = compute_group_metrics(scenario_members, 3000)

    assert [entry.member_id for entry in metrics.resilience_matrix] == ["ana", "ben", "cho"]
    by_id = {entry.member_id: entry for entry in metrics.resilience_matrix}
    assert by_id["ana"].dti_without == 0.3889  # (500 + 3000) / 9000
    assert by_id["ana"].is_critical_dependency is False
    assert by_id["ben"].dti_without == 0.3364  # (700 + 3000) / 11000
    assert by_id["cho"].dti_without == 0.38  # (800 + 3000) / 10000
    assert by_id["ana"].display_name == "Ana"
