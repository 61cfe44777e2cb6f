"""Pytest fixtures for testing"""

import pytest
from typing import Any, Callable, Dict, List, Optional
from fastapi.testclient import TestClient
from cohousing_gateway.api.main import create_app
from cohousing_gateway.domain.models import (
    CreditCheckStatus,
    EligibilityStatus,
    EmploymentType,
    Member,
    OrgStatus,
    UnitSize,
)


@pytest.fixture
def make_member() -> Callable[..., Member]:
    """Factory for eligible members; override status to make them ineligible"""

    def _make(
        member_id: str,
        income: float,
        obligations: float = 0.0,
        employment: EmploymentType = EmploymentType.SALARIED,
        unit: Optional[UnitSize] = None,
        debt: float = 0.0,
        org_status: OrgStatus = OrgStatus.APPROVED,
        credit_check: CreditCheckStatus = CreditCheckStatus.COMPLETE,
    ) -> Member:
        return Member(
            id=member_id,
            display_name=member_id.title(),
            monthly_income=income,
            monthly_obligations=obligations,
            total_debt=debt,
            employment_type=employment,
            unit_size_preference=unit,
            eligibility=EligibilityStatus(org_status=org_status, credit_check=credit_check),
        )

    return _make


@pytest.fixture
def scenario_members(make_member) -> List[Member]:
    """
    Three-member group used across tests.

    Income $6000/$4000/$5000, obligations $500/$300/$200, cost $3000:
    combined income $15000, obligations $1000, group DTI 0.2667.
    """
    return [
        make_member("ana", 6000, 500, EmploymentType.SALARIED, UnitSize.STUDIO, debt=12000),
        make_member("ben", 4000, 300, EmploymentType.FREELANCE, UnitSize.ONE_BR, debt=8000),
        make_member("cho", 5000, 200, EmploymentType.GOVERNMENT, UnitSize.TWO_BR, debt=5000),
    ]


@pytest.fixture
def member_payload() -> Callable[..., Dict[str, Any]]:
    """Factory for member JSON as the host system sends it"""

    def _payload(
        member_id: str,
        income: float,
        obligations: float = 0.0,
        employment: str = "salaried",
        unit: Optional[str] = None,
        org_status: str = "approved",
        credit_check: str = "complete",
    ) -> Dict[str, Any]:
        payload = {
            "id": member_id,
            "displayName": member_id.title(),
            "monthlyIncome": income,
            "monthlyObligations": obligations,
            "totalDebt": 0,
            "employmentType": employment,
            "eligibilityStatus": {"orgStatus": org_status, "creditCheck": credit_check},
        }
        if unit is not None:
            payload["unitSizePreference"] = unit
        return payload

    return _payload


@pytest.fixture
def scenario_payload(member_payload) -> Dict[str, Any]:
    """Request body for the three-member scenario"""
    return {
        "members": [
            member_payload("ana", 6000, 500, "salaried", "studio"),
            member_payload("ben", 4000, 300, "freelance", "1br"),
            member_payload("cho", 5000, 200, "government", "2br"),
        ],
        "estimatedMonthlyCost": 3000,
    }


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with a fresh application (and cache)"""
    app = create_app()
    return TestClient(app)
