"""Unit tests for recompute tasks and the worker"""

from cohousing_gateway.api.v1.schemas import render_result
from cohousing_gateway.domain.exceptions import ResultsSinkError
from cohousing_gateway.domain.models import CustomAssignment
from cohousing_gateway.infrastructure.dispatch import RecomputeTask, RecomputeWorker


class FakeSink:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.payloads = []

    async def publish(self, payload):
        if self.fail:
            raise ResultsSinkError("sink down")
        self.payloads.append(payload)


def test_task_gets_id_and_timestamp(scenario_members):
    task = RecomputeTask(group_id="g1", members=scenario_members, estimated_monthly_cost=3000, reason="member_approved")
    other = RecomputeTask(group_id="g1", members=scenario_members, estimated_monthly_cost=3000, reason="member_approved")

    assert task.task_id != other.task_id
    assert task.requested_at


def test_build_payload_renders_full_evaluation(scenario_members):
    task = RecomputeTask(
        group_id="g1",
        members=scenario_members,
        estimated_monthly_cost=3000,
        reason="credit_check_complete",
        custom_assignment=[CustomAssignment("ana", 3000)],
    )

    payload = RecomputeWorker(FakeSink(), render_result).build_payload(task)

    assert payload["groupId"] == "g1"
    assert payload["taskId"] == task.task_id
    assert payload["reason"] == "credit_check_complete"
    assert payload["metrics"]["groupDTI"] == 0.2667
    assert payload["metrics"]["dtiClassification"] == "healthy"
    assert [m["paymentAmount"] for m in payload["contributions"]["proportional"]["members"]] == [1200, 800, 1000]
    assert payload["contributions"]["custom"]["balanceStatus"] == {"balanced": True}


def test_build_payload_with_single_member_reports_error(scenario_members):
    task = RecomputeTask(group_id="g1", members=scenario_members[:1], estimated_monthly_cost=3000, reason="manual")

    payload = RecomputeWorker(FakeSink(), render_result).build_payload(task)

    assert payload["metrics"] == {
        "error": True,
        "kind": "InsufficientMembers",
        "message": "At least 2 approved members with completed credit checks are required",
    }
    assert payload["contributions"]["equal"]["members"][0]["paymentAmount"] == 3000


async def test_run_publishes_to_sink(scenario_members):
    sink = FakeSink()
    task = RecomputeTask(group_id="g1", members=scenario_members, estimated_monthly_cost=3000, reason="manual")

    assert await RecomputeWorker(sink, render_result).run(task) is True
    assert len(sink.payloads) == 1
    assert sink.payloads[0]["taskId"] == task.task_id


async def test_run_swallows_sink_failure(scenario_members):
    task = RecomputeTask(group_id="g1", members=scenario_members, estimated_monthly_cost=3000, reason="manual")

    assert await RecomputeWorker(FakeSink(fail=True), render_result).run(task) is False


def test_worker_uses_injected_renderer(scenario_members):
    task = RecomputeTask(group_id="g1", members=scenario_members, estimated_monthly_cost=3000, reason="manual")

    payload = RecomputeWorker(FakeSink(), render=lambda result: type(result).__name__).build_payload(task)

    assert payload["metrics"] == "GroupMetrics"
    assert payload["contributions"] == "dict"
