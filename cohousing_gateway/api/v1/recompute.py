"""POST /v1/groups/{group_id}/recompute - Schedule a fresh evaluation"""

import logging
from fastapi import APIRouter, BackgroundTasks, Depends, Request

from cohousing_gateway.api.v1.schemas import RecomputeAccepted, RecomputeRequest
from cohousing_gateway.api.dependencies import get_hybrid_equal_ratio, get_recompute_worker, get_request_id
from cohousing_gateway.config import settings
from cohousing_gateway.infrastructure.dispatch import RecomputeTask, RecomputeWorker

router = APIRouter()


@router.post("/groups/{group_id}/recompute", response_model=RecomputeAccepted, status_code=202)
async def schedule_recompute(
    group_id: str,
    request_body: RecomputeRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    worker: RecomputeWorker = Depends(get_recompute_worker),
    hybrid_equal_ratio: float = Depends(get_hybrid_equal_ratio),
):
    """
    Accept a recompute trigger (member status change, finished credit check).

    Returns 202 immediately; the worker evaluates the snapshot in the
    background and publishes to the results sink. Newer triggers are not
    ordered against older ones - the sink keeps the last write.
    """
    task = RecomputeTask(
        group_id=group_id,
        members=request_body.domain_members(),
        estimated_monthly_cost=request_body.estimated_monthly_cost,
        reason=request_body.reason,
        annual_rate=request_body.annual_rate if request_body.annual_rate is not None else settings.default_annual_rate,
        hybrid_equal_ratio=hybrid_equal_ratio,
        custom_assignment=(
            [a.to_domain() for a in request_body.custom_assignment]
            if request_body.custom_assignment is not None
            else None
        ),
    )
    background_tasks.add_task(worker.run, task)

    logging.info(
        "Recompute scheduled",
        extra={
            "request_id": get_request_id(request),
            "task_id": task.task_id,
            "group_id": group_id,
            "reason": task.reason,
        },
    )
    return RecomputeAccepted(task_id=task.task_id, group_id=group_id)
