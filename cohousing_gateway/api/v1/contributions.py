"""POST /v1/contributions - Contribution split endpoints"""

import time
import logging
from typing import Dict
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from cohousing_gateway.api.v1.schemas import (
    ContributionModelSchema,
    ContributionsRequest,
    CustomSplitRequest,
    ErrorResponse,
    contributions_response,
    error_response,
    model_schema,
)
from cohousing_gateway.api.dependencies import get_hybrid_equal_ratio, get_request_id, get_result_cache
from cohousing_gateway.domain.evaluation import evaluate_contributions, evaluate_custom_split
from cohousing_gateway.domain.models import ComputationError
from cohousing_gateway.infrastructure.cache import ResultCache, snapshot_key
from cohousing_gateway.infrastructure.observability.logging import log_evaluation
from cohousing_gateway.infrastructure.observability.metrics import (
    evaluation_counter,
    record_contributions_evaluation,
    record_custom_balance,
)

router = APIRouter()


@router.post(
    "/contributions",
    response_model=Dict[str, ContributionModelSchema],
    responses={400: {"model": ErrorResponse}},
)
def compute_contributions(
    request_body: ContributionsRequest,
    request: Request,
    cache: ResultCache | None = Depends(get_result_cache),
    hybrid_equal_ratio: float = Depends(get_hybrid_equal_ratio),
):
    """
    Compute every contribution model for the eligible members.

    ``excludeIds`` simulates members leaving; the custom model (when a custom
    assignment is supplied) is then echoed with a note rather than
    redistributed.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    def compute():
        return evaluate_contributions(
            request_body.domain_members(),
            request_body.estimated_monthly_cost,
            exclude_ids=request_body.exclude_ids,
            custom_assignment=request_body.domain_assignments(),
            hybrid_equal_ratio=hybrid_equal_ratio,
        )

    try:
        if cache is not None:
            key = snapshot_key(
                "contributions",
                {**request_body.model_dump(mode="json"), "hybrid_equal_ratio": hybrid_equal_ratio},
            )
            result = cache.get_or_compute(key, compute, should_cache=lambda r: not isinstance(r, ComputationError))
        else:
            result = compute()
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_contributions_evaluation(result)
    duration_ms = (time.time() - start_time) * 1000

    if isinstance(result, ComputationError):
        log_evaluation(request_id, "contributions", result.kind.value, duration_ms, len(request_body.members))
        return JSONResponse(status_code=400, content=error_response(result).model_dump(by_alias=True))

    member_count = len(result["equal"].members)
    log_evaluation(
        request_id,
        "contributions",
        "ok",
        duration_ms,
        member_count,
        excluded_count=len(request_body.exclude_ids),
        models=sorted(result),
    )
    return contributions_response(result)


@router.post(
    "/contributions/custom",
    response_model=ContributionModelSchema,
    responses={400: {"model": ErrorResponse}},
)
def validate_custom_contributions(request_body: CustomSplitRequest, request: Request):
    """
    Validate and score an organizer-entered split.

    Bad entries are reported per entry in ``issues``; the remaining entries are
    still scored and the balance (overage / shortfall) is returned.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    result = evaluate_custom_split(
        request_body.domain_members(),
        request_body.estimated_monthly_cost,
        [a.to_domain() for a in request_body.assignments],
    )
    duration_ms = (time.time() - start_time) * 1000

    if isinstance(result, ComputationError):
        evaluation_counter.labels(kind="custom", outcome=result.kind.value).inc()
        log_evaluation(request_id, "custom", result.kind.value, duration_ms, len(request_body.members))
        return JSONResponse(status_code=400, content=error_response(result).model_dump(by_alias=True))

    evaluation_counter.labels(kind="custom", outcome="ok").inc()
    record_custom_balance(result)
    log_evaluation(
        request_id,
        "custom",
        "ok",
        duration_ms,
        len(result.members),
        balanced=result.balance_status.balanced,
        issue_count=len(result.issues),
    )
    return model_schema(result)
