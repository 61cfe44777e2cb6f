"""POST /v1/metrics - Group affordability metrics endpoint"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from cohousing_gateway.api.v1.schemas import (
    ErrorResponse,
    GroupMetricsResponse,
    MetricsRequest,
    error_response,
    metrics_response,
)
from cohousing_gateway.api.dependencies import get_request_id, get_result_cache
from cohousing_gateway.config import settings
from cohousing_gateway.domain.evaluation import evaluate_group_metrics
from cohousing_gateway.domain.models import ComputationError
from cohousing_gateway.infrastructure.cache import ResultCache, snapshot_key
from cohousing_gateway.infrastructure.observability.logging import log_evaluation
from cohousing_gateway.infrastructure.observability.metrics import record_metrics_evaluation

router = APIRouter()


@router.post(
    "/metrics",
    response_model=GroupMetricsResponse,
    responses={400: {"model": ErrorResponse}},
)
def compute_metrics(
    request_body: MetricsRequest,
    request: Request,
    cache: ResultCache | None = Depends(get_result_cache),
):
    """
    Compute combined group metrics for the eligible members.

    Flow:
    1. Resolve the annual rate (request or configured default)
    2. Serve from cache when this exact snapshot was evaluated recently
    3. Otherwise filter eligible members and compute metrics + resilience matrix
    4. Return metrics, or 400 with a structured error for < 2 eligible members
    """
    start_time = time.time()
    request_id = get_request_id(request)

    annual_rate = request_body.annual_rate
    if annual_rate is None:
        annual_rate = settings.default_annual_rate

    def compute():
        return evaluate_group_metrics(
            request_body.domain_members(),
            request_body.estimated_monthly_cost,
            annual_rate,
        )

    try:
        if cache is not None:
            key = snapshot_key("metrics", {**request_body.model_dump(mode="json"), "annual_rate": annual_rate})
            result = cache.get_or_compute(key, compute, should_cache=lambda r: not isinstance(r, ComputationError))
        else:
            result = compute()
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_metrics_evaluation(result)
    duration_ms = (time.time() - start_time) * 1000

    if isinstance(result, ComputationError):
        log_evaluation(request_id, "metrics", result.kind.value, duration_ms, len(request_body.members))
        return JSONResponse(status_code=400, content=error_response(result).model_dump(by_alias=True))

    log_evaluation(
        request_id,
        "metrics",
        "ok",
        duration_ms,
        result.member_count,
        group_dti=result.group_dti,
        dti_classification=result.dti_classification.value if result.dti_classification else None,
    )
    return metrics_response(result)
