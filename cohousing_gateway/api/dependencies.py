"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from cohousing_gateway.api.v1.schemas import render_result
from cohousing_gateway.config import settings
from cohousing_gateway.infrastructure.cache import ResultCache
from cohousing_gateway.infrastructure.clients.results_sink import ResultsSinkClient
from cohousing_gateway.infrastructure.dispatch import RecomputeWorker


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_result_cache(request: Request) -> ResultCache | None:
    """Application-scoped result cache, or None when caching is disabled"""
    return getattr(request.app.state, "result_cache", None)


def get_hybrid_equal_ratio() -> float:
    """Configured equal share of the hybrid model"""
    return settings.hybrid_equal_ratio


def get_results_sink() -> ResultsSinkClient:
    """Provide results sink client instance"""
    return ResultsSinkClient()


def get_recompute_worker(sink: ResultsSinkClient = Depends(get_results_sink)) -> RecomputeWorker:
    """Provide recompute worker bound to the results sink"""
    return RecomputeWorker(sink, render=render_result)
