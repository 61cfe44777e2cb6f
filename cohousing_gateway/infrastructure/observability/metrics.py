"""Prometheus metrics for evaluation outcomes, cache efficiency and results-sink performance"""

from typing import Mapping
from prometheus_client import Counter, Histogram
from cohousing_gateway.domain.models import (
    ComputationError,
    ContributionModel,
    GroupMetrics,
)

# Evaluation metrics
evaluation_counter = Counter(
    "cohousing_evaluation_total",
    "Total group evaluations computed",
    ["kind", "outcome"],  # kind: metrics | contributions | custom; outcome: ok | <ErrorKind>
)

dti_classification_counter = Counter(
    "cohousing_dti_classification_total",
    "Group DTI classifications issued",
    ["classification"],  # healthy | acceptable | risky | undefined
)

critical_dependency_counter = Counter(
    "cohousing_critical_dependency_total",
    "Members flagged as critical dependencies",
)

custom_balance_counter = Counter(
    "cohousing_custom_balance_total",
    "Custom split balance outcomes",
    ["status"],  # balanced | overage | shortfall
)

# Cache metrics
cache_lookup_counter = Counter(
    "cohousing_cache_lookup_total",
    "Result cache lookups",
    ["result"],  # hit | miss
)

# Results sink metrics
sink_latency_histogram = Histogram(
    "results_sink_latency_seconds",
    "Results sink response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

sink_failure_counter = Counter(
    "results_sink_failures_total",
    "Failed results sink deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_metrics_evaluation(result: GroupMetrics | ComputationError) -> None:
    """Record group metrics outcome, DTI band and critical dependencies"""
    if isinstance(result, ComputationError):
        evaluation_counter.labels(kind="metrics", outcome=result.kind.value).inc()
        return

    evaluation_counter.labels(kind="metrics", outcome="ok").inc()
    classification = result.dti_classification.value if result.dti_classification else "undefined"
    dti_classification_counter.labels(classification=classification).inc()

    critical = sum(1 for entry in result.resilience_matrix if entry.is_critical_dependency)
    if critical:
        critical_dependency_counter.inc(critical)


def record_custom_balance(model: ContributionModel) -> None:
    """Bucket custom split balance for monitoring organizer input quality"""
    status = model.balance_status
    if status is None:
        return
    if status.balanced:
        bucket = "balanced"
    elif status.overage is not None:
        bucket = "overage"
    else:
        bucket = "shortfall"
    custom_balance_counter.labels(status=bucket).inc()


def record_contributions_evaluation(result: Mapping[str, ContributionModel] | ComputationError) -> None:
    """Record contribution outcome and, when present, the custom balance"""
    if isinstance(result, ComputationError):
        evaluation_counter.labels(kind="contributions", outcome=result.kind.value).inc()
        return

    evaluation_counter.labels(kind="contributions", outcome="ok").inc()
    custom = result.get("custom")
    if custom is not None:
        record_custom_balance(custom)
