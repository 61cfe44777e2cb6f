"""
Recompute tasks triggered by external events.

A status change or completed credit check becomes a RecomputeTask carrying
the latest snapshot. The worker runs a full evaluation from that snapshot
and publishes the result; it keeps no state between tasks. Ordering is not
enforced here: the sink keeps whichever result arrives last.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from cohousing_gateway.domain.evaluation import evaluate_contributions, evaluate_group_metrics
from cohousing_gateway.domain.exceptions import ResultsSinkError
from cohousing_gateway.domain.models import CustomAssignment, Member
from cohousing_gateway.domain.policy import DEFAULT_HYBRID_EQUAL_RATIO
from cohousing_gateway.infrastructure.clients.results_sink import ResultsSinkClient
from cohousing_gateway.infrastructure.observability.metrics import (
    record_contributions_evaluation,
    record_metrics_evaluation,
)


@dataclass(frozen=True)
class RecomputeTask:
    """Message asking for a fresh evaluation of one group"""

    group_id: str
    members: Sequence[Member]
    estimated_monthly_cost: float
    reason: str
    annual_rate: Optional[float] = None
    hybrid_equal_ratio: float = DEFAULT_HYBRID_EQUAL_RATIO
    custom_assignment: Optional[Sequence[CustomAssignment]] = None
    task_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    requested_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class RecomputeWorker:
    """
    Evaluates a task's snapshot and publishes the outcome to the results sink.

    ``render`` turns a domain result (metrics, contribution set or
    ComputationError) into its JSON wire form; the HTTP layer supplies it.
    """

    def __init__(self, sink: ResultsSinkClient, render: Callable[[Any], Any]):
        self.sink = sink
        self.render = render

    def build_payload(self, task: RecomputeTask) -> Dict[str, Any]:
        """Full evaluation of the task snapshot, rendered for the sink"""
        members: List[Member] = list(task.members)

        metrics = evaluate_group_metrics(members, task.estimated_monthly_cost, task.annual_rate)
        contributions = evaluate_contributions(
            members,
            task.estimated_monthly_cost,
            custom_assignment=task.custom_assignment,
            hybrid_equal_ratio=task.hybrid_equal_ratio,
        )
        record_metrics_evaluation(metrics)
        record_contributions_evaluation(contributions)

        return {
            "taskId": task.task_id,
            "groupId": task.group_id,
            "reason": task.reason,
            "requestedAt": task.requested_at,
            "metrics": self.render(metrics),
            "contributions": self.render(contributions),
        }

    async def run(self, task: RecomputeTask) -> bool:
        """
        Process one task. Failures are logged, never raised: triggers are
        fire-and-forget and the next trigger recomputes from scratch anyway.
        """
        start_time = time.time()
        payload = self.build_payload(task)

        try:
            await self.sink.publish(payload)
        except ResultsSinkError as e:
            logging.error(
                f"Recompute publish failed: {e}",
                extra={"task_id": task.task_id, "group_id": task.group_id},
            )
            return False

        logging.info(
            "Recompute published",
            extra={
                "task_id": task.task_id,
                "group_id": task.group_id,
                "reason": task.reason,
                "duration_ms": (time.time() - start_time) * 1000,
            },
        )
        return True
