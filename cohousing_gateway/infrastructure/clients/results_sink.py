"""Results sink webhook client with exponential backoff retry logic"""

import httpx
import asyncio
from typing import Dict, Any
from cohousing_gateway.config import settings
from cohousing_gateway.domain.exceptions import ResultsSinkError
from cohousing_gateway.infrastructure.observability.metrics import sink_latency_histogram, sink_failure_counter


class ResultsSinkClient:
    """Publishes recomputed group results to the persistence collaborator"""

    def __init__(
        self,
        sink_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.sink_url = sink_url or settings.results_sink_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base
        self.transport = transport

    async def publish(self, payload: Dict[str, Any]) -> None:
        """
        Send a recompute result to the sink with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^(attempt-1))
        - Retries on 5xx errors and network failures; 4xx fails immediately
        - Tracks latency histogram and failure counter

        Raises:
            ResultsSinkError: After the last failed attempt
        """
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with sink_latency_histogram.time():
                        response = await client.post(self.sink_url, json=payload)
                        response.raise_for_status()
                        return  # Success

                except httpx.HTTPStatusError as e:
                    attempt += 1
                    sink_failure_counter.inc()
                    if e.response.status_code < 500:
                        raise ResultsSinkError(f"Results sink rejected payload: {e.response.status_code}") from e
                    if attempt >= self.max_retries:
                        raise ResultsSinkError(f"Results sink error after {attempt} attempts: {e.response.status_code}") from e

                except httpx.RequestError as e:
                    attempt += 1
                    sink_failure_counter.inc()
                    if attempt >= self.max_retries:
                        raise ResultsSinkError(f"Results sink unreachable after {attempt} attempts") from e

                # Exponential backoff: 1s, 2s, 4s, 8s
                backoff = self.backoff_base * (2 ** (attempt - 1))
                await asyncio.sleep(backoff)
