"""Process-scoped HTTP request metrics exported with prometheus_client.

A single :class:`RequestMetrics` instance lives on ``app.state.metrics``. It
owns its own :class:`~prometheus_client.CollectorRegistry` instead of the
global default one, so :meth:`RequestMetrics.reset` can rebuild every
collector at startup without tripping duplicate-registration errors.
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

DURATION_BUCKETS = [0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]


class RequestMetrics:
    """Request and 5xx counters plus a latency histogram on a private registry."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.registry = CollectorRegistry()
        self.requests = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            registry=self.registry,
        )
        self.errors = Counter(
            "http_requests_errors_total",
            "Total number of HTTP requests that failed with a 5xx status",
            registry=self.registry,
        )
        self.duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request latency",
            buckets=DURATION_BUCKETS,
            registry=self.registry,
        )

    def observe(self, duration_seconds: float, status_code: int) -> None:
        self.requests.inc()
        if status_code >= 500:
            self.errors.inc()
        self.duration.observe(duration_seconds)

    def sample(self, name: str) -> float:
        """Current value of one exported sample, 0.0 when it has none yet."""
        return self.registry.get_sample_value(name) or 0.0

    def render(self) -> bytes:
        """The registry in the Prometheus text exposition format."""
        return generate_latest(self.registry)


def metrics_middleware(
    metrics: RequestMetrics,
) -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    """Build an ``@app.middleware("http")`` callable that feeds ``metrics``."""

    async def _middleware(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            metrics.observe(time.perf_counter() - start, status_code)

    return _middleware
