import logging
import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

PROBE_LATENCY_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


class MetricsManager:
    """
    Manager for Prometheus metrics about probing and about the HTTP API itself.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the MetricsManager and set up Prometheus metrics.

        Args:
            registry: Collector registry to register metrics with. Each manager
                gets its own registry by default so several can coexist in one
                process.
        """
        self.registry = registry if registry is not None else CollectorRegistry()
        self.PROBE_RESULTS = Counter(
            "sitewatch_probe_results",
            "Completed site checks by outcome",
            ["outcome"],
            registry=self.registry,
        )
        self.PROBE_LATENCY = Histogram(
            "sitewatch_probe_latency_seconds",
            "Latency of successful site checks in seconds",
            buckets=PROBE_LATENCY_BUCKETS,
            registry=self.registry,
        )
        self.PROBES_IN_FLIGHT = Gauge(
            "sitewatch_probes_in_flight",
            "Number of site checks in flight",
            registry=self.registry,
        )
        self.TICK_DURATION = Histogram(
            "sitewatch_tick_duration_seconds",
            "Duration of a full pass over every site in seconds",
            buckets=PROBE_LATENCY_BUCKETS,
            registry=self.registry,
        )
        self.REQ_LATENCY = Histogram(
            "sitewatch_request_latency_seconds",
            "API request latency in seconds",
            registry=self.registry,
        )
        logger.info("MetricsManager initialized.")

    def record_probe(self, available: bool, latency: float | None = None):
        self.PROBE_RESULTS.labels(outcome="up" if available else "down").inc()
        if available and latency is not None:
            self.PROBE_LATENCY.observe(latency)

    def track_probe(self):
        """
        Context manager counting a site check as in flight while it runs.
        """
        return self.PROBES_IN_FLIGHT.track_inprogress()

    def observe_tick(self, elapsed: float):
        self.TICK_DURATION.observe(elapsed)

    def get_probes_in_flight(self) -> float:
        return self.PROBES_IN_FLIGHT._value.get()

    def get_probe_count(self, outcome: str) -> float:
        return self.PROBE_RESULTS.labels(outcome=outcome)._value.get()

    async def prometheus_middleware(self, request, call_next):
        """
        Middleware for tracking API request latency.

        Args:
            request: The incoming request object.
            call_next: The next handler in the middleware chain.

        Returns:
            The response object from the next handler.
        """
        start = time.perf_counter()
        try:
            return await call_next(request)
        finally:
            elapsed = time.perf_counter() - start
            self.REQ_LATENCY.observe(elapsed)
            logger.debug(f"Request {request.url.path} processed in {elapsed:.4f}s")

    def render(self) -> bytes:
        return generate_latest(self.registry)
