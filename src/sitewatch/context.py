import logging
from typing import Iterable, Optional

import httpx

from sitewatch.config.config import Config
from sitewatch.core.metrics_manager import MetricsManager
from sitewatch.core.prober import SiteProber
from sitewatch.core.query_service import SiteQueryService
from sitewatch.core.request_counter import RequestCounter
from sitewatch.core.scheduler import ProbeScheduler
from sitewatch.core.site_registry import SiteRegistry

logger = logging.getLogger(__name__)


class MonitorContext:
    """
    Owns every component of a running monitor: the site registry, the prober
    and scheduler that write to it, and the query service and request counter
    the API reads from.
    """

    def __init__(
        self,
        sites: Iterable[str],
        concurrency: Optional[int] = None,
        interval: float = 60.0,
        timeout: Optional[float] = 10.0,
        run_immediately: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.registry = SiteRegistry(sites)
        self.metrics_manager = MetricsManager()
        self._owns_client = client is None
        self.client = client
        self.prober = SiteProber(
            self.registry,
            client=client,
            timeout=timeout,
            metrics_manager=self.metrics_manager,
        )
        self.scheduler = ProbeScheduler(
            self.registry,
            self.prober,
            concurrency=concurrency,
            interval=interval,
            run_immediately=run_immediately,
            metrics_manager=self.metrics_manager,
        )
        self.query_service = SiteQueryService(self.registry)
        self.request_counter = RequestCounter()

    @classmethod
    def from_config(cls, config=Config, **overrides) -> "MonitorContext":
        settings = dict(
            sites=config.SITES,
            concurrency=config.PROBE_CONCURRENCY,
            interval=config.PROBE_INTERVAL_SECONDS,
            timeout=config.PROBE_TIMEOUT_SECONDS,
            run_immediately=config.PROBE_ON_STARTUP,
        )
        settings.update(overrides)
        return cls(**settings)

    async def start(self):
        if self.client is None:
            # One pooled client for the life of the process.
            self.client = httpx.AsyncClient()
            self.prober.client = self.client
        await self.scheduler.start()
        logger.info(f"Monitoring {len(self.registry)} sites")

    async def stop(self):
        await self.scheduler.stop()
        if self._owns_client and self.client is not None:
            await self.client.aclose()
            self.client = None
            self.prober.client = None
