import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Optional

import httpx

from sitewatch.abstractions.registry import Registry
from sitewatch.contracts.site import SiteStatus
from sitewatch.core.metrics_manager import MetricsManager

logger = logging.getLogger(__name__)

# Anything that stops the GET from producing a response. HTTP error statuses
# still count as a response. ValueError covers hosts that fail IDNA encoding.
CHECK_FAILURES = (httpx.HTTPError, httpx.InvalidURL, ValueError)


class SiteProber:
    """
    Checks a single site with one GET request and records the outcome in the
    registry.
    """

    def __init__(
        self,
        registry: Registry,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = 10.0,
        metrics_manager: Optional[MetricsManager] = None,
    ):
        """
        Args:
            registry (Registry): Registry holding the site records to update.
            client (Optional[httpx.AsyncClient]): Shared client. When None a
                short-lived client is opened for every check.
            timeout (Optional[float]): Deadline in seconds for a whole check.
                None leaves the httpx client default in charge.
            metrics_manager (Optional[MetricsManager]): Receives probe metrics.
        """
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive")
        self.registry = registry
        self.client = client
        self.timeout = timeout
        self.metrics_manager = metrics_manager

    async def check(self, url: str) -> None:
        """
        Probe ``url`` once and replace its record. Never raises for transport
        failures; they are recorded as an unavailable site.
        """
        if self.metrics_manager:
            with self.metrics_manager.track_probe():
                status = await self._probe(url)
            self.metrics_manager.record_probe(status.available, status.latency)
        else:
            status = await self._probe(url)
        await self.registry.update(status)

    async def _probe(self, url: str) -> SiteStatus:
        started = time.perf_counter()
        try:
            if self.timeout is None:
                await self._fetch(url)
            else:
                await asyncio.wait_for(self._fetch(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Check timed out for {url} after {self.timeout}s")
            return SiteStatus.unavailable(url, checked_at=datetime.now(timezone.utc))
        except CHECK_FAILURES as e:
            logger.warning(f"Check failed for {url}: {e!r}")
            return SiteStatus.unavailable(url, checked_at=datetime.now(timezone.utc))
        latency = time.perf_counter() - started
        logger.debug(f"Check succeeded for {url} in {latency:.4f}s")
        return SiteStatus(
            url=url,
            available=True,
            latency=latency,
            last_checked_at=datetime.now(timezone.utc),
        )

    async def _fetch(self, url: str):
        if self.client is not None:
            await self._get(self.client, url)
            return
        async with httpx.AsyncClient() as client:
            await self._get(client, url)

    async def _get(self, client: httpx.AsyncClient, url: str):
        timeout = (
            self.timeout if self.timeout is not None else httpx.USE_CLIENT_DEFAULT
        )
        # The body is never read; leaving the block closes the response.
        async with client.stream("GET", url, timeout=timeout) as response:
            logger.debug(f"GET {url} -> {response.status_code}")
