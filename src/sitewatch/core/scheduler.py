import asyncio
import logging
import os
import time
from typing import Optional, Set

from sitewatch.abstractions.registry import Registry
from sitewatch.core.metrics_manager import MetricsManager
from sitewatch.core.prober import SiteProber
from sitewatch.core.profiler import Profiler

logger = logging.getLogger(__name__)


class ProbeScheduler:
    """
    Checks every registered site on a fixed wall-clock interval, with at most
    ``concurrency`` checks in flight at any moment.
    """

    def __init__(
        self,
        registry: Registry,
        prober: SiteProber,
        concurrency: Optional[int] = None,
        interval: float = 60.0,
        run_immediately: bool = True,
        metrics_manager: Optional[MetricsManager] = None,
    ):
        """
        Initialize the ProbeScheduler.

        Args:
            registry (Registry): Source of the URLs to check.
            prober (SiteProber): Performs a single check and records it.
            concurrency (Optional[int]): Maximum checks in flight. Defaults to
                the number of CPUs on the host.
            interval (float): Seconds between the start of consecutive ticks.
            run_immediately (bool): Fire the first tick at startup instead of
                after one interval.
            metrics_manager (Optional[MetricsManager]): Receives tick durations.
        """
        if concurrency is None:
            concurrency = os.cpu_count() or 1
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.registry = registry
        self.prober = prober
        self.concurrency = concurrency
        self.interval = interval
        self.run_immediately = run_immediately
        self.metrics_manager = metrics_manager
        # Shared by every tick, so an overrunning tick still holds its slots.
        self.semaphore = asyncio.Semaphore(concurrency)
        self._running = False
        self._task = None
        self._tick_tasks: Set[asyncio.Task] = set()
        self.ticks_started = 0
        logger.info(
            f"ProbeScheduler initialized with concurrency={self.concurrency}, "
            f"interval={self.interval}s"
        )

    @Profiler.profile
    async def run_tick(self) -> int:
        """
        Check every registered site once and wait for all checks to finish.

        Returns:
            int: Number of sites checked.
        """
        start = time.perf_counter()
        urls = await self.registry.list_urls()
        tasks = []
        try:
            for url in urls:
                await self.semaphore.acquire()
                tasks.append(
                    asyncio.create_task(
                        self._check_and_release(url), name=f"check {url}"
                    )
                )
            results = await asyncio.gather(*tasks, return_exceptions=True)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        for url, result in zip(urls, results):
            if isinstance(result, BaseException) and not isinstance(
                result, asyncio.CancelledError
            ):
                logger.error(
                    f"Unexpected error while checking {url}", exc_info=result
                )
        elapsed = time.perf_counter() - start
        if self.metrics_manager:
            self.metrics_manager.observe_tick(elapsed)
        logger.info(f"Checked {len(urls)} sites in {elapsed:.4f}s")
        return len(urls)

    async def _check_and_release(self, url: str):
        try:
            await self.prober.check(url)
        finally:
            self.semaphore.release()

    def _launch_tick(self):
        if self._tick_tasks:
            logger.warning(
                f"Starting a new tick while {len(self._tick_tasks)} previous "
                "tick(s) are still running"
            )
        self.ticks_started += 1
        task = asyncio.create_task(self.run_tick(), name=f"tick {self.ticks_started}")
        self._tick_tasks.add(task)
        task.add_done_callback(self._tick_tasks.discard)

    async def run_forever(self):
        """
        Fire a tick every ``interval`` seconds until stopped. Tick start times
        follow the event-loop clock; a slow tick does not push back the next one.
        """
        self._running = True
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        if not self.run_immediately:
            next_tick += self.interval
        while self._running:
            delay = next_tick - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            if not self._running:
                break
            self._launch_tick()
            next_tick += self.interval
            now = loop.time()
            if next_tick <= now:
                skipped = int((now - next_tick) // self.interval) + 1
                logger.warning(f"Scheduler fell behind; skipping {skipped} tick(s)")
                next_tick += skipped * self.interval

    async def start(self):
        """
        Start the scheduling loop as an asynchronous task.
        """
        if self._task and not self._task.done():
            return
        self._running = True
        self._task = asyncio.create_task(self.run_forever(), name="probe scheduler")
        logger.info("Probe scheduler started.")

    async def stop(self):
        """
        Stop the scheduling loop and cancel any tick still in progress.
        """
        self._running = False
        pending = list(self._tick_tasks)
        if self._task:
            pending.append(self._task)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        self._tick_tasks.clear()
        self._task = None
        logger.info("Probe scheduler stopped.")
