import asyncio
import logging
from typing import Iterable, List, Optional

from sitewatch.abstractions.registry import Registry
from sitewatch.contracts.site import SiteStatus

logger = logging.getLogger(__name__)


class SiteRegistry(Registry):
    """
    In-memory registry of the monitored sites.

    Records are immutable. Writers build a new mapping and swap it in under a
    lock; readers take whatever mapping is current without locking, so they
    always see whole records.
    """

    def __init__(self, urls: Iterable[str]):
        """
        Initialize the SiteRegistry.

        Args:
            urls (Iterable[str]): The fixed list of site URLs to monitor.

        Raises:
            ValueError: If a URL appears more than once.
        """
        sites = {}
        for url in urls:
            if url in sites:
                raise ValueError(f"Duplicate site URL: {url}")
            sites[url] = SiteStatus.unavailable(url)
        self._sites = sites  # url -> SiteStatus
        self._lock = asyncio.Lock()
        logger.info(f"SiteRegistry initialized with {len(self._sites)} sites")

    def __len__(self):
        return len(self._sites)

    async def get(self, url: str) -> Optional[SiteStatus]:
        return self._sites.get(url)

    async def update(self, status: SiteStatus) -> bool:
        async with self._lock:
            if status.url not in self._sites:
                logger.warning(f"Site with URL {status.url} not found in registry")
                return False
            previous = self._sites[status.url]
            sites = dict(self._sites)
            sites[status.url] = status
            self._sites = sites
        if previous.available != status.available and previous.last_checked_at:
            logger.info(
                f"Availability transition: {status.url} "
                f"{'up' if previous.available else 'down'} -> "
                f"{'up' if status.available else 'down'}"
            )
        logger.debug(f"Updated site record: {status!r}")
        return True

    async def list_sites(self) -> List[SiteStatus]:
        return list(self._sites.values())

    async def list_urls(self) -> List[str]:
        return list(self._sites)
