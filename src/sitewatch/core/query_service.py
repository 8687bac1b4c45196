from typing import List, Optional

from sitewatch.abstractions.registry import Registry
from sitewatch.contracts.site import SiteStatus
from sitewatch.core.profiler import Profiler


class SiteQueryService:
    """
    Read-only queries over the live site records. Nothing is cached; every
    call reads the registry's current state.

    Sites whose last check failed carry no latency and never take part in the
    minimum or maximum.
    """

    def __init__(self, registry: Registry):
        self.registry = registry

    async def find_by_name(self, url: str) -> Optional[SiteStatus]:
        if not url:
            return None
        return await self.registry.get(url)

    async def _available(self) -> List[SiteStatus]:
        return [s for s in await self.registry.list_sites() if s.has_latency]

    @Profiler.profile
    async def min_latency(self) -> Optional[SiteStatus]:
        sites = await self._available()
        if not sites:
            return None
        return min(sites, key=lambda s: s.latency)

    @Profiler.profile
    async def max_latency(self) -> Optional[SiteStatus]:
        sites = await self._available()
        if not sites:
            return None
        return max(sites, key=lambda s: s.latency)
