import unittest

from sitewatch.contracts.site import SiteStatus
from sitewatch.core.query_service import SiteQueryService
from sitewatch.core.site_registry import SiteRegistry


class TestSiteQueryService(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.registry = SiteRegistry(["http://a", "http://b", "http://c", "http://d"])
        self.service = SiteQueryService(self.registry)

    async def _set(self, url, latency=None):
        if latency is None:
            await self.registry.update(SiteStatus.unavailable(url))
        else:
            await self.registry.update(
                SiteStatus(url=url, available=True, latency=latency)
            )

    async def test_find_by_name(self):
        await self._set("http://b", 0.3)
        site = await self.service.find_by_name("http://b")
        self.assertEqual(site.url, "http://b")
        self.assertTrue(site.available)
        self.assertIsNone(await self.service.find_by_name("http://B"))
        self.assertIsNone(await self.service.find_by_name(""))

    async def test_min_and_max_among_available(self):
        await self._set("http://a", 0.3)
        await self._set("http://b", 0.1)
        await self._set("http://c", 0.9)
        await self._set("http://d")
        self.assertEqual((await self.service.min_latency()).url, "http://b")
        self.assertEqual((await self.service.max_latency()).url, "http://c")

    async def test_min_excludes_unavailable_sites(self):
        # Unchecked and failed sites carry the sentinel latency; they never win.
        await self._set("http://c", 2.5)
        await self._set("http://d")
        self.assertEqual((await self.service.min_latency()).url, "http://c")

    async def test_max_never_returns_unavailable(self):
        await self._set("http://a", 0.2)
        await self._set("http://b")
        result = await self.service.max_latency()
        self.assertTrue(result.available)
        self.assertEqual(result.url, "http://a")

    async def test_all_unavailable_is_not_found(self):
        for url in await self.registry.list_urls():
            await self._set(url)
        self.assertIsNone(await self.service.min_latency())
        self.assertIsNone(await self.service.max_latency())

    async def test_ties_resolve_to_site_order(self):
        await self._set("http://c", 0.5)
        await self._set("http://a", 0.5)
        self.assertEqual((await self.service.min_latency()).url, "http://a")
        self.assertEqual((await self.service.max_latency()).url, "http://a")

    async def test_reads_live_state(self):
        await self._set("http://a", 0.5)
        self.assertEqual((await self.service.max_latency()).url, "http://a")
        await self._set("http://b", 0.7)
        self.assertEqual((await self.service.max_latency()).url, "http://b")


if __name__ == "__main__":
    unittest.main()
