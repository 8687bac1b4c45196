import asyncio
import unittest
from unittest.mock import MagicMock

from prometheus_client import CollectorRegistry

from sitewatch.core.metrics_manager import MetricsManager


class TestMetricsManager(unittest.IsolatedAsyncioTestCase):
    def test_managers_do_not_collide(self):
        # Each manager owns its registry, so two can exist in one process.
        first = MetricsManager()
        second = MetricsManager()
        self.assertIsNot(first.registry, second.registry)

    def test_explicit_registry(self):
        registry = CollectorRegistry()
        mm = MetricsManager(registry=registry)
        self.assertIs(mm.registry, registry)

    def test_record_probe(self):
        mm = MetricsManager()
        mm.record_probe(True, 0.2)
        mm.record_probe(False, float("inf"))
        self.assertEqual(mm.get_probe_count("up"), 1.0)
        self.assertEqual(mm.get_probe_count("down"), 1.0)
        self.assertEqual(
            mm.registry.get_sample_value("sitewatch_probe_latency_seconds_count"), 1.0
        )

    def test_track_probe(self):
        mm = MetricsManager()
        with mm.track_probe():
            self.assertEqual(mm.get_probes_in_flight(), 1.0)
        self.assertEqual(mm.get_probes_in_flight(), 0.0)

    async def test_prometheus_middleware(self):
        mm = MetricsManager()
        request = MagicMock()
        request.url.path = "/min"

        async def call_next(request):
            await asyncio.sleep(0.001)
            return "response"

        response = await mm.prometheus_middleware(request, call_next)
        self.assertEqual(response, "response")
        self.assertEqual(
            mm.registry.get_sample_value("sitewatch_request_latency_seconds_count"),
            1.0,
        )

    def test_render(self):
        mm = MetricsManager()
        mm.record_probe(True, 0.1)
        text = mm.render().decode()
        self.assertIn('sitewatch_probe_results_total{outcome="up"} 1.0', text)


if __name__ == "__main__":
    unittest.main()
