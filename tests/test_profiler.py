import unittest

from sitewatch.core.profiler import Profiler


class TestProfiler(unittest.IsolatedAsyncioTestCase):
    def test_sync_function(self):
        @Profiler.profile
        def add(a, b):
            return a + b

        with self.assertLogs("sitewatch.core.profiler", level="DEBUG") as logs:
            self.assertEqual(add(1, 2), 3)
        self.assertIn("add took", logs.output[0])

    async def test_async_function(self):
        @Profiler.profile
        async def double(x):
            return x * 2

        with self.assertLogs("sitewatch.core.profiler", level="DEBUG"):
            self.assertEqual(await double(4), 8)

    def test_exceptions_propagate(self):
        @Profiler.profile
        def fail():
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            fail()


if __name__ == "__main__":
    unittest.main()
