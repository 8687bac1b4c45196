import importlib
import logging
import os
import tempfile
import unittest
from unittest.mock import patch

from sitewatch.config import logging_config
from sitewatch.config.config import DEFAULT_SITES, Config


class TestConfig(unittest.TestCase):
    def test_config_defaults(self):
        self.assertEqual(Config.PORT, 8080)
        self.assertEqual(Config.PROBE_INTERVAL_SECONDS, 60.0)
        self.assertEqual(Config.PROBE_CONCURRENCY, os.cpu_count() or 1)
        self.assertEqual(Config.PROBE_TIMEOUT_SECONDS, 10.0)
        self.assertTrue(Config.PROBE_ON_STARTUP)
        self.assertEqual(Config.SITES, DEFAULT_SITES)
        self.assertEqual(len(DEFAULT_SITES), 24)
        self.assertEqual(len(set(DEFAULT_SITES)), len(DEFAULT_SITES))

    def test_config_env_override(self):
        import sitewatch.config.config as config_mod

        env = {
            "SITEWATCH_PORT": "9090",
            "SITEWATCH_PROBE_INTERVAL": "5",
            "SITEWATCH_PROBE_CONCURRENCY": "3",
            "SITEWATCH_PROBE_TIMEOUT": "0",
            "SITEWATCH_PROBE_ON_STARTUP": "false",
        }
        try:
            with patch.dict(os.environ, env):
                importlib.reload(config_mod)
                self.assertEqual(config_mod.Config.PORT, 9090)
                self.assertEqual(config_mod.Config.PROBE_INTERVAL_SECONDS, 5.0)
                self.assertEqual(config_mod.Config.PROBE_CONCURRENCY, 3)
                self.assertIsNone(config_mod.Config.PROBE_TIMEOUT_SECONDS)
                self.assertFalse(config_mod.Config.PROBE_ON_STARTUP)
        finally:
            importlib.reload(config_mod)


class TestLoggingConfig(unittest.TestCase):
    def test_logging_setup(self):
        try:
            logging_config.setup_logging(log_file=None)
        except Exception as e:
            self.fail(f"setup_logging() raised {e}")
        logger = logging.getLogger()
        self.assertTrue(logger.hasHandlers())

    def test_file_handler_is_opt_in(self):
        self.assertNotIn("file", logging_config.build_logging_config("INFO", None)["handlers"])
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "logs", "sitewatch.log")
            logging_config.setup_logging(log_file=path)
            logging.getLogger("sitewatch.test").warning("hello")
            for handler in logging.getLogger().handlers:
                handler.flush()
            self.assertTrue(os.path.exists(path))
            logging_config.setup_logging(log_file=None)


if __name__ == "__main__":
    unittest.main()
