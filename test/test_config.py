"""
Tests for the configuration module.
"""

import os
import tempfile
import unittest
from unittest.mock import patch

from parseurl.config import Config, ConfigurationError, DEFAULT_SECRET


class TestConfig(unittest.TestCase):
    """Tests for the configuration module."""

    @patch.dict(os.environ, {}, clear=True)
    def test_config_defaults(self):
        cfg = Config()
        self.assertEqual(cfg.secret, DEFAULT_SECRET)
        self.assertEqual(cfg.request_delay, 1.0)
        self.assertEqual(cfg.retry_delay, 60.0)
        self.assertEqual(cfg.request_timeout, (10, 20))
        self.assertEqual(cfg.max_redirects, 5)
        self.assertFalse(cfg.strip_all_backslashes)
        self.assertGreater(cfg.max_input_size, 0)
        self.assertEqual(cfg.validate(), [])

    @patch.dict(os.environ, {
        "IM_SECRET": "s3cret",
        "REQUEST_DELAY": "0",
        "RETRY_DELAY": "2.5",
        "READ_TIMEOUT": "5",
        "STRIP_ALL_BACKSLASHES": "yes",
    }, clear=True)
    def test_environment_overrides(self):
        cfg = Config()
        self.assertEqual(cfg.secret, "s3cret")
        self.assertEqual(cfg.request_delay, 0.0)
        self.assertEqual(cfg.retry_delay, 2.5)
        self.assertEqual(cfg.request_timeout, (10, 5))
        self.assertTrue(cfg.strip_all_backslashes)

    @patch.dict(os.environ, {"MAX_REDIRECTS": "500", "READ_TIMEOUT": "0"}, clear=True)
    def test_out_of_range_values_clamped(self):
        with self.assertLogs("parseurl.config", level="WARNING"):
            cfg = Config()
        self.assertEqual(cfg.max_redirects, 100)
        self.assertEqual(cfg.request_timeout[1], 1)

    @patch.dict(os.environ, {"RETRY_DELAY": "soon"}, clear=True)
    def test_invalid_value_uses_default(self):
        with self.assertLogs("parseurl.config", level="WARNING") as logs:
            cfg = Config()
        self.assertEqual(cfg.retry_delay, 60.0)
        self.assertIn("Invalid RETRY_DELAY value", logs.output[0])

    @patch.dict(os.environ, {}, clear=True)
    def test_validation(self):
        cfg = Config()
        cfg.secret = ""
        self.assertIn("IM_SECRET must not be empty", cfg.validate())
        with self.assertRaises(ConfigurationError):
            with self.assertLogs("parseurl.config", level="ERROR"):
                cfg.validate_or_raise()

    @patch.dict(os.environ, {"IM_SECRET": "hidden"}, clear=True)
    def test_as_dict_masks_secret(self):
        values = Config().as_dict()
        self.assertEqual(values["secret"], "***")
        self.assertIn("retry_delay", values)

    @patch.dict(os.environ, {}, clear=True)
    def test_env_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            env_file = os.path.join(tmp, "custom.env")
            with open(env_file, "w", encoding="utf-8") as fh:
                fh.write("IM_SECRET=from-file\nREQUEST_DELAY=0.25\n")
            cfg = Config(env_file)
        self.assertEqual(cfg.secret, "from-file")
        self.assertEqual(cfg.request_delay, 0.25)


if __name__ == "__main__":
    unittest.main()
