"""
Tests for the HTTP client.
"""

import unittest
from unittest.mock import patch, MagicMock

import requests

from parseurl.config import Config
from parseurl import http as http_module
from parseurl.http import FetchError, HttpClient, validate_url


def make_response(status=200, text="<title>ok</title>"):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.text = text
    return response


class TestValidateUrl(unittest.TestCase):

    def test_validate_url(self):
        self.assertTrue(validate_url("https://example.com"))
        self.assertTrue(validate_url("http://www.example.com/path"))
        self.assertFalse(validate_url(""))
        self.assertFalse(validate_url("www.example.com"))
        self.assertFalse(validate_url("ftp://example.com"))
        self.assertFalse(validate_url("https://"))


class TestHttpClient(unittest.TestCase):

    def setUp(self):
        self.client = HttpClient(Config())

    def tearDown(self):
        self.client.close()

    @patch('requests.Session.get')
    def test_get_success(self, mock_get):
        mock_get.return_value = make_response(200)

        response = self.client.get("http://www.google.com")

        self.assertEqual(response.status_code, 200)
        mock_get.assert_called_once()
        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], "http://www.google.com")
        self.assertEqual(kwargs["timeout"], self.client.config.request_timeout)
        self.assertTrue(kwargs["allow_redirects"])
        self.assertNotIn("headers", kwargs)
        self.assertEqual(self.client.stats["total_requests"], 1)
        self.assertEqual(self.client.stats["status_200"], 1)

    @patch('requests.Session.get')
    def test_non_2xx_raises(self, mock_get):
        mock_get.return_value = make_response(404)

        with self.assertRaises(FetchError) as ctx:
            self.client.get("http://www.google.com")

        self.assertEqual(str(ctx.exception), "Request failed with status code 404")
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(self.client.stats["status_404"], 1)

    @patch('requests.Session.get')
    def test_redirect_status_without_follow_raises(self, mock_get):
        mock_get.return_value = make_response(304)
        with self.assertRaises(FetchError):
            self.client.get("http://www.google.com")

    @patch('requests.Session.get')
    def test_network_error_raises(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("connection refused")

        with self.assertRaises(FetchError) as ctx:
            self.client.get("http://www.google.com")

        self.assertIn("connection refused", str(ctx.exception))
        self.assertIsNone(ctx.exception.status)
        self.assertEqual(self.client.stats["status_no-response"], 1)

    @patch('requests.Session.get')
    def test_invalid_url_not_requested(self, mock_get):
        with self.assertRaises(FetchError):
            self.client.get("www.google.com")
        mock_get.assert_not_called()
        self.assertEqual(self.client.stats["skipped_urls"], 1)

    def test_clients_are_built_per_config(self):
        self.assertFalse(hasattr(http_module, "http_client"))
        cfg = Config()
        self.assertIs(HttpClient(cfg).config, cfg)

    def test_session_settings(self):
        cfg = Config()
        cfg.user_agent = "test-agent/1.0"
        cfg.max_redirects = 3
        client = HttpClient(cfg)
        try:
            session = client.session
            self.assertIs(session, client.session)
            self.assertEqual(session.headers["User-Agent"], "test-agent/1.0")
            self.assertEqual(session.max_redirects, 3)
            self.assertEqual(session.get_adapter("https://x.io").max_retries.total, 0)
        finally:
            client.close()


if __name__ == "__main__":
    unittest.main()
