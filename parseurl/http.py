"""
HTTP client module
==================

A thin wrapper over a shared ``requests.Session``:

* one GET per call, no transport-level retries (callers decide on retries),
* any non-2xx status or network failure is raised as ``FetchError``,
* per-status counters in ``HttpClient.stats``.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from typing import Optional
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from parseurl.config import Config, config

log = logging.getLogger(__name__)

logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)


class FetchError(Exception):
    """Raised when a page could not be fetched with a 2xx response."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def validate_url(url: str) -> bool:
    if not url:
        return False
    p = urlparse(url)
    return p.scheme in {"http", "https"} and bool(p.netloc)


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

class HttpClient:
    def __init__(self, cfg: Optional[Config] = None) -> None:
        self.config = cfg or config
        self.stats: Counter = Counter()
        self._lock = threading.Lock()
        self._session: Optional[requests.Session] = None

    def _build_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": self.config.user_agent})
        adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        s.max_redirects = self.config.max_redirects
        return s

    @property
    def session(self) -> requests.Session:
        with self._lock:
            if self._session is None:
                self._session = self._build_session()
            return self._session

    def get(self, url: str) -> requests.Response:
        """
        Fetch ``url`` once.

        Args:
            url: Absolute http(s) URL

        Returns:
            The 2xx response

        Raises:
            FetchError: On an invalid URL, a network error or a non-2xx status
        """
        if not validate_url(url):
            self.stats["skipped_urls"] += 1
            raise FetchError(f"Invalid URL: {url}")

        self.stats["total_requests"] += 1
        try:
            response = self.session.get(
                url,
                allow_redirects=True,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as err:
            self.stats["status_no-response"] += 1
            log.debug("Network error for %s: %s", url, err)
            raise FetchError(str(err)) from err

        status = response.status_code
        self.stats[f"status_{status}"] += 1
        log.debug("HTTP GET %s → %s", url, status)

        if not (200 <= status < 300):
            raise FetchError(f"Request failed with status code {status}", status=status)
        return response

    def close(self) -> None:
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None
