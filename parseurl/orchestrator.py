"""
Orchestration of a single run: extract, wait, fetch, scrape, hash, emit.

Each ``Orchestrator`` owns its visited set and pending retry timers, so two
instances never share state.
"""

import json
import logging
import sys
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from parseurl.config import Config, config
from parseurl.extractor import UrlExtractor
from parseurl.http import FetchError, HttpClient
from parseurl.page_parser import PageParser, hash_email

# Initialize logger
log = logging.getLogger(__name__)

Record = Dict[str, Any]


def normalize_url(url: str) -> str:
    """Bare ``www.`` results get an ``http://`` scheme."""
    return url if url.startswith("http") else f"http://{url}"


def print_record(record: Record) -> None:
    sys.stdout.write(json.dumps(record, ensure_ascii=False, separators=(",", ":")) + "\n")
    sys.stdout.flush()


class Orchestrator:
    """Runs the pipeline for one input document at a time."""

    def __init__(
        self,
        cfg: Optional[Config] = None,
        http_client: Optional[HttpClient] = None,
        emit: Callable[[Record], None] = print_record,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            cfg: Settings, defaults to the global config
            http_client: Client used for fetching, built from ``cfg`` if omitted
            emit: Receives each output record
            sleep: Used for the delay before the first request
        """
        self.config = cfg or config
        self.http_client = http_client or HttpClient(self.config)
        self.extractor = UrlExtractor(self.config.strip_all_backslashes)
        self.parser = PageParser()
        self.emit = emit
        self.sleep = sleep

        self.visited: set[str] = set()
        self._lock = threading.Lock()
        self._timers: List[threading.Timer] = []

    def run_text(self, text: str) -> Optional[str]:
        """
        Extract the URL from ``text`` and process it.

        Returns:
            The normalized URL that was processed, or None if nothing was found
        """
        result = self.extractor.extract(text)
        if not result:
            log.error(result.reason)
            return None

        if self.config.request_delay:
            self.sleep(self.config.request_delay)

        url = normalize_url(result.url)
        self.process_url(url)
        return url

    def process_url(self, url: str) -> None:
        with self._lock:
            if url in self.visited:
                log.debug("Already visited %s", url)
                return
            self.visited.add(url)

        try:
            self.fetch_and_process(url)
        except FetchError as e:
            self.schedule_retry(url, str(e))

    def fetch_and_process(self, url: str) -> Record:
        """
        Fetch ``url``, scrape it and emit the record.

        Raises:
            FetchError: If the page could not be fetched
        """
        response = self.http_client.get(url)
        info = self.parser.parse(response.text)

        record: Record = {"url": url}
        if info.title:
            record["title"] = info.title
        if info.email:
            record["email"] = hash_email(info.email, self.config.secret)

        self.emit(record)
        return record

    def schedule_retry(self, url: str, error_message: Optional[str] = None) -> threading.Timer:
        log.warning("Error: %s", error_message or "Unknown error")
        log.debug("Retrying %s in %.1fs", url, self.config.retry_delay)
        timer = threading.Timer(self.config.retry_delay, self._retry, args=(url,))
        timer.daemon = True
        with self._lock:
            self._timers.append(timer)
        timer.start()
        return timer

    def _retry(self, url: str) -> None:
        try:
            self.fetch_and_process(url)
        except FetchError as e:
            log.error("Error for URL %s: Retry failed with error: %s", url, e)
        except Exception as e:
            log.error("Error for URL %s: Retry failed with error: %s", url, e, exc_info=True)

    def pending(self) -> int:
        with self._lock:
            return sum(1 for t in self._timers if t.is_alive())

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every scheduled retry has run."""
        with self._lock:
            timers = list(self._timers)
        for timer in timers:
            timer.join(timeout)

    def cancel(self) -> None:
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()
