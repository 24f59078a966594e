"""
Title and email scraping for a fetched page, plus keyed email hashing.
"""

import hashlib
import hmac
import logging
import re
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup

# Initialize logger
log = logging.getLogger(__name__)

TITLE_RE = re.compile(r"<title>([^\n\r\u2028\u2029]*?)</title>", re.IGNORECASE)
EMAIL_RE = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)


@dataclass(frozen=True)
class PageInfo:
    title: Optional[str] = None
    email: Optional[str] = None


def hash_email(email: str, secret: str) -> str:
    """HMAC-SHA256 hex digest of ``email`` keyed with ``secret``."""
    return hmac.new(secret.encode("utf-8"), email.encode("utf-8"), hashlib.sha256).hexdigest()


class PageParser:
    """Pulls the page title and the first email address out of a body."""

    def extract_title(self, body: str) -> Optional[str]:
        match = TITLE_RE.search(body)
        if match:
            return match.group(1) or None

        # <title> with attributes or spread over lines
        if "<title" not in body.lower():
            return None
        try:
            soup = BeautifulSoup(body, "html.parser")
        except Exception as e:
            log.debug("HTML parse failed while looking for title: %s", e)
            return None
        if soup.title and soup.title.string:
            return soup.title.string.strip() or None
        return None

    def extract_email(self, body: str) -> Optional[str]:
        match = EMAIL_RE.search(body)
        return match.group(0) if match else None

    def parse(self, body: str) -> PageInfo:
        """
        Parse a response body.

        Args:
            body: Response text, usually HTML

        Returns:
            PageInfo with whatever was found
        """
        if not body:
            return PageInfo()
        info = PageInfo(title=self.extract_title(body), email=self.extract_email(body))
        log.debug("Parsed page: title=%r, email found=%s", info.title, info.email is not None)
        return info


# Create a global page parser instance
page_parser = PageParser()
