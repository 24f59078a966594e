"""
Bracket-aware URL extraction.

Pulls the last URL-like token out of the outermost ``[...]`` groups of a text
blob. Nothing here does I/O: every failure is reported as an
``ExtractionResult`` with a stable reason string rather than an exception.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

# Initialize logger
log = logging.getLogger(__name__)

NO_INPUT = "No input provided."
NO_VALID_URLS = "No valid URLs found in input."

ESCAPED_BRACKET_RE = re.compile(r"\\[\[\]]")
ESCAPED_BRACKET_OR_BACKSLASH_RE = re.compile(r"\\[\[\]]|\\")

URL_TOKEN_RE = re.compile(r"(?<![A-Za-z0-9_])https?://\S+|www\.\S+")

# Labels are "alnum, optionally (alnum|-)* alnum" so there is exactly one way to
# split a hostname; a nested star here backtracks exponentially on long labels.
URL_RE = re.compile(
    r"(https?://)?"                                      # protocol
    r"((?:[a-z\d](?:[a-z\d-]*[a-z\d])?\.)+[a-z]{2,}"     # domain name
    r"|(?:\d{1,3}\.){3}\d{1,3})"                         # or ipv4 address
    r"(:\d+)?"                                           # port
    r"(/[-a-z\d%_.~+]*)*"                                # path
    r"(\?[;&a-z\d%_.~+=-]*)?"                            # query string
    r"(#[-a-z\d_]*)?",                                   # fragment
    re.IGNORECASE | re.ASCII,
)


@dataclass(frozen=True)
class ExtractionResult:
    """Either a URL or the reason none was found."""

    url: Optional[str] = None
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.url is not None

    @classmethod
    def found(cls, url: str) -> "ExtractionResult":
        return cls(url=url)

    @classmethod
    def absent(cls, reason: str) -> "ExtractionResult":
        return cls(reason=reason)


def is_valid_url(url: str) -> bool:
    """
    Syntactic URL check.

    Accepts an optional http(s) scheme, a dotted hostname or a dotted quad
    (octets are not range checked), then optional port, path, query and
    fragment. No DNS lookups.
    """
    if not url:
        return False
    return URL_RE.fullmatch(url) is not None


class UrlExtractor:
    """Finds the last URL inside the outermost bracket groups of a text."""

    def __init__(self, strip_all_backslashes: bool = False):
        """
        Args:
            strip_all_backslashes: Also drop backslashes that do not escape a
                bracket. Off by default, so ``a\\b`` survives untouched.
        """
        self.strip_all_backslashes = strip_all_backslashes

    def unescape(self, text: str) -> str:
        """Remove escaped bracket markers so they never affect nesting."""
        if self.strip_all_backslashes:
            return ESCAPED_BRACKET_OR_BACKSLASH_RE.sub("", text)
        return ESCAPED_BRACKET_RE.sub("", text)

    def outer_content(self, text: str) -> Optional[str]:
        """
        Collect the text sitting directly inside outermost bracket groups.

        Sibling groups are joined with a single space. Text nested two or more
        levels deep is dropped along with its brackets.

        Returns:
            The pooled text, or None if the brackets are unbalanced
        """
        groups: List[str] = []
        buffer: List[str] = []
        depth = 0

        for char in text:
            if char == "[":
                depth += 1
                if depth == 1:
                    buffer = []
            elif char == "]":
                depth -= 1
                if depth < 0:
                    return None
                if depth == 0:
                    groups.append("".join(buffer))
                    buffer = []
            elif depth == 1:
                buffer.append(char)

        if depth != 0:
            return None
        return "".join(group + " " for group in groups)

    def candidates(self, content: str) -> List[str]:
        """URL-like tokens in order of appearance."""
        return URL_TOKEN_RE.findall(content)

    def extract(self, text: str) -> ExtractionResult:
        """
        Return the last URL token found in the outermost bracket groups.

        Args:
            text: Raw document text

        Returns:
            ExtractionResult with ``url`` set, or ``reason`` set to
            ``NO_INPUT`` / ``NO_VALID_URLS``
        """
        if not isinstance(text, str) or not text.replace("\ufeff", "").strip():
            return ExtractionResult.absent(NO_INPUT)

        content = self.outer_content(self.unescape(text))
        if content is None:
            log.debug("Unbalanced brackets in %d chars of input", len(text))
            return ExtractionResult.absent(NO_VALID_URLS)

        urls = self.candidates(content)
        if not urls:
            log.debug("No URL tokens inside brackets")
            return ExtractionResult.absent(NO_VALID_URLS)

        last = urls[-1]
        if not is_valid_url(last):
            log.debug("Last candidate %r failed validation", last)
            return ExtractionResult.absent(NO_VALID_URLS)

        log.debug("Picked %s out of %d candidate(s)", last, len(urls))
        return ExtractionResult.found(last)


# Create a global extractor instance
url_extractor = UrlExtractor()


def extract_last_url(text: str, strip_all_backslashes: bool = False) -> ExtractionResult:
    """Convenience wrapper around ``UrlExtractor.extract``."""
    extractor = UrlExtractor(strip_all_backslashes) if strip_all_backslashes else url_extractor
    return extractor.extract(text)
