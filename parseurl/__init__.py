"""
parseurl: fetch the last bracketed URL of a document and report its title
and hashed contact email.
"""

from parseurl.extractor import (
    NO_INPUT,
    NO_VALID_URLS,
    ExtractionResult,
    UrlExtractor,
    extract_last_url,
    is_valid_url,
)

__version__ = "1.0.0"

__all__ = [
    "NO_INPUT",
    "NO_VALID_URLS",
    "ExtractionResult",
    "UrlExtractor",
    "extract_last_url",
    "is_valid_url",
]
