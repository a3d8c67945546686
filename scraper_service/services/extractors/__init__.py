"""Web-fiction scraping pipeline.

This module turns a chapter URL into clean narrative text:
1. URL validation (http/https only)
2. Fetching with jittered retries (httpx)
3. Charset detection and decoding (header, BOM, meta, host, byte statistics)
4. Content extraction through a cascade of selector and pattern strategies
5. Content validation against length and contamination checks

Usage:
    from scraper_service.services.extractors import ScrapePipeline

    pipeline = ScrapePipeline()
    result = await pipeline.scrape("https://www.69shuba.com/txt/1/1")
    print(result.document.content)
"""

from scraper_service.services.extractors.base import (
    EncodingDecision,
    EncodingSource,
    ExtractedDocument,
    ExtractionCandidate,
    ExtractionConfig,
    FetchResult,
    ScrapeResult,
    ValidationVerdict,
)
from scraper_service.services.extractors.content_validator import validate_content
from scraper_service.services.extractors.encoding import decode_content, detect_encoding
from scraper_service.services.extractors.exceptions import (
    EmptyResponseError,
    ExtractionContaminatedError,
    ExtractionFailedError,
    FailureKind,
    FetchRetriesExhaustedError,
    InputValidationError,
    InvalidInputError,
    InvalidUrlFormatError,
    NetworkError,
    PermanentFetchError,
    ScrapeError,
    UnsupportedProtocolError,
)
from scraper_service.services.extractors.fetcher import Fetcher
from scraper_service.services.extractors.html_extractor import HTMLExtractor
from scraper_service.services.extractors.pipeline import ScrapePipeline
from scraper_service.services.extractors.url_validator import validate_url

__all__ = [
    # Base classes
    "EncodingDecision",
    "EncodingSource",
    "ExtractedDocument",
    "ExtractionCandidate",
    "ExtractionConfig",
    "FetchResult",
    "ScrapeResult",
    "ValidationVerdict",
    # Pipeline stages
    "validate_url",
    "Fetcher",
    "detect_encoding",
    "decode_content",
    "HTMLExtractor",
    "validate_content",
    "ScrapePipeline",
    # Exceptions
    "ScrapeError",
    "InputValidationError",
    "InvalidInputError",
    "InvalidUrlFormatError",
    "UnsupportedProtocolError",
    "NetworkError",
    "FailureKind",
    "PermanentFetchError",
    "FetchRetriesExhaustedError",
    "EmptyResponseError",
    "ExtractionFailedError",
    "ExtractionContaminatedError",
]
