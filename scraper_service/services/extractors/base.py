"""Base types for the scraping pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from scraper_service.core.config import Settings


@dataclass(frozen=True)
class ExtractionConfig:
    """Configuration for the scraping pipeline."""

    # Fetching
    timeout_seconds: float = 45.0
    max_redirects: int = 10
    max_attempts: int = 3
    pre_request_delay: float = 1.0
    pre_request_jitter: float = 2.0
    retry_backoff: float = 2.0
    retry_jitter: float = 1.5

    # Extraction thresholds
    min_content_length: int = 20  # Minimum chars for a valid extraction
    specialized_min_length: int = 500
    chapter_match_min_length: int = 1000
    chapter_min_length: int = 800
    container_min_length: int = 200
    selector_min_length: int = 50
    paragraph_min_length: int = 10
    paragraph_max_fragments: int = 20
    title_min_length: int = 5
    contamination_ratio: float = 0.10

    @classmethod
    def from_settings(cls, settings: Settings) -> ExtractionConfig:
        """Build a config from service settings."""
        return cls(
            timeout_seconds=settings.scrape_request_timeout,
            max_redirects=settings.scrape_max_redirects,
            max_attempts=settings.scrape_max_attempts,
            pre_request_delay=settings.scrape_pre_request_delay,
            pre_request_jitter=settings.scrape_pre_request_jitter,
            retry_backoff=settings.scrape_retry_backoff,
            retry_jitter=settings.scrape_retry_jitter,
            min_content_length=settings.extraction_min_content_length,
            specialized_min_length=settings.extraction_specialized_min_length,
            chapter_match_min_length=settings.extraction_chapter_match_min_length,
            chapter_min_length=settings.extraction_chapter_min_length,
            container_min_length=settings.extraction_container_min_length,
            selector_min_length=settings.extraction_selector_min_length,
            paragraph_min_length=settings.extraction_paragraph_min_length,
            paragraph_max_fragments=settings.extraction_paragraph_max_fragments,
            title_min_length=settings.extraction_title_min_length,
            contamination_ratio=settings.extraction_contamination_ratio,
        )


@dataclass(frozen=True)
class FetchResult:
    """Raw HTTP response for a single successful fetch."""

    raw_bytes: bytes
    headers: dict[str, str]  # Lower-cased header names
    final_url: str
    status_code: int


class EncodingSource(str, enum.Enum):
    """Which signal decided the codec."""

    HEADER = "header"
    BOM = "bom"
    META_TAG = "meta-tag"
    DOMAIN_HEURISTIC = "domain-heuristic"
    BYTE_STATISTICS = "byte-statistics"
    DEFAULT = "default"


@dataclass(frozen=True)
class EncodingDecision:
    codec: str
    source: EncodingSource


@dataclass(frozen=True)
class ExtractionCandidate:
    """Provisional text produced by one extraction strategy."""

    strategy_id: str
    raw_text: str

    @property
    def length(self) -> int:
        return len(self.raw_text)


@dataclass
class ExtractedDocument:
    """Result of content extraction."""

    title: str
    content: str
    url: str
    word_count: int = 0  # Auto-calculated
    extracted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    extraction_method: str = ""  # Which strategy produced the content

    def __post_init__(self) -> None:
        if self.word_count == 0:
            self.word_count = len(self.content.split())


@dataclass(frozen=True)
class ValidationVerdict:
    """Outcome of content validation."""

    valid: bool
    reason: str  # "ok", "too_short" or "contaminated"
    diagnostics: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ScrapeResult:
    """Everything a successful scrape returns."""

    document: ExtractedDocument
    encoding: EncodingDecision
    processing_time_ms: float = 0.0
