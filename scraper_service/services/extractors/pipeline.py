"""Scrape pipeline orchestrating validation, fetching, decoding and extraction."""

from __future__ import annotations

import logging
import time

from scraper_service.services.extractors.base import ExtractionConfig, ScrapeResult
from scraper_service.services.extractors.content_validator import validate_content
from scraper_service.services.extractors.encoding import decode_content, detect_encoding
from scraper_service.services.extractors.exceptions import (
    ExtractionContaminatedError,
    ExtractionFailedError,
)
from scraper_service.services.extractors.fetcher import Fetcher
from scraper_service.services.extractors.html_extractor import HTMLExtractor
from scraper_service.services.extractors.url_validator import validate_url

logger = logging.getLogger(__name__)


class ScrapePipeline:
    """Turns a URL into a clean chapter document.

    Steps run sequentially: validate URL → fetch bytes (with retries) →
    detect encoding → decode → extract → validate content. Each call is
    independent; the pipeline holds no per-scrape state, so one instance can
    serve concurrent scrapes.
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        *,
        fetcher: Fetcher | None = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.fetcher = fetcher or Fetcher(self.config)
        self.html_extractor = HTMLExtractor(self.config)

    async def scrape(self, url: object) -> ScrapeResult:
        """Scrape *url* and return the extracted document.

        Args:
            url: Raw URL as received from the caller

        Returns:
            ScrapeResult with the document, encoding decision and timing

        Raises:
            InputValidationError: If the URL is unusable (no network call made)
            NetworkError: If fetching fails
            ExtractionFailedError: If too little content was extracted
            ExtractionContaminatedError: If the content still holds UI chrome
        """
        start_time = time.perf_counter()
        target = validate_url(url)
        logger.info("Scraping request for URL: %s", target)

        fetched = await self.fetcher.fetch(target)

        decision = detect_encoding(fetched.headers, fetched.raw_bytes, target)
        html = decode_content(fetched.raw_bytes, decision.codec)
        logger.info(
            "Detected encoding: %s (%s), HTML length: %d",
            decision.codec,
            decision.source.value,
            len(html),
        )

        document = self.html_extractor.extract(html, target)

        verdict = validate_content(document, target, self.config)
        if not verdict.valid:
            details = {**verdict.diagnostics, "encoding": decision.codec}
            if verdict.reason == "contaminated":
                raise ExtractionContaminatedError(details=details)
            raise ExtractionFailedError(details=details)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Scraping completed. Title: %r, content length: %d, encoding: %s",
            document.title,
            len(document.content),
            decision.codec,
        )
        return ScrapeResult(
            document=document,
            encoding=decision,
            processing_time_ms=elapsed_ms,
        )
