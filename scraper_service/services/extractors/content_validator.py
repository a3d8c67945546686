"""Acceptance checks for extracted documents."""

from __future__ import annotations

import logging

from scraper_service.services.extractors.base import (
    ExtractedDocument,
    ExtractionConfig,
    ValidationVerdict,
)
from scraper_service.services.extractors.cleanup import (
    VALIDATION_CONTAMINATION_PATTERNS,
    has_chapter_heading,
    matched_patterns,
    ui_keyword_ratio,
)
from scraper_service.services.extractors.sites import (
    GENERIC_SUGGESTION,
    find_specialized_site,
)

logger = logging.getLogger(__name__)


def validate_content(
    document: ExtractedDocument,
    url: str,
    config: ExtractionConfig | None = None,
) -> ValidationVerdict:
    """Decide whether *document* is clean enough to return.

    Every document must reach the minimum length. Documents from specialized
    sites must also be free of reading-UI phrases, contain a chapter heading,
    and keep UI keywords under the configured share of the text.
    """
    config = config or ExtractionConfig()
    content = document.content

    if len(content) < config.min_content_length:
        return ValidationVerdict(
            valid=False,
            reason="too_short",
            diagnostics={
                "title": document.title,
                "contentLength": len(content),
                "url": url,
                "suggestion": GENERIC_SUGGESTION,
            },
        )

    site = find_specialized_site(url)
    if site is None:
        return ValidationVerdict(valid=True, reason="ok")

    matched = matched_patterns(content, VALIDATION_CONTAMINATION_PATTERNS)
    has_chapter = has_chapter_heading(content)
    ratio = ui_keyword_ratio(content)

    if matched or not has_chapter or ratio > config.contamination_ratio:
        logger.warning(
            "%s content rejected: contaminated=%s, has_chapter=%s, ratio=%.3f",
            site.name,
            bool(matched),
            has_chapter,
            ratio,
        )
        return ValidationVerdict(
            valid=False,
            reason="contaminated",
            diagnostics={
                "title": document.title,
                "contentLength": len(content),
                "contaminated": bool(matched),
                "matchedPatterns": matched,
                "hasChapterStructure": has_chapter,
                "contentQualityRatio": round(ratio, 3),
                "url": url,
                "suggestion": site.suggestion,
            },
        )

    return ValidationVerdict(valid=True, reason="ok")
