"""HTML content extractor for web-fiction chapter pages.

Extraction runs as a cascade of strategies, each a callable taking the parsed
document and returning an :class:`ExtractionCandidate` or ``None``. The first
strategy to produce a candidate wins:

1. specialized-site selectors (known hosts only)
2. whole-body chapter pattern (known hosts only)
3. generic content containers, cut at the first chapter heading
4. ranking of a long list of convention selectors by text length
5. aggregation of paragraph-like fragments
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from functools import partial

from bs4 import BeautifulSoup
from bs4.element import Tag

from scraper_service.services.extractors.base import (
    ExtractedDocument,
    ExtractionCandidate,
    ExtractionConfig,
)
from scraper_service.services.extractors.cleanup import (
    CHAPTER_CLEANUP_RULES,
    CHAPTER_HEADING_PATTERN,
    CHAPTER_SPAN_PATTERNS,
    EXTRACTION_CONTAMINATION_PATTERNS,
    LEADING_BRACKET,
    MINIMAL_CLEANUP_RULES,
    SELECTOR_TEXT_RULES,
    STRICT_CONTAMINATION_PATTERN,
    apply_rules,
    collapse_whitespace,
    has_chapter_heading,
    is_contaminated,
)
from scraper_service.services.extractors.sites import (
    SpecializedSite,
    find_specialized_site,
)

logger = logging.getLogger(__name__)

Strategy = Callable[[BeautifulSoup], "ExtractionCandidate | None"]

PLACEHOLDER_TITLE = "Scraped Content"

# Page chrome removed before any extraction
CHROME_SELECTORS = (
    "script, style, nav, header, footer, aside, "
    ".advertisement, .ads, .sidebar, .nav, .menu"
)
_AD_MARKER = re.compile(r"(?:^|[-_])ads?(?:[-_]|$)|advert|banner", re.IGNORECASE)

TITLE_SELECTORS = (
    ".bookname",
    ".book-name",
    ".title",
    ".chapter-title",
    ".article-title",
    ".post-title",
    "#title",
)

CONTAINER_SELECTORS = ("#content", ".content", ".txtnav", "#txtnav", ".readcontent", "body")

RANKING_SELECTORS = (
    # Broad containers
    "body", "html", "#wrapper", ".wrapper", "#container", ".container",
    "#main", ".main", "#page", ".page", "main", "article",
    # Chinese novel site conventions
    "#content", ".content", "#chapter_content", ".chapter-content",
    ".txtnav", "#txtnav", ".readcontent", ".read-content", "#readcontent",
    ".novel_content", "#novel_content", ".articlecontent", "#articlecontent",
    ".yd_text2", ".showtxt", ".bookcontent", ".book-content",
    ".chapter_content", ".chaptercontent", ".chapter-text", ".chapter_text",
    ".txt", ".text", "#txt", "#text", ".main-text", ".maintext",
    ".story-content", ".story_content", ".novel-text", ".novel_text",
    # Qidian and similar
    "#j_chapterBox", ".chapter-content-wrap",
    ".chapter-body", ".chapter_body", ".text-content", ".text_content",
    # Blog style
    ".post-content", ".entry-content", ".page-content", ".article-content",
    # Attribute substrings
    'div[id*="content"]', 'div[class*="content"]',
    'div[id*="chapter"]', 'div[class*="chapter"]',
    'div[id*="text"]', 'div[class*="text"]',
    'div[id*="read"]', 'div[class*="read"]',
    'div[id*="novel"]', 'div[class*="novel"]',
    'div[id*="story"]', 'div[class*="story"]',
)

PARAGRAPH_TAGS = ["p", "div", "span", "td", "li", "pre"]


def _is_ad_container(tag: Tag) -> bool:
    markers = list(tag.get("class") or [])
    element_id = tag.get("id")
    if isinstance(element_id, str):
        markers.append(element_id)
    return any(_AD_MARKER.search(marker) for marker in markers)


def strip_chrome(soup: BeautifulSoup) -> None:
    """Remove scripts, navigation, sidebars and ad containers in place."""
    for element in soup.select(CHROME_SELECTORS) + soup.find_all(_is_ad_container):
        # Descendants of an element removed earlier are already gone
        if not element.decomposed:
            element.decompose()


def _selection_text(soup: BeautifulSoup, selector: str, separator: str = "\n") -> str:
    elements = soup.select(selector)
    return separator.join(element.get_text().strip() for element in elements).strip()


class HTMLExtractor:
    """Extract the title and chapter text from a web-fiction page."""

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    def extract(self, html: str, url: str) -> ExtractedDocument:
        """Extract content from HTML.

        Args:
            html: Decoded HTML document
            url: Source URL, used to pick a specialized selector pack

        Returns:
            ExtractedDocument; ``content`` is empty when every strategy failed.
            Acceptability is decided by the content validator.
        """
        soup = BeautifulSoup(html, "lxml")
        strip_chrome(soup)

        title = self.extract_title(soup)
        site = find_specialized_site(url)

        candidate: ExtractionCandidate | None = None
        for strategy in self._strategies(site):
            candidate = strategy(soup)
            if candidate is not None:
                break

        if candidate is None:
            logger.info("No extraction strategy produced content for %s", url)
            return ExtractedDocument(
                title=title, content="", url=url, extraction_method="none"
            )

        content = collapse_whitespace(candidate.raw_text)
        logger.info(
            "Extracted %d chars from %s using %s",
            len(content),
            url,
            candidate.strategy_id,
        )
        return ExtractedDocument(
            title=title,
            content=content,
            url=url,
            extraction_method=candidate.strategy_id,
        )

    # ------------------------------------------------------------------
    # Title
    # ------------------------------------------------------------------

    def extract_title(self, soup: BeautifulSoup) -> str:
        """Return the first title candidate long enough to be meaningful.

        Falls back to the first non-empty candidate, then to a placeholder.
        """
        fallback = ""
        for text in self._title_candidates(soup):
            if len(text) >= self.config.title_min_length:
                return text
            if text and not fallback:
                fallback = text
        return fallback or PLACEHOLDER_TITLE

    def _title_candidates(self, soup: BeautifulSoup) -> Iterator[str]:
        if soup.title is not None:
            yield collapse_whitespace(soup.title.get_text())
        heading = soup.find("h1")
        if heading is not None:
            yield collapse_whitespace(heading.get_text())
        for selector in TITLE_SELECTORS:
            element = soup.select_one(selector)
            if element is not None:
                yield collapse_whitespace(element.get_text())

    # ------------------------------------------------------------------
    # Content strategies
    # ------------------------------------------------------------------

    def _strategies(self, site: SpecializedSite | None) -> list[Strategy]:
        strategies: list[Strategy] = []
        if site is not None:
            strategies.append(partial(self._specialized_selector_scan, site=site))
            strategies.append(self._chapter_pattern_scan)
        strategies.extend(
            [
                self._container_best_effort,
                self._selector_ranking,
                self._paragraph_aggregation,
            ]
        )
        return strategies

    def _specialized_selector_scan(
        self, soup: BeautifulSoup, *, site: SpecializedSite
    ) -> ExtractionCandidate | None:
        for selector in site.content_selectors:
            elements = soup.select(selector)
            if not elements:
                continue

            raw_text = "\n\n".join(el.get_text().strip() for el in elements).strip()
            cleaned = apply_rules(raw_text, CHAPTER_CLEANUP_RULES)
            contaminated = is_contaminated(cleaned, EXTRACTION_CONTAMINATION_PATTERNS)
            if len(cleaned) > self.config.specialized_min_length and not contaminated:
                return ExtractionCandidate(f"{site.name}:{selector}", cleaned)

            logger.debug(
                "%s selector %s rejected: %d chars, contaminated=%s",
                site.name,
                selector,
                len(cleaned),
                contaminated,
            )
        return None

    def _chapter_pattern_scan(self, soup: BeautifulSoup) -> ExtractionCandidate | None:
        if soup.body is None:
            return None
        chapter = self._first_chapter_span(soup.body.get_text().strip())
        if chapter is None:
            logger.debug("No chapter span found in body text")
            return None

        cleaned = apply_rules(chapter, CHAPTER_CLEANUP_RULES)
        if (
            len(cleaned) > self.config.chapter_min_length
            and has_chapter_heading(cleaned)
            and STRICT_CONTAMINATION_PATTERN.search(cleaned) is None
        ):
            return ExtractionCandidate("chapter-pattern", cleaned)

        logger.debug("Chapter span rejected after cleanup: %d chars", len(cleaned))
        return None

    def _first_chapter_span(self, text: str) -> str | None:
        for pattern in CHAPTER_SPAN_PATTERNS:
            match = pattern.search(text)
            if match and len(match.group(0)) > self.config.chapter_match_min_length:
                return match.group(0)
        return None

    def _container_best_effort(self, soup: BeautifulSoup) -> ExtractionCandidate | None:
        best_selector, best_text = "", ""
        for selector in CONTAINER_SELECTORS:
            text = _selection_text(soup, selector)
            if len(text) > len(best_text):
                best_selector, best_text = selector, text

        heading = CHAPTER_HEADING_PATTERN.search(best_text)
        if heading is None:
            return None

        chapter = collapse_whitespace(
            apply_rules(best_text[heading.start():], MINIMAL_CLEANUP_RULES)
        )
        if len(chapter) > self.config.container_min_length:
            return ExtractionCandidate(f"container:{best_selector}", chapter)
        return None

    def _selector_ranking(self, soup: BeautifulSoup) -> ExtractionCandidate | None:
        best: ExtractionCandidate | None = None
        for selector in RANKING_SELECTORS:
            text = apply_rules(_selection_text(soup, selector), SELECTOR_TEXT_RULES)
            if len(text) <= self.config.selector_min_length:
                continue
            # Strictly longer wins so earlier selectors keep ties
            if best is None or len(text) > best.length:
                best = ExtractionCandidate(f"selector:{selector}", text)
        return best

    def _paragraph_aggregation(self, soup: BeautifulSoup) -> ExtractionCandidate | None:
        """Join paragraph-like fragments.

        Script, style, navigation and ad containers were removed by
        :func:`strip_chrome`, so their text never reaches this point.
        """
        fragments: list[str] = []
        for element in soup.find_all(PARAGRAPH_TAGS):
            text = LEADING_BRACKET.sub("", collapse_whitespace(element.get_text()), count=1)
            text = text.strip()
            if len(text) < self.config.paragraph_min_length:
                continue
            fragments.append(text)
            if len(fragments) >= self.config.paragraph_max_fragments:
                break

        if not fragments:
            return None
        return ExtractionCandidate("paragraphs", "\n\n".join(fragments))
