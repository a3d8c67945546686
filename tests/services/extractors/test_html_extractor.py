"""Tests for HTML content extraction."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from scraper_service.services.extractors.base import ExtractionConfig
from scraper_service.services.extractors.cleanup import collapse_whitespace
from scraper_service.services.extractors.html_extractor import (
    PLACEHOLDER_TITLE,
    HTMLExtractor,
    strip_chrome,
)

SHUBA_URL = "https://www.69shuba.com/txt/12345/67890"
GENERIC_URL = "https://example.com/book/1/chapter/3"

ENGLISH_SENTENCE = "The rain hammered the old roof while Lin waited for the dawn to break. "
ENGLISH_NARRATIVE = ENGLISH_SENTENCE * 15  # ~1000 chars

CHINESE_SENTENCE = "少年站在山巅，望着远方的云海，心中涌起无限豪情。"
CHINESE_NARRATIVE = CHINESE_SENTENCE * 50  # 1200 chars

# Specialized site, primary selector
SHUBA_CHAPTER_HTML = f"""
<!DOCTYPE html>
<html>
<head><title>Test</title></head>
<body>
<div class="txtnav">
<p>Chapter 1</p>
<p>{ENGLISH_NARRATIVE}</p>
<div>上一章 目录 下一章</div>
</div>
</body>
</html>
"""

# Specialized site where no selector matches, chapter text sits in <section>
SHUBA_SECTION_HTML = f"""
<html>
<head><title>第1章 风起</title></head>
<body>
<section>
<p>第1章 风起</p>
<p>{CHINESE_NARRATIVE}</p>
</section>
</body>
</html>
"""

# Specialized site whose first chapter span is too short, a long one follows
SHUBA_SHORT_FIRST_SPAN_HTML = f"""
<html>
<head><title>第1章 短</title></head>
<body>
<section>
<p>第1章 短</p>
<p>短内容</p>
<p>第2章 长</p>
<p>{CHINESE_NARRATIVE}</p>
</section>
</body>
</html>
"""

# Specialized site whose container still carries scattered reading controls
SHUBA_CONTAMINATED_HTML = f"""
<html>
<head><title>第5章 暗流</title></head>
<body>
<div class="txtnav">
<p>第5章 暗流</p>
<p>{CHINESE_NARRATIVE}</p>
<p>书页推荐 目录列表 设置选项 白天模式</p>
</div>
</body>
</html>
"""

# Generic site, chapter text under #content with a preamble before the heading
GENERIC_CONTAINER_HTML = f"""
<html>
<body>
<div id="content">
<p>阅读须知</p>
<p>第3章 归途</p>
<p>{CHINESE_SENTENCE * 12}</p>
<p>关闭 背景 字体 雅黑</p>
<p>这里是页面底部的设置面板文字</p>
</div>
</body>
</html>
"""

# Generic article with no chapter heading
ARTICLE_HTML = f"""
<html>
<body>
<article>
<p>{ENGLISH_SENTENCE * 4}</p>
</article>
</body>
</html>
"""

# Page where every container is short
FRAGMENTS_HTML = """
<html>
<body>
<p>【Short line one</p>
<span>ok</span>
</body>
</html>
"""

CHROME_HTML = f"""
<html>
<head><title>Chrome Page</title><style>.x {{ color: red; }}</style></head>
<body>
<header>SITE HEADER</header>
<nav>NAV LINKS</nav>
<div class="ad-banner">SPONSORED</div>
<div id="google_ads">MORE ADS</div>
<div class="readcontent"><p>{ENGLISH_SENTENCE * 4}</p></div>
<aside class="sidebar">SIDEBAR</aside>
<script>var tracking = true;</script>
<footer>FOOTER</footer>
</body>
</html>
"""


class TestSpecializedSite:
    """Extraction for hosts with a selector pack."""

    def test_primary_selector_with_navigation_removed(self) -> None:
        """The .txtnav container is used and its chapter nav is cleaned out."""
        result = HTMLExtractor().extract(SHUBA_CHAPTER_HTML, SHUBA_URL)

        assert result.title == "Test"
        assert result.extraction_method == "69shuba:.txtnav"
        assert result.content == collapse_whitespace(f"Chapter 1 {ENGLISH_NARRATIVE}")
        assert "上一章" not in result.content
        assert "目录" not in result.content
        assert len(result.content) >= 800

    def test_body_chapter_pattern(self) -> None:
        """Without matching selectors the body is scanned for a chapter span."""
        result = HTMLExtractor().extract(SHUBA_SECTION_HTML, SHUBA_URL)

        assert result.extraction_method == "chapter-pattern"
        assert result.content.startswith("第1章 风起")
        assert CHINESE_SENTENCE in result.content

    def test_only_first_chapter_span_is_considered(self) -> None:
        """A short first span ends the chapter scan even if a later span is long."""
        result = HTMLExtractor().extract(SHUBA_SHORT_FIRST_SPAN_HTML, SHUBA_URL)

        assert result.extraction_method == "container:body"
        assert result.content.startswith("第1章 短")
        assert CHINESE_SENTENCE in result.content

    def test_contaminated_selector_falls_through(self) -> None:
        """A selector match that still carries reading controls is skipped."""
        result = HTMLExtractor().extract(SHUBA_CONTAMINATED_HTML, SHUBA_URL)

        assert not result.extraction_method.startswith("69shuba:")
        assert result.extraction_method != "chapter-pattern"
        assert result.extraction_method.startswith("container:")
        assert result.content.startswith("第5章 暗流")

    def test_selectors_not_used_for_other_hosts(self) -> None:
        """Generic hosts never report a specialized strategy."""
        result = HTMLExtractor().extract(SHUBA_CHAPTER_HTML, GENERIC_URL)

        assert not result.extraction_method.startswith("69shuba:")


class TestGenericStrategies:
    """Container, selector ranking and paragraph strategies."""

    def test_container_cut_at_first_heading(self) -> None:
        """Text before the heading and after display controls is dropped."""
        result = HTMLExtractor().extract(GENERIC_CONTAINER_HTML, GENERIC_URL)

        # #content and body carry the same text; the earlier selector wins
        assert result.extraction_method == "container:#content"
        assert result.content.startswith("第3章 归途")
        assert "阅读须知" not in result.content
        assert "关闭" not in result.content
        assert "设置面板" not in result.content

    def test_selector_ranking_without_heading(self) -> None:
        """Pages without a chapter heading use the longest selector text."""
        result = HTMLExtractor().extract(ARTICLE_HTML, GENERIC_URL)

        assert result.extraction_method.startswith("selector:")
        assert result.content == collapse_whitespace(ENGLISH_SENTENCE * 4)

    def test_paragraph_aggregation(self) -> None:
        """Short pages fall back to paragraph fragments."""
        result = HTMLExtractor().extract(FRAGMENTS_HTML, GENERIC_URL)

        assert result.extraction_method == "paragraphs"
        assert result.content == "Short line one"

    def test_paragraph_fragment_limit(self) -> None:
        """At most paragraph_max_fragments fragments are joined."""
        html = "<html><body>" + "".join(
            f"<p>fragment number {i}</p>" for i in range(30)
        ) + "</body></html>"
        config = ExtractionConfig(selector_min_length=10_000, paragraph_max_fragments=5)
        result = HTMLExtractor(config).extract(html, GENERIC_URL)

        assert result.extraction_method == "paragraphs"
        assert result.content == " ".join(f"fragment number {i}" for i in range(5))

    def test_empty_document(self) -> None:
        """An empty page produces empty content and the placeholder title."""
        result = HTMLExtractor().extract("", GENERIC_URL)

        assert result.content == ""
        assert result.extraction_method == "none"
        assert result.title == PLACEHOLDER_TITLE
        assert result.word_count == 0

    def test_extraction_is_deterministic(self) -> None:
        """The same input yields the same output."""
        extractor = HTMLExtractor()
        first = extractor.extract(SHUBA_CHAPTER_HTML, SHUBA_URL)
        second = extractor.extract(SHUBA_CHAPTER_HTML, SHUBA_URL)

        assert first.content == second.content
        assert first.extraction_method == second.extraction_method

    def test_word_count_calculation(self) -> None:
        """Word count matches the whitespace split of the content."""
        result = HTMLExtractor().extract(ARTICLE_HTML, GENERIC_URL)

        assert result.word_count == len(result.content.split())
        assert result.word_count > 0


class TestTitleExtraction:
    """Title cascade."""

    @pytest.mark.parametrize(
        ("html", "expected"),
        [
            ("<title>Long Title</title><h1>Heading</h1>", "Long Title"),
            ("<title>abc</title><h1>Main Heading</h1>", "Main Heading"),
            ("<title></title><div class='bookname'>  Book \n Name </div>", "Book Name"),
            ("<title>abc</title><h1>xy</h1>", "abc"),
            ("<p>no title here</p>", PLACEHOLDER_TITLE),
        ],
    )
    def test_title_cascade(self, html: str, expected: str) -> None:
        """First candidate of five or more characters, else first non-empty."""
        soup = BeautifulSoup(f"<html><head></head><body>{html}</body></html>", "lxml")

        assert HTMLExtractor().extract_title(soup) == expected


class TestStripChrome:
    """Removal of page chrome before extraction."""

    def test_removes_scripts_navigation_and_ads(self) -> None:
        """Chrome elements disappear while content containers stay."""
        soup = BeautifulSoup(CHROME_HTML, "lxml")
        strip_chrome(soup)
        text = soup.get_text()

        for marker in ("SITE HEADER", "NAV LINKS", "SPONSORED", "MORE ADS", "SIDEBAR", "FOOTER", "tracking", "color: red"):
            assert marker not in text
        assert soup.select_one(".readcontent") is not None
        assert "The rain hammered" in text

    def test_extracted_content_excludes_chrome(self) -> None:
        """Chrome text never reaches the extracted content."""
        result = HTMLExtractor().extract(CHROME_HTML, GENERIC_URL)

        assert "SPONSORED" not in result.content
        assert "FOOTER" not in result.content
        assert "The rain hammered" in result.content
