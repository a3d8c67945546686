"""Regex tables used to clean and vet extracted chapter text.

Rules are immutable ``(pattern, replacement)`` pairs applied in order by
:func:`apply_rules`. Nothing here holds state, so the tables are shared
freely across concurrent scrapes.
"""

from __future__ import annotations

import re


Rule = tuple[re.Pattern[str], str]

_CN_NUMERALS = "一二三四五六七八九十百千万零〇两"


def _rules(*pairs: tuple[str, str] | tuple[str, str, int]) -> tuple[Rule, ...]:
    compiled = []
    for pair in pairs:
        pattern, replacement, *flags = pair
        compiled.append((re.compile(pattern, *flags), replacement))
    return tuple(compiled)


# Whitespace tidy-up that keeps paragraph breaks
WHITESPACE_RULES = _rules(
    (r"[ \t]+", " "),
    (r"\n[ \t]+", "\n"),
    (r"[ \t]+\n", "\n"),
    (r"\n{3,}", "\n\n"),
)

# Reading controls, chapter navigation, author lines, site footers and ads
CHAPTER_CLEANUP_RULES = _rules(
    (r"书页\s*目录\s*设置\s*白天", ""),
    (r"上一章\s*目录\s*下一章", ""),
    (r"上一页\s*目录\s*下一页", ""),
    (r"返回目录\s*上一章\s*下一章", ""),
    (r"关闭\s*背景\s*字体.*$", "", re.M),
    (r"雅黑\s*苹方\s*等线.*$", "", re.M),
    (r"字号.*$", "", re.M),
    (r"\d{4}-\d{2}-\d{2}\s*作者[：:]\s*[^\n\r]+", ""),
    (r"作者[：:]\s*[^\n\r]+", ""),
    (r"字体大小\s*[+-]\s*", ""),
    (r"背景颜色\s*", ""),
    (r"字体颜色\s*", ""),
    (r"阅读设置\s*", ""),
    (r"护眼模式\s*", ""),
    (r"夜间模式\s*", ""),
    (r"日间模式\s*", ""),
    (r"本站域名.*$", "", re.M),
    (r"请记住本站.*$", "", re.M),
    (r"如果您喜欢.*$", "", re.M),
    (r"广告.*$", "", re.M),
    (r"推荐.*小说.*$", "", re.M),
) + WHITESPACE_RULES

# Only the obvious UI blocks; everything after a display-control block goes
MINIMAL_CLEANUP_RULES = _rules(
    (r"书页\s*目录\s*设置\s*白天", ""),
    (r"上一章\s*目录\s*下一章", ""),
    (r"关闭\s*背景\s*字体.*", "", re.S),
    (r"雅黑\s*苹方\s*等线.*", "", re.S),
    (r"字号.*", "", re.S),
    (r"\s*-\s*\Z", ""),
)

# Residual markup in text pulled out by broad selectors
SELECTOR_TEXT_RULES = _rules(
    (r"\s*<[^>]*>\s*", " "),
    (r"\s*&[a-zA-Z0-9#]+;\s*", " "),
    (r"\s+", " "),
)

LEADING_BRACKET = re.compile(r"^\s*[\[\]【】()（）]\s*")
WHITESPACE_RUN = re.compile(r"\s+")

# Residual UI fragments that disqualify a selector match
EXTRACTION_CONTAMINATION_PATTERNS = (
    re.compile(r"书页.*目录.*设置.*白天"),
    re.compile(r"上一章.*目录.*下一章"),
    re.compile(r"字体大小.*背景颜色"),
    re.compile(r"阅读设置.*护眼模式"),
)

STRICT_CONTAMINATION_PATTERN = re.compile(r"书页.*目录.*设置|字体大小.*背景")

VALIDATION_CONTAMINATION_PATTERNS = EXTRACTION_CONTAMINATION_PATTERNS + (
    re.compile(r"雅黑.*苹方.*等线"),
    re.compile(r"关闭.*背景.*字体"),
)

UI_KEYWORD_PATTERN = re.compile(r"书页|目录|设置|白天|上一章|下一章|字体|背景")

# Chapter headings: 第12章, 第十二章, Chapter 12
CHAPTER_HEADING_PATTERN = re.compile(
    rf"第\s*\d+\s*章|第[{_CN_NUMERALS}\d]+章|\bChapter\s+\d+",
    re.IGNORECASE,
)

# One chapter: a heading up to the next heading of the same form or the end
CHAPTER_SPAN_PATTERNS = (
    re.compile(r"第\s*\d+\s*章.*?(?=第\s*\d+\s*章|\Z)", re.S),
    re.compile(
        rf"第[{_CN_NUMERALS}\d]+章.*?(?=第[{_CN_NUMERALS}\d]+章|\Z)",
        re.S,
    ),
    re.compile(r"\bChapter\s+\d+.*?(?=\bChapter\s+\d+|\Z)", re.S | re.IGNORECASE),
)


def apply_rules(text: str, rules: tuple[Rule, ...]) -> str:
    """Apply each rule in order and strip the result."""
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text.strip()


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RUN.sub(" ", text).strip()


def matched_patterns(text: str, patterns: tuple[re.Pattern[str], ...]) -> list[str]:
    """Return the source of every pattern that matches *text*."""
    return [pattern.pattern for pattern in patterns if pattern.search(text)]


def is_contaminated(text: str, patterns: tuple[re.Pattern[str], ...]) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def has_chapter_heading(text: str) -> bool:
    return CHAPTER_HEADING_PATTERN.search(text) is not None


def ui_keyword_ratio(text: str) -> float:
    """Share of *text* made up of reading-UI keywords."""
    if not text:
        return 0.0
    matched = sum(len(m.group(0)) for m in UI_KEYWORD_PATTERN.finditer(text))
    return matched / len(text)
