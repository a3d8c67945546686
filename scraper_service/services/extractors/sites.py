"""Web-fiction hosts with bespoke extraction selectors."""

from __future__ import annotations

from dataclasses import dataclass

from scraper_service.services.extractors.encoding import host_matches


@dataclass(frozen=True)
class SpecializedSite:
    """Selector pack for one web-fiction host."""

    name: str
    domains: tuple[str, ...]
    content_selectors: tuple[str, ...]
    suggestion: str


SHUBA69 = SpecializedSite(
    name="69shuba",
    domains=("69shuba.com",),
    content_selectors=(
        ".txtnav",  # Primary chapter container
        "#txtnav",
        ".readcontent",
        "#readcontent",
        ".chapter-content",
        "#chapter-content",
        ".content",
        "#content",
        ".bookcontent",
        "#bookcontent",
        'div[class*="txt"]',
        'div[id*="txt"]',
        'div[class*="read"]',
        'div[id*="read"]',
    ),
    suggestion=(
        "Try using a direct chapter URL from 69shuba.com, or check if the page "
        "structure has changed."
    ),
)

SPECIALIZED_SITES: tuple[SpecializedSite, ...] = (SHUBA69,)

GENERIC_SUGGESTION = (
    "For novel sites like 69shuba, try using a direct chapter URL instead of "
    "the main page."
)


def find_specialized_site(url: str) -> SpecializedSite | None:
    """Return the selector pack for *url*'s host, if it has one."""
    for site in SPECIALIZED_SITES:
        if host_matches(url, site.domains):
            return site
    return None
