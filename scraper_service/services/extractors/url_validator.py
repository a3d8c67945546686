"""URL validation for scrape requests."""

from __future__ import annotations

from urllib.parse import urlsplit

from scraper_service.services.extractors.exceptions import (
    InvalidInputError,
    InvalidUrlFormatError,
    UnsupportedProtocolError,
)

ALLOWED_SCHEMES = frozenset({"http", "https"})
MAX_URL_LENGTH = 2048


def validate_url(raw: object) -> str:
    """Validate a user supplied URL and return it trimmed.

    Args:
        raw: Value received from the caller (usually a string).

    Returns:
        The trimmed URL.

    Raises:
        InvalidInputError: If the value is missing, not a string or blank.
        InvalidUrlFormatError: If the value is not an absolute URI or is
            longer than MAX_URL_LENGTH.
        UnsupportedProtocolError: If the scheme is not http or https.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidInputError()

    url = raw.strip()
    if len(url) > MAX_URL_LENGTH:
        raise InvalidUrlFormatError()

    try:
        parts = urlsplit(url)
        # Accessing .port validates the port component
        parts.port
    except ValueError as e:
        raise InvalidUrlFormatError() from e

    if not parts.scheme:
        raise InvalidUrlFormatError()
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise UnsupportedProtocolError()
    if not parts.hostname or any(ch.isspace() for ch in parts.netloc):
        raise InvalidUrlFormatError()

    return url
