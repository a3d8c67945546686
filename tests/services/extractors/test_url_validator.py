"""Tests for scrape URL validation."""

from __future__ import annotations

import pytest

from scraper_service.services.extractors.exceptions import (
    InputValidationError,
    InvalidInputError,
    InvalidUrlFormatError,
    UnsupportedProtocolError,
)
from scraper_service.services.extractors.url_validator import MAX_URL_LENGTH, validate_url


class TestValidUrls:
    """URLs that pass validation."""

    @pytest.mark.parametrize(
        "url",
        [
            "http://example.com",
            "https://www.69shuba.com/txt/12345/67890",
            "https://example.com:8443/path?q=1#frag",
            "HTTPS://EXAMPLE.COM/Chapter",
        ],
    )
    def test_accepts_http_and_https(self, url: str) -> None:
        """http and https URLs are returned unchanged."""
        assert validate_url(url) == url

    def test_trims_surrounding_whitespace(self) -> None:
        """Leading and trailing whitespace is removed."""
        assert validate_url("  https://example.com/a  \n") == "https://example.com/a"


class TestMissingInput:
    """Missing or blank values."""

    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n", 42, ["https://x.com"]])
    def test_rejects_missing_values(self, value: object) -> None:
        """Non-strings and blank strings raise InvalidInputError."""
        with pytest.raises(InvalidInputError) as exc_info:
            validate_url(value)

        assert exc_info.value.status == 400
        assert exc_info.value.error == (
            "Invalid input: URL is required and cannot be empty"
        )


class TestMalformedUrls:
    """Values that are not absolute URIs."""

    @pytest.mark.parametrize(
        "url",
        [
            "not a url",
            "example.com/page",
            "http://",
            "https://[::1",
            "http://example.com:99999/",
            "http://exa mple.com/",
        ],
    )
    def test_rejects_malformed(self, url: str) -> None:
        """Unparseable URLs raise InvalidUrlFormatError."""
        with pytest.raises(InvalidUrlFormatError) as exc_info:
            validate_url(url)

        assert exc_info.value.error == "Invalid URL format"

    def test_length_limit(self) -> None:
        """URLs longer than MAX_URL_LENGTH are malformed; the limit itself is allowed."""
        base = "https://example.com/"
        at_limit = base + "a" * (MAX_URL_LENGTH - len(base))

        assert validate_url(at_limit) == at_limit
        with pytest.raises(InvalidUrlFormatError):
            validate_url(at_limit + "a")


class TestUnsupportedProtocols:
    """Absolute URIs with a scheme other than http(s)."""

    @pytest.mark.parametrize(
        "url",
        [
            "ftp://example.com/file.txt",
            "javascript:alert(1)",
            "file:///etc/passwd",
            "mailto:someone@example.com",
        ],
    )
    def test_rejects_other_schemes(self, url: str) -> None:
        """Non-web schemes raise UnsupportedProtocolError."""
        with pytest.raises(UnsupportedProtocolError) as exc_info:
            validate_url(url)

        assert exc_info.value.error == (
            "Invalid protocol: Only HTTP and HTTPS URLs are allowed"
        )

    def test_all_input_errors_share_base(self) -> None:
        """Every validation failure is an InputValidationError with status 400."""
        for bad in ("", "nope", "ftp://x.com"):
            with pytest.raises(InputValidationError) as exc_info:
                validate_url(bad)
            assert exc_info.value.to_payload()["status"] == 400
