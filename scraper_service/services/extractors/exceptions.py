"""Exception hierarchy for the scraping pipeline.

Every failure the pipeline can produce is a :class:`ScrapeError` carrying the
HTTP status, a short error label and a user-facing message, so routes can
render any of them with :meth:`ScrapeError.to_payload`.
"""

from __future__ import annotations

import enum
from typing import Any


class ScrapeError(Exception):
    """Base exception for all scraping errors."""

    status: int = 500
    error: str = "Scraping service error"
    default_message: str = "Unable to scrape the webpage. Please try again later."

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON error body for this failure."""
        payload: dict[str, Any] = {
            "status": self.status,
            "error": self.error,
            "message": self.message,
        }
        if self.details is not None:
            payload["details"] = self.details
        return payload


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class InputValidationError(ScrapeError):
    """Raised before any network call when the URL is unusable."""

    status = 400
    error = "Invalid URL"


class InvalidInputError(InputValidationError):
    """URL missing, empty or whitespace only."""

    error = "Invalid input: URL is required and cannot be empty"
    default_message = "请输入有效的URL (Please enter a valid URL)"


class InvalidUrlFormatError(InputValidationError):
    """URL could not be parsed as an absolute URI."""

    error = "Invalid URL format"
    default_message = "URL格式无效 (Invalid URL format)"


class UnsupportedProtocolError(InputValidationError):
    """URL scheme is neither http nor https."""

    error = "Invalid protocol: Only HTTP and HTTPS URLs are allowed"
    default_message = (
        "仅支持HTTP和HTTPS协议 (Only HTTP and HTTPS protocols are supported)"
    )


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


class FailureKind(str, enum.Enum):
    """Classification of a single failed fetch attempt."""

    TIMEOUT = "timeout"
    CONNECTION = "connection"
    HTTP_STATUS = "http_status"
    REQUEST = "request"


class NetworkError(ScrapeError):
    """Raised for fetch failures (status, timeout, connection, DNS)."""

    def __init__(
        self,
        message: str | None = None,
        *,
        url: str = "",
        status_code: int | None = None,
        attempts: int = 0,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.attempts = attempts
        self.cause = cause


class PermanentFetchError(NetworkError):
    """Raised without retrying when the server answers 403 or 404."""

    _LABELS = {
        403: (
            "Access forbidden",
            "The website has blocked access to this content. This might be due "
            "to anti-scraping measures or geographic restrictions.",
        ),
        404: (
            "Page not found",
            "The requested page could not be found. Please check the URL and "
            "try again.",
        ),
    }

    def __init__(self, status_code: int, *, url: str = "", attempts: int = 1) -> None:
        error, message = self._LABELS[status_code]
        super().__init__(message, url=url, status_code=status_code, attempts=attempts)
        self.status = status_code
        self.error = error


class FetchRetriesExhaustedError(NetworkError):
    """Raised when every attempt in the retry budget failed transiently."""

    def __init__(
        self,
        kind: FailureKind,
        *,
        url: str = "",
        status_code: int | None = None,
        attempts: int = 0,
        cause: Exception | None = None,
    ) -> None:
        self.kind = kind
        status, error, message = self._classify(kind, status_code)
        super().__init__(
            message,
            url=url,
            status_code=status_code,
            attempts=attempts,
            cause=cause,
        )
        self.status = status
        self.error = error

    @staticmethod
    def _classify(kind: FailureKind, status_code: int | None) -> tuple[int, str, str]:
        if kind is FailureKind.TIMEOUT:
            return (
                408,
                "Request timeout",
                "The website took too long to respond. Please try again later.",
            )
        if kind is FailureKind.CONNECTION:
            return (
                404,
                "Website not found",
                "Unable to connect to the specified website. Please check the "
                "URL and try again.",
            )
        if kind is FailureKind.HTTP_STATUS and status_code is not None and status_code >= 500:
            return (
                502,
                "Server error",
                "The target website is experiencing server issues. Please try "
                "again later.",
            )
        return (
            ScrapeError.status,
            ScrapeError.error,
            ScrapeError.default_message,
        )


class EmptyResponseError(NetworkError):
    """Raised when the server answered successfully with an empty body."""

    default_message = "Empty response from server"


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


class ExtractionFailedError(ScrapeError):
    """Raised when extraction produces insufficient content."""

    status = 422
    error = "Content extraction failed"
    default_message = (
        "Unable to extract meaningful content from the webpage. The page might "
        "be protected, have a complex structure, require JavaScript rendering, "
        "or be a navigation/index page."
    )


class ExtractionContaminatedError(ExtractionFailedError):
    """Raised when extracted content still carries reading-UI chrome."""

    error = "Content extraction contaminated"
    default_message = (
        "The extracted content contains navigation elements and UI text instead "
        "of clean chapter content. This usually happens when the scraper "
        "captures the wrong page elements."
    )
