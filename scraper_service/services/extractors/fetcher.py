"""Retrying HTTP fetcher for chapter pages."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable

import httpx

from scraper_service.services.extractors.base import ExtractionConfig, FetchResult
from scraper_service.services.extractors.exceptions import (
    EmptyResponseError,
    FailureKind,
    FetchRetriesExhaustedError,
    PermanentFetchError,
)

logger = logging.getLogger(__name__)

# Statuses that will not change on retry
PERMANENT_STATUSES = frozenset({403, 404})

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
    "Accept-Encoding": "gzip, deflate",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Cache-Control": "max-age=0",
    "sec-ch-ua": '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"Windows"',
}

SleepFunc = Callable[[float], Awaitable[None]]


class Fetcher:
    """Fetch raw page bytes with a polite, bounded retry loop.

    Each call waits a randomized delay before the first request, then makes
    up to ``config.max_attempts`` sequential attempts. 403 and 404 end the
    loop immediately; any other failure is retried after a backoff that
    grows with the attempt number plus jitter.

    Usage:
        fetcher = Fetcher()
        result = await fetcher.fetch("https://www.69shuba.com/txt/1/1")
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        *,
        sleep: SleepFunc | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()

    def pre_request_delay(self) -> float:
        return self.config.pre_request_delay + self._rng.uniform(
            0, self.config.pre_request_jitter
        )

    def backoff_delay(self, attempt: int) -> float:
        """Delay before *attempt* (2 or later).

        Jitter is smaller than the backoff step, so delays strictly increase.
        """
        return self.config.retry_backoff * attempt + self._rng.uniform(
            0, self.config.retry_jitter
        )

    async def fetch(self, url: str) -> FetchResult:
        """Fetch *url* and return its raw bytes and headers.

        Args:
            url: Validated http(s) URL

        Returns:
            FetchResult with a status code in [200, 400)

        Raises:
            PermanentFetchError: On HTTP 403 or 404 (no retry)
            FetchRetriesExhaustedError: When every attempt failed
            EmptyResponseError: When the server returned an empty body
        """
        await self._sleep(self.pre_request_delay())

        max_attempts = self.config.max_attempts
        kind = FailureKind.REQUEST
        status_code: int | None = None
        cause: Exception | None = None

        async with httpx.AsyncClient(
            headers=BROWSER_HEADERS,
            timeout=httpx.Timeout(self.config.timeout_seconds),
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
        ) as client:
            for attempt in range(1, max_attempts + 1):
                if attempt > 1:
                    delay = self.backoff_delay(attempt)
                    logger.info(
                        "Retrying %s in %.1fs (attempt %d/%d)",
                        url,
                        delay,
                        attempt,
                        max_attempts,
                    )
                    await self._sleep(delay)

                try:
                    response = await client.get(url)
                except httpx.TimeoutException as e:
                    kind, status_code, cause = FailureKind.TIMEOUT, None, e
                except httpx.ConnectError as e:
                    kind, status_code, cause = FailureKind.CONNECTION, None, e
                except httpx.RequestError as e:
                    kind, status_code, cause = FailureKind.REQUEST, None, e
                else:
                    if 200 <= response.status_code < 400:
                        return self._build_result(response, url, attempt)
                    if response.status_code in PERMANENT_STATUSES:
                        logger.warning(
                            "HTTP %d from %s, not retrying", response.status_code, url
                        )
                        raise PermanentFetchError(
                            response.status_code, url=url, attempts=attempt
                        )
                    kind, status_code, cause = (
                        FailureKind.HTTP_STATUS,
                        response.status_code,
                        None,
                    )

                logger.warning(
                    "Attempt %d/%d for %s failed: %s%s",
                    attempt,
                    max_attempts,
                    url,
                    kind.value,
                    f" ({status_code})" if status_code is not None else f" ({cause})",
                )

        raise FetchRetriesExhaustedError(
            kind,
            url=url,
            status_code=status_code,
            attempts=max_attempts,
            cause=cause,
        )

    def _build_result(self, response: httpx.Response, url: str, attempt: int) -> FetchResult:
        if not response.content:
            raise EmptyResponseError(
                url=url, status_code=response.status_code, attempts=attempt
            )
        logger.info(
            "Fetched %s: HTTP %d, %d bytes (attempt %d)",
            url,
            response.status_code,
            len(response.content),
            attempt,
        )
        return FetchResult(
            raw_bytes=response.content,
            headers={name.lower(): value for name, value in response.headers.items()},
            final_url=str(response.url),
            status_code=response.status_code,
        )
